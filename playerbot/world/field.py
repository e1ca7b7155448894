# playerbot/world/field.py
from typing import Iterable, List, Sequence

import numpy as np
import structlog

from playerbot.constants import CellKind
from playerbot.world.primitives import Location

log = structlog.get_logger()


class Field:
    """Immutable grid of :class:`CellKind` values for one level.

    Cells are stored row-major in a ``(height, width)`` ``uint8`` array that is
    indexed ``[y, x]`` and marked read-only so a snapshot can never be altered
    by the agent.
    """

    def __init__(self, cells: np.ndarray):
        if cells.ndim != 2:
            raise TypeError("Field cells must be a 2D NumPy array.")
        height, width = cells.shape
        if width <= 0 or height <= 0:
            log.error("Invalid field dimensions", width=width, height=height)
            raise ValueError("Field width and height must be positive integers.")
        valid = np.isin(cells, [kind.value for kind in CellKind])
        if not valid.all():
            raise ValueError("Field contains unknown cell kinds.")

        self._cells: np.ndarray = np.array(cells, dtype=np.uint8, order="C")
        self._cells.setflags(write=False)
        self._width = width
        self._height = height

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[CellKind]]) -> "Field":
        """Build a field from a list of rows (``rows[y][x]``)."""
        if not rows or len({len(row) for row in rows}) != 1:
            raise ValueError("Field rows must be non-empty and equally long.")
        return cls(np.array([[int(kind) for kind in row] for row in rows]))

    @classmethod
    def open(cls, width: int, height: int) -> "Field":
        """An all-empty field, handy for tests and open arenas."""
        if width <= 0 or height <= 0:
            raise ValueError("Field width and height must be positive integers.")
        return cls(np.full((height, width), CellKind.EMPTY, dtype=np.uint8))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def cells(self) -> np.ndarray:
        """Read-only ``(height, width)`` array of cell kind codes."""
        return self._cells

    def in_bounds(self, location: Location) -> bool:
        return 0 <= location.x < self._width and 0 <= location.y < self._height

    def __getitem__(self, location: Location) -> CellKind:
        if not self.in_bounds(location):
            raise ValueError(
                f"Location {location} is outside the {self._width}x{self._height} field"
            )
        return CellKind(int(self._cells[location.y, location.x]))

    def mask(self, *kinds: CellKind) -> np.ndarray:
        """Boolean ``(height, width)`` mask of cells whose kind is in ``kinds``."""
        return np.isin(self._cells, [int(kind) for kind in kinds])

    def cells_of(self, kind: CellKind) -> List[Location]:
        """All cells of ``kind`` in row-major order."""
        ys, xs = np.nonzero(self._cells == int(kind))
        return [Location(int(x), int(y)) for y, x in zip(ys, xs)]

    def all_locations(self) -> Iterable[Location]:
        for y in range(self._height):
            for x in range(self._width):
                yield Location(x, y)
