import logging
import structlog
from structlog.stdlib import add_log_level, add_logger_name


def setup_logging(level: int = logging.INFO, json_output: bool = False) -> None:
    """Configure structlog over standard logging.

    The controller logs every decision as key/value events ("Bot state
    transition" with ``from_state``/``to_state``, "Bot turn decided" with
    ``state``, ``turn``, ``health`` and ``location``).  With ``json_output`` each
    event becomes one JSON line, so a host replaying a run can load the bot's
    decisions as data instead of scraping the console rendering.  Locations are
    serialised through ``str``.
    """
    logging.basicConfig(level=level, format="%(message)s")
    renderer = (
        structlog.processors.JSONRenderer(default=str)
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
