import pytest

from playerbot.main import main


def test_main_prints_decision(tmp_path, capsys):
    level_file = tmp_path / "level.txt"
    level_file.write_text("...\n.@m\n...\n")
    assert main([str(level_file)]) == 0
    out = capsys.readouterr().out
    assert "state: attacking" in out
    assert "turn:  attack east" in out


def test_main_prints_cost_map(tmp_path, capsys):
    level_file = tmp_path / "level.txt"
    level_file.write_text("#....\n.@..E\n.....\n")
    assert main([str(level_file), "--costs", "--health", "90"]) == 0
    out = capsys.readouterr().out
    assert "###" in out
    assert "[" in out


def test_main_reports_missing_level(tmp_path):
    assert main([str(tmp_path / "nope.txt")]) == 1


def test_main_accepts_json_logs(tmp_path, capsys):
    level_file = tmp_path / "level.txt"
    level_file.write_text("S..\n...\n..E\n")
    assert main([str(level_file), "--json-logs", "--log-level", "ERROR"]) == 0
    assert "state: idle" in capsys.readouterr().out


def test_main_rejects_health_out_of_range(tmp_path, capsys):
    level_file = tmp_path / "level.txt"
    level_file.write_text("@..\n..E\n")
    with pytest.raises(SystemExit) as excinfo:
        main([str(level_file), "--health", "150"])
    assert excinfo.value.code == 2
    assert "--health" in capsys.readouterr().err
