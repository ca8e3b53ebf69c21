import pytest

from crucible.app.cli import main
from crucible.app.config import MAP_DIR

SAMPLE = str(MAP_DIR / "01_sample.txt")
UNFORTUNATE = str(MAP_DIR / "02_unfortunate.txt")


def test_small_by_default(capsys, monkeypatch):
    monkeypatch.delenv("CRUCIBLE_REGIME", raising=False)
    assert main([SAMPLE]) == 0
    assert capsys.readouterr().out.strip() == "Total heat loss: 102"


def test_ultra_with_heuristic_frontier(capsys):
    assert main([UNFORTUNATE, "--regime", "ultra", "--frontier", "heuristic"]) == 0
    assert capsys.readouterr().out.strip() == "Total heat loss: 71"


def test_both_regimes(capsys):
    assert main([SAMPLE, "--regime", "both"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["[small] Total heat loss: 102", "[ultra] Total heat loss: 94"]


def test_show_path(capsys):
    assert main([UNFORTUNATE, "--regime", "ultra", "--show-path"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Total heat loss: 71"
    assert lines[1].split()[-1] == "11,4"


def test_missing_file(capsys, tmp_path):
    assert main([str(tmp_path / "nope.txt")]) == 1
    assert capsys.readouterr().err.startswith("Could not open file:")


def test_bad_city(capsys, tmp_path):
    p = tmp_path / "bad.txt"
    p.write_text("12\n3?\n")
    assert main([str(p)]) == 1
    assert capsys.readouterr().err.startswith("Could not parse city:")


def test_no_path(capsys, tmp_path):
    p = tmp_path / "strip.txt"
    p.write_text("111\n")
    assert main([str(p), "--regime", "ultra"]) == 1
    assert "No path found" in capsys.readouterr().err


def test_goal_outside_city(capsys):
    assert main([SAMPLE, "--goal", "40,40"]) == 1
    assert capsys.readouterr().err.startswith("Invalid start or goal:")


def test_budget_exhausted(capsys):
    assert main([SAMPLE, "--regime", "ultra", "--max-expansions", "3"]) == 1
    assert capsys.readouterr().err.startswith("Search aborted:")


@pytest.mark.parametrize("level", ["root", "basic_format"])
def test_log_level_must_be_a_level_name(capsys, level):
    with pytest.raises(SystemExit) as exc:
        main([SAMPLE, "--log-level", level])
    assert exc.value.code == 2


def test_log_level_is_case_insensitive(capsys):
    assert main([SAMPLE, "--log-level", "error"]) == 0


@pytest.mark.parametrize("flag,value", [
    ("--max-expansions", "0"),
    ("--max-expansions", "-4"),
    ("--max-time", "0"),
    ("--max-time", "soon"),
])
def test_budgets_must_be_positive(capsys, flag, value):
    with pytest.raises(SystemExit) as exc:
        main([SAMPLE, flag, value])
    assert exc.value.code == 2
