import pytest

from automation.sudoku_editor import storage
from automation.sudoku_editor.__main__ import parse_args
from automation.sudoku_editor.solver_client import DEFAULT_ENDPOINT


def test_write_text_creates_parents_and_leaves_no_temp(tmp_path):
    target = tmp_path / "out" / "grid.html"
    written = storage.write_text("<html></html>", target)

    assert written == target.resolve()
    assert target.read_text(encoding="utf-8") == "<html></html>"
    assert [p.name for p in target.parent.iterdir()] == ["grid.html"]


def test_write_text_overwrites(tmp_path):
    target = tmp_path / "grid.html"
    storage.write_text("first", target)
    storage.write_text("second", target)
    assert target.read_text(encoding="utf-8") == "second"


def test_cli_defaults():
    args = parse_args([])
    assert args.endpoint == DEFAULT_ENDPOINT
    assert (args.boxes_per_row, args.boxes_per_column) == (3, 3)
    assert args.no_preview is False


def test_cli_overrides():
    args = parse_args([
        "--endpoint", "http://example.test/solve",
        "--boxes-per-row", "2",
        "--boxes-per-column", "4",
        "--no-preview",
        "--export", "x.html",
    ])
    assert args.endpoint == "http://example.test/solve"
    assert (args.boxes_per_row, args.boxes_per_column) == (2, 4)
    assert args.no_preview is True
    assert args.export == "x.html"


def test_write_text_defaults_to_sudoku_html(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    written = storage.write_text("page")
    assert written == (tmp_path / "sudoku.html").resolve()


@pytest.mark.parametrize("flag", ["--boxes-per-row", "--boxes-per-column"])
@pytest.mark.parametrize("value", ["0", "abc"])
def test_cli_rejects_unusable_box_counts(flag, value):
    with pytest.raises(SystemExit):
        parse_args([flag, value])
