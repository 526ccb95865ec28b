# ABOUTME: Tests for the command line entry point.
# ABOUTME: Runs 'convert' against local files and checks output and exit codes.

import sys

import pytest
from structlog.testing import capture_logs

from atom2opml import __main__ as cli


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    """Keep structlog output off the captured stdout."""
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    with capture_logs():
        yield


def _run(monkeypatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["atom2opml", *argv])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    return exc_info.value.code


def test_convert_to_stdout(monkeypatch, capsys, tmp_path, example_atom, example_opml):
    path = tmp_path / "feed.atom"
    path.write_text(example_atom, encoding="utf-8")

    assert _run(monkeypatch, "convert", str(path)) == 0
    assert capsys.readouterr().out == example_opml + "\n"


def test_convert_to_directory(monkeypatch, tmp_path, example_atom, example_opml):
    """An output directory receives a file named after the input."""
    path = tmp_path / "weekly.xml"
    path.write_text(example_atom, encoding="utf-8")
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    assert _run(monkeypatch, "convert", str(path), "-o", str(out_dir)) == 0
    assert (out_dir / "weekly.opml").read_text(encoding="utf-8") == example_opml


def test_convert_malformed_exits_1(monkeypatch, capsys, tmp_path):
    path = tmp_path / "bad.xml"
    path.write_text("not xml at all", encoding="utf-8")

    assert _run(monkeypatch, "convert", str(path)) == 1
    assert "does not look like an Atom feed" in capsys.readouterr().err


def test_no_command_prints_help(monkeypatch, capsys):
    assert _run(monkeypatch) == 1
    assert "usage" in capsys.readouterr().out


def test_convert_unwritable_output_exits_1(monkeypatch, capsys, tmp_path, example_atom):
    """A missing output directory is reported, not raised."""
    path = tmp_path / "feed.atom"
    path.write_text(example_atom, encoding="utf-8")
    target = tmp_path / "missing" / "out.opml"

    assert _run(monkeypatch, "convert", str(path), "-o", str(target)) == 1
    assert "could not write" in capsys.readouterr().err
    assert not target.exists()
