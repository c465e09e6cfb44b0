"""Tests for CLI module."""

import io
import json
import logging

import pytest
import structlog

from redex import __version__
from redex.cli import TokenDumper, build_parser, main


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo the global logging setup done by main()."""
    yield
    structlog.reset_defaults()
    logging.basicConfig(handlers=[logging.NullHandler()], level=logging.WARNING, force=True)


class _TerminalInput(io.StringIO):
    def isatty(self):
        return True


class _UndecodableInput(io.StringIO):
    def read(self, *args):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")


class TestTokenDumper:
    """Tests for TokenDumper."""

    def test_dump_text(self):
        out, err = io.StringIO(), io.StringIO()
        code = TokenDumper(out=out, err=err).dump("f(x)")
        assert code == 0
        assert out.getvalue().splitlines() == [
            "0:0: symbol 'f'",
            "0:1: open paren '('",
            "0:2: symbol 'x'",
            "0:3: close paren ')'",
            "0:4: end of input ''",
        ]
        assert err.getvalue() == ""

    def test_dump_json(self):
        out = io.StringIO()
        code = TokenDumper(as_json=True, out=out, err=io.StringIO()).dump("rule")
        assert code == 0
        data = json.loads(out.getvalue())
        assert [t["kind"] for t in data] == ["rule", "end"]
        assert data[0]["loc"] == {"file": None, "row": 0, "col": 0}

    def test_invalid_token_reported(self):
        out, err = io.StringIO(), io.StringIO()
        code = TokenDumper(out=out, err=err).dump("a\n+b")
        assert code == 1
        assert err.getvalue().strip() == "1:0: error: invalid token '+'"
        assert "symbol 'b'" not in out.getvalue()

    def test_dump_file_uses_path(self, tmp_path):
        path = tmp_path / "rules.txt"
        path.write_text("swap(a)")
        out = io.StringIO()
        code = TokenDumper(out=out, err=io.StringIO()).dump_file(path)
        assert code == 0
        assert out.getvalue().startswith(f"{path}:0:0: symbol 'swap'")

    def test_dump_undecodable_file(self, tmp_path):
        """A file that is not UTF-8 is reported, not raised."""
        path = tmp_path / "binary.txt"
        path.write_bytes(b"f(\xff)")
        out, err = io.StringIO(), io.StringIO()
        code = TokenDumper(out=out, err=err).dump_file(path)
        assert code == 1
        assert err.getvalue().startswith(f"Error reading {path}: ")
        assert out.getvalue() == ""

    def test_dump_missing_file(self, tmp_path):
        err = io.StringIO()
        code = TokenDumper(out=io.StringIO(), err=err).dump_file(tmp_path / "missing.txt")
        assert code == 1
        assert "Error reading" in err.getvalue()


class TestMain:
    """Tests for the main entry point."""

    def test_expr(self, capsys):
        assert main(["-q", "-e", "swap(a, b) = pair(b, a)"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 14
        assert lines[-1] == "0:23: end of input ''"

    def test_file(self, tmp_path, capsys):
        path = tmp_path / "input.txt"
        path.write_text("done\n")
        assert main(["-q", str(path)]) == 0
        assert f"{path}:0:0: done keyword 'done'" in capsys.readouterr().out

    def test_invalid_exit_code(self, capsys):
        assert main(["-q", "-e", "a+b"]) == 1
        captured = capsys.readouterr()
        assert "0:1: error: invalid token '+'" in captured.err

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("x"))
        assert main(["-q"]) == 0
        assert "0:0: symbol 'x'" in capsys.readouterr().out

    def test_json_flag(self, capsys):
        assert main(["-q", "--json", "-e", ":"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data[0]["kind"] == "colon"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_undecodable_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", _UndecodableInput())
        assert main(["-q"]) == 1
        assert "Error reading <stdin>" in capsys.readouterr().err

    def test_terminal_stdin_prints_usage(self, monkeypatch, capsys):
        """With no input source and a terminal on stdin, show usage instead of waiting."""
        monkeypatch.setattr("sys.stdin", _TerminalInput())
        assert main(["-q"]) == 2
        captured = capsys.readouterr()
        assert captured.err.startswith("usage: redex")
        assert captured.out == ""
