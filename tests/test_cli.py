"""Tests for the fatcat command line."""

import pytest

from fatcat import __version__
from fatcat.cli import ProgressLine, build_parser, main
from fatcat.aio.core import ScanStats


def make_file(path, size):
    with open(path, "wb") as fh:
        fh.truncate(size)


@pytest.fixture
def tree(tmp_path):
    make_file(tmp_path / "big.bin", 3 * 1024 * 1024)
    make_file(tmp_path / "mid.bin", 2 * 1024 * 1024)
    make_file(tmp_path / "tiny.bin", 10)
    return tmp_path


def test_parser_defaults():
    args = build_parser().parse_args([])

    assert args.path == "./"
    assert args.size == 100
    assert args.top == 20
    assert args.output is None
    assert args.verbose is False
    assert args.workers is None


def test_scan_prints_report(tree, capsys):
    code = main([str(tree), "-s", "1", "-t", "1"])

    out = capsys.readouterr().out
    assert code == 0
    assert f"fatcat {__version__}" in out
    assert "Top 1 Files" in out
    assert "big.bin" in out
    assert "mid.bin" not in out


def test_verbose_and_log_file(tree, tmp_path, capsys):
    log = tmp_path / "out.log"

    code = main([str(tree), "--size", "1", "--verbose", "--output", str(log), "-j", "2"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Statistics" in out
    assert f"Log saved: {log}" in out
    assert "big.bin" in log.read_text(encoding="utf-8")


def test_log_failure_does_not_fail_scan(tree, tmp_path, capsys):
    code = main([str(tree), "-s", "1", "-o", str(tmp_path / "nope" / "out.log")])

    captured = capsys.readouterr()
    assert code == 0
    assert "Failed to save log" in captured.err


def test_invalid_root(tmp_path, capsys):
    code = main([str(tmp_path / "missing")])

    assert code == 1
    assert "Invalid scan root" in capsys.readouterr().err


def test_invalid_top(tree, capsys):
    code = main([str(tree), "-t", "-3"])

    assert code == 1
    assert "top_n cannot be negative" in capsys.readouterr().err


def test_bad_argument_exits_2():
    with pytest.raises(SystemExit) as exc_info:
        main(["--size", "lots"])
    assert exc_info.value.code == 2


class FakeTTY:
    def __init__(self):
        self.written = []

    def isatty(self):
        return True

    def write(self, text):
        self.written.append(text)

    def flush(self):
        pass


def test_progress_line():
    stream = FakeTTY()
    progress = ProgressLine(stream)

    progress(ScanStats(files_scanned=10, dirs_scanned=3))
    progress.clear()

    assert "Scanning... 3 dirs, 10 files" in stream.written[0]
    assert stream.written[-1] == "\r\033[K"
