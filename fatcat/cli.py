#!/usr/bin/env python
"""
fatcat command line
===================

Hunt down the fat files hogging your disk space.

Usage:
    fatcat                          # Scan ./ for files >= 100 MB
    fatcat /home                    # Scan /home
    fatcat ./downloads -s 500       # Only files >= 500 MB
    fatcat -v -o result.log         # Verbose, and save a log file
"""

import argparse
import logging
import sys

from . import __version__
from .api import scan_config
from .aio.error_policies import ScanError
from .config import DEFAULT_MIN_SIZE_MB, DEFAULT_TOP_N, ScanConfig
from .report import render_report, write_log


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fatcat",
        description="Hunt down the fat files hogging your disk space.",
    )
    parser.add_argument("path", nargs="?", default="./",
                        help="Directory to scan (default: ./)")
    parser.add_argument("-s", "--size", type=float, default=DEFAULT_MIN_SIZE_MB, metavar="MB",
                        help=f"Minimum file size in MB (default: {DEFAULT_MIN_SIZE_MB})")
    parser.add_argument("-t", "--top", type=int, default=DEFAULT_TOP_N, metavar="N",
                        help=f"Show top N files (default: {DEFAULT_TOP_N})")
    parser.add_argument("-o", "--output", metavar="FILE",
                        help="Save results to log file")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show detailed statistics and per-path warnings")
    parser.add_argument("-j", "--workers", type=int, default=None, metavar="N",
                        help="Number of concurrent workers (default: CPU count)")
    parser.add_argument("--follow-file-symlinks", action="store_true",
                        help="Count symlinks to regular files by their target size")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level for diagnostics on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


class ProgressLine:
    """Rewrites a single status line on stderr while the scan runs."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr
        self.enabled = self.stream.isatty()
        self._written = False

    def __call__(self, stats):
        if not self.enabled:
            return
        self.stream.write(
            f"\r  Scanning... {stats.dirs_scanned} dirs, {stats.files_scanned} files"
        )
        self.stream.flush()
        self._written = True

    def clear(self):
        if self._written:
            self.stream.write("\r\033[K")
            self.stream.flush()
            self._written = False


def main(argv=None) -> int:
    """Run the command line tool.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    config = ScanConfig.from_megabytes(
        args.path,
        min_size_mb=args.size,
        top_n=args.top,
        worker_count=args.workers,
        follow_file_symlinks=args.follow_file_symlinks,
    )
    logger.debug("Scan configuration: %s", config)

    print()
    print(f"fatcat {__version__}")
    print()

    progress = ProgressLine()
    try:
        result = scan_config(config, progress_callback=progress, verbose=args.verbose)
    except ScanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        progress.clear()

    sys.stdout.write(render_report(result, config.min_size_bytes, verbose=args.verbose))

    if args.output:
        try:
            write_log(args.output, result, config.min_size_bytes)
        except OSError as e:
            print(f"Failed to save log '{args.output}': {e}", file=sys.stderr)
        else:
            print(f"Log saved: {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
