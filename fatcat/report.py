"""Report rendering for fatcat scan results.

Turns a ScanResult into console text or a plain-text log file. Nothing in
here touches the scanner; it only reads finished results.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .aio.core import FileRecord, ScanResult


logger = logging.getLogger(__name__)

KB = 1024
MB = KB * 1024
GB = MB * 1024
TB = GB * 1024

# (label, lower bound inclusive, upper bound exclusive)
SIZE_BUCKETS = [
    (">= 1 GB", GB, None),
    ("500 MB - 1 GB", 500 * MB, GB),
    ("100 MB - 500 MB", 100 * MB, 500 * MB),
    ("< 100 MB", 0, 100 * MB),
]


def format_size(size_bytes: int) -> str:
    """Format a byte count with binary units.

    Examples:
        >>> format_size(512)
        '512 B'
        >>> format_size(1536)
        '1.50 KB'
    """
    for unit, factor in (("TB", TB), ("GB", GB), ("MB", MB), ("KB", KB)):
        if size_bytes >= factor:
            return f"{size_bytes / factor:.2f} {unit}"
    return f"{size_bytes} B"


def size_distribution(records: Iterable[FileRecord]) -> Dict[str, int]:
    """Count records per size bucket.

    Returns:
        Ordered mapping of bucket label to file count
    """
    counts = {label: 0 for label, _, _ in SIZE_BUCKETS}
    for record in records:
        for label, low, high in SIZE_BUCKETS:
            if record.size_bytes >= low and (high is None or record.size_bytes < high):
                counts[label] += 1
                break
    return counts


def format_ranking(records: List[FileRecord], width: int = 3) -> List[str]:
    """One line per record: rank, size, path."""
    return [
        f"{rank:>{width}}. {format_size(record.size_bytes):>12}  {record.path}"
        for rank, record in enumerate(records, start=1)
    ]


def _distribution_lines(records: List[FileRecord], min_size_bytes: int) -> List[str]:
    lines = []
    for label, count in size_distribution(records).items():
        # The "< 100 MB" bucket only matters for low thresholds
        if label == "< 100 MB" and min_size_bytes >= 100 * MB:
            continue
        lines.append(f"{label:<16}: {count} files")
    return lines


def render_report(result: ScanResult, min_size_bytes: int, verbose: bool = False) -> str:
    """Render the console report for a finished scan.

    Args:
        result: Finished scan
        min_size_bytes: Threshold the scan used
        verbose: Include the statistics block

    Returns:
        Report text, newline terminated
    """
    stats = result.stats
    lines = [
        f"Target: {result.root}    Min: {format_size(min_size_bytes)}",
        "",
        f"Done: {result.elapsed_seconds:.2f}s  Scanned: {stats.files_scanned}  "
        f"Found: {stats.files_matched}",
    ]

    if stats.errors:
        lines.append(f"Errors: {stats.errors} (results may be incomplete)")
    lines.append("")

    if verbose:
        lines.append("Statistics")
        lines.append("=" * 40)
        lines.append(f"{'Dirs scanned':<16}: {stats.dirs_scanned}")
        lines.append(f"{'Bytes scanned':<16}: {format_size(stats.bytes_scanned)}")
        lines.append(f"{'Total size':<16}: {format_size(result.total_size)}")
        lines.extend(_distribution_lines(result.top_files, min_size_bytes))
        lines.append("")

    if result.top_files:
        lines.append(f"Top {len(result.top_files)} Files")
        lines.append("=" * 40)
        lines.extend(format_ranking(result.top_files))
    else:
        lines.append("No files found matching criteria.")

    return "\n".join(lines) + "\n"


def write_log(log_path: str, result: ScanResult, min_size_bytes: int,
              timestamp: Optional[datetime] = None) -> None:
    """Write the scan report to a plain-text log file.

    Args:
        log_path: Destination file, overwritten if it exists
        result: Finished scan
        min_size_bytes: Threshold the scan used
        timestamp: Report time (defaults to now)

    Raises:
        OSError: If the file cannot be written
    """
    stats = result.stats
    timestamp = timestamp or datetime.now()

    lines = [
        "FATCAT - Scan Report",
        "====================",
        "",
        f"Timestamp       : {timestamp:%Y-%m-%d %H:%M:%S}",
        f"Scan Target     : {result.root}",
        f"Min Size        : {format_size(min_size_bytes)}",
        f"Files Scanned   : {stats.files_scanned}",
        f"Dirs Scanned    : {stats.dirs_scanned}",
        f"Files Found     : {stats.files_matched}",
        f"Errors          : {stats.errors}",
        f"Elapsed Time    : {result.elapsed_seconds:.2f} sec",
        "",
        f"Total Size      : {format_size(result.total_size)}",
        "",
        "Size Distribution",
        "-----------------",
    ]
    lines.extend(_distribution_lines(result.top_files, min_size_bytes))
    lines.extend([
        "",
        "All Files (sorted by size)",
        "--------------------------",
    ])
    lines.extend(format_ranking(result.top_files, width=5))

    with open(log_path, "w", encoding="utf-8") as fh:
        fh.write("\n".join(lines) + "\n")

    logger.debug("Wrote report for %d files to '%s'", len(result.top_files), log_path)
