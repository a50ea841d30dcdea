"""
Size threshold filtering.

The scheduler applies this before building a FileRecord, so files that can
never qualify never allocate one.
"""


def passes(size_bytes: int, min_size_bytes: int) -> bool:
    """Return True iff a file of ``size_bytes`` meets the threshold."""
    return size_bytes >= min_size_bytes


class SizeThresholdFilter:
    """
    Callable size predicate bound to one threshold.

    Attributes:
        min_size_bytes: Inclusive lower bound on file size
    """

    def __init__(self, min_size_bytes: int = 0):
        if min_size_bytes < 0:
            raise ValueError("min_size_bytes cannot be negative")
        self.min_size_bytes = min_size_bytes

    def __call__(self, size_bytes: int) -> bool:
        return passes(size_bytes, self.min_size_bytes)

    def __repr__(self) -> str:
        return f"SizeThresholdFilter(min_size_bytes={self.min_size_bytes})"
