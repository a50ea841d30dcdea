"""Concrete enumerators and filters."""

from .filesystem import ScandirEnumerator
from .filtering import SizeThresholdFilter, passes

__all__ = [
    'ScandirEnumerator',
    'SizeThresholdFilter',
    'passes',
]
