"""
Row matchers.

- KeyedMatcher: aligns rows by composite key and compares matched pairs
  cell by cell
- FingerprintMatcher: set difference over row content digests, used when
  no key columns are given
"""

from .base import Deadline, Matcher
from .fingerprint import FingerprintMatcher
from .keyed import KeyedMatcher

__all__ = [
    "Deadline",
    "Matcher",
    "KeyedMatcher",
    "FingerprintMatcher",
]
