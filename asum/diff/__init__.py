"""Diff filtering for asum.

Turns the raw staged diff into the bounded payload sent to the model.
"""

from asum.diff.filter import (
    ALL_IGNORED_REASON,
    DEFAULT_IGNORE_PATTERNS,
    EMPTY_DIFF_REASON,
    FilteredDiff,
    filter_diff,
    get_ignore_patterns,
    should_ignore,
)
from asum.diff.parser import DiffSegment, split_segments

__all__ = [
    "ALL_IGNORED_REASON",
    "DEFAULT_IGNORE_PATTERNS",
    "EMPTY_DIFF_REASON",
    "DiffSegment",
    "FilteredDiff",
    "filter_diff",
    "get_ignore_patterns",
    "should_ignore",
    "split_segments",
]
