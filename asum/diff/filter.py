"""Diff filtering and truncation.

Contains:
- DEFAULT_IGNORE_PATTERNS: Built-in patterns for files left out of the payload
- FilteredDiff: The bounded payload sent to the model
- should_ignore: Check if a path matches any ignore pattern
- filter_diff: Drop ignored/binary segments and truncate at segment boundaries
"""

import fnmatch
import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Sequence

from asum.config import AsumConfig
from asum.diff.parser import DiffSegment, split_segments

logger = logging.getLogger(__name__)


# Files that are auto-generated, binary or vendored and never worth describing
DEFAULT_IGNORE_PATTERNS = [
    # Lock files
    "Cargo.lock",
    "package-lock.json",
    "npm-shrinkwrap.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "Pipfile.lock",
    "uv.lock",
    "Gemfile.lock",
    "composer.lock",
    "go.sum",
    "*-lock.json",
    "*.lock",
    # Minified and generated artifacts
    "*.min.js",
    "*.min.css",
    "*.map",
    "*.pyc",
    "*.pyo",
    "*.class",
    "*.so",
    "*.dylib",
    "*.dll",
    "*.exe",
    "*.jar",
    # Vendored and build output directories
    "vendor/*",
    "*/vendor/*",
    "node_modules/*",
    "*/node_modules/*",
    "dist/*",
    "__pycache__/*",
    "*/__pycache__/*",
    "*.egg-info/*",
]

EMPTY_DIFF_REASON = "No staged changes to summarize."
ALL_IGNORED_REASON = "Only ignored, binary or generated files are staged; nothing to summarize."

TRUNCATION_MARKER = "\n[asum: diff truncated, {files} file(s) / {bytes} byte(s) omitted]\n"
_LISTING_HEADER = "Changed files (diff too large to include):\n"


@dataclass(frozen=True)
class FilteredDiff:
    """The diff payload after filtering and truncation.

    An instance with ``empty_reason`` set is the "nothing to summarize" signal:
    the raw diff was empty or every segment was filtered out.
    """

    text: str = ""
    included_files: tuple[str, ...] = ()
    ignored_files: tuple[str, ...] = ()
    omitted_files: tuple[str, ...] = ()
    omitted_bytes: int = 0
    truncated: bool = False
    empty_reason: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.empty_reason is not None

    @property
    def size(self) -> int:
        """Size of the payload in UTF-8 bytes."""
        return len(self.text.encode("utf-8"))


def should_ignore(path: str, patterns: Sequence[str]) -> bool:
    """Check if a file should be left out based on patterns.

    Supports exact names and glob patterns (*.lock, vendor/*, ...), matched
    against both the full path and the basename.

    Args:
        path: The file path to check.
        patterns: List of patterns to match against.

    Returns:
        True if the file should be ignored.
    """
    name = PurePosixPath(path).name
    for pattern in patterns:
        if path == pattern:
            return True
        if fnmatch.fnmatch(path, pattern):
            return True
        if fnmatch.fnmatch(name, pattern):
            return True
    return False


def _matches_extensions(path: str, extensions: Sequence[str]) -> bool:
    """Check a path against the optional git_extensions allow-list."""
    if not extensions:
        return True
    name = PurePosixPath(path).name
    return any(fnmatch.fnmatch(name, ext) or fnmatch.fnmatch(path, ext) for ext in extensions)


def get_ignore_patterns(config: AsumConfig) -> list[str]:
    """Built-in ignore patterns extended with the configured ones."""
    return DEFAULT_IGNORE_PATTERNS + list(config.general.ignore_patterns)


def _marker(files: int, omitted_bytes: int) -> str:
    return TRUNCATION_MARKER.format(files=files, bytes=omitted_bytes)


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _path_listing(segments: list[DiffSegment], budget: int) -> str:
    """List changed paths, whole lines only, within budget bytes."""
    if _byte_len(_LISTING_HEADER) > budget:
        return ""

    listing = _LISTING_HEADER
    for segment in segments:
        line = f"  {segment.label}\n"
        if _byte_len(listing) + _byte_len(line) > budget:
            break
        listing += line
    return listing


def _truncate(segments: list[DiffSegment], ignored: list[str], limit: int) -> FilteredDiff:
    """Fit whole segments into limit bytes, appending a truncation marker."""
    total = sum(s.size for s in segments)

    if total <= limit:
        return FilteredDiff(
            text="".join(s.text for s in segments),
            included_files=tuple(s.label for s in segments),
            ignored_files=tuple(ignored),
        )

    logger.info("Diff is too large (%d bytes), truncating to %d bytes for AI...", total, limit)
    logger.info("You can increase this limit by updating 'max_diff_length' in your config.")

    # The final marker can only be shorter than this worst case
    reserve = _byte_len(_marker(len(segments), total))
    budget = limit - reserve

    included: list[DiffSegment] = []
    used = 0
    for segment in segments:
        if used + segment.size > budget:
            break
        included.append(segment)
        used += segment.size

    omitted = segments[len(included):]
    omitted_bytes = total - used

    if included:
        body = "".join(s.text for s in included)
    else:
        body = _path_listing(segments, budget)

    marker = _marker(len(omitted), omitted_bytes)
    if budget < 0:
        # Limit smaller than the marker itself: send as much of the marker as fits
        marker = marker.encode("utf-8")[:limit].decode("utf-8", errors="ignore")

    return FilteredDiff(
        text=body + marker,
        included_files=tuple(s.label for s in included),
        ignored_files=tuple(ignored),
        omitted_files=tuple(s.label for s in omitted),
        omitted_bytes=omitted_bytes,
        truncated=True,
    )


def filter_diff(raw_diff: str, config: AsumConfig) -> FilteredDiff:
    """Filter a raw diff into a bounded payload.

    Segments for ignored paths, paths outside the git_extensions allow-list and
    binary changes are dropped. Survivors keep their order. If they exceed
    max_diff_length bytes, whole segments are kept up to the last one that
    fits and a truncation marker is appended; a segment is never cut.

    Args:
        raw_diff: The raw diff text.
        config: The resolved configuration.

    Returns:
        The filtered diff; ``is_empty`` is True when there is nothing to summarize.
    """
    if not raw_diff or not raw_diff.strip():
        return FilteredDiff(empty_reason=EMPTY_DIFF_REASON)

    patterns = get_ignore_patterns(config)
    extensions = config.general.git_extensions

    kept: list[DiffSegment] = []
    ignored: list[str] = []

    for segment in split_segments(raw_diff):
        if not segment.text.strip():
            continue
        if segment.is_binary:
            logger.debug("Skipping binary change: %s", segment.label)
            ignored.append(segment.label)
            continue
        if segment.path and (
            should_ignore(segment.path, patterns)
            or not _matches_extensions(segment.path, extensions)
        ):
            logger.debug("Skipping ignored file: %s", segment.path)
            ignored.append(segment.path)
            continue
        kept.append(segment)

    if not kept:
        return FilteredDiff(ignored_files=tuple(ignored), empty_reason=ALL_IGNORED_REASON)

    return _truncate(kept, ignored, config.max_diff_length)
