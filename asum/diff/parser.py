"""Split a unified git diff into per-file segments.

Contains:
- DiffSegment: One file's portion of a diff
- split_segments: Split raw diff text at each 'diff --git' header
"""

import re
from dataclasses import dataclass
from typing import Optional

DIFF_HEADER_PREFIX = "diff --git "

_HEADER_RE = re.compile(r'^diff --git "?a/(?P<old>.+?)"? "?b/(?P<new>.+?)"?$')


@dataclass(frozen=True)
class DiffSegment:
    """A contiguous slice of the diff belonging to one file.

    Attributes:
        text: The raw segment text, including its header line.
        path: The file path (new path for renames), or None for text that
            is not preceded by a 'diff --git' header.
        is_binary: True if git reported the change as binary.
    """

    text: str
    path: Optional[str] = None
    is_binary: bool = False

    @property
    def size(self) -> int:
        """Size of the segment in UTF-8 bytes."""
        return len(self.text.encode("utf-8"))

    @property
    def label(self) -> str:
        """Display name used in logs and truncation listings."""
        return self.path or "(unnamed)"


def _clean_path(raw: str) -> str:
    """Normalize a path taken from a '---' or '+++' line."""
    path = raw.rstrip("\n").split("\t", 1)[0].strip().strip('"')
    if path.startswith(("a/", "b/")):
        path = path[2:]
    return path


def _extract_path(lines: list[str]) -> Optional[str]:
    """Find the file path of a segment that starts with a git header."""
    old_path = None
    new_path = None

    for line in lines[1:]:
        if line.startswith("@@"):
            break
        if line.startswith("+++ "):
            new_path = _clean_path(line[4:])
        elif line.startswith("--- "):
            old_path = _clean_path(line[4:])

    if new_path and new_path != "/dev/null":
        return new_path
    if old_path and old_path != "/dev/null":
        return old_path

    # Binary and mode-only changes have no ---/+++ lines
    header = lines[0].rstrip("\n")
    match = _HEADER_RE.match(header)
    if match:
        return match.group("new")
    return header[len(DIFF_HEADER_PREFIX):].strip() or None


def _is_binary(lines: list[str]) -> bool:
    for line in lines:
        stripped = line.strip()
        if stripped == "GIT binary patch":
            return True
        if stripped.startswith("Binary files ") and stripped.endswith(" differ"):
            return True
    return False


def _make_segment(lines: list[str]) -> DiffSegment:
    path = _extract_path(lines) if lines[0].startswith(DIFF_HEADER_PREFIX) else None
    return DiffSegment(text="".join(lines), path=path, is_binary=_is_binary(lines))


def split_segments(raw_diff: str) -> list[DiffSegment]:
    """Split a raw diff into per-file segments, preserving order.

    Text before the first 'diff --git' header (or a diff that has no git
    headers at all) becomes a single segment without a path.

    Args:
        raw_diff: The raw diff text.

    Returns:
        The segments; concatenating their text reproduces the input.
    """
    segments: list[DiffSegment] = []
    current: list[str] = []

    for line in raw_diff.splitlines(keepends=True):
        if line.startswith(DIFF_HEADER_PREFIX) and current:
            segments.append(_make_segment(current))
            current = []
        current.append(line)

    if current:
        segments.append(_make_segment(current))

    return segments
