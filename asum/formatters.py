"""Commit message parsing, normalization and rendering.

Contains:
- COMMIT_TYPES: The closed vocabulary of conventional commit types
- CommitMessage: Validated header + optional body
- normalize_response: Turn raw backend text into a CommitMessage
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

COMMIT_TYPES = (
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "chore",
    "build",
    "ci",
)

HEADER_PATTERN = re.compile(
    r"^(?P<type>[a-z]+)"
    r"(?:\((?P<scope>[^()\s][^()]*)\))?"
    r"(?P<breaking>!)?"
    r": (?P<description>\S.*)$"
)


class NormalizeError(Exception):
    """Base exception for response normalization errors."""

    pass


class InvalidFormatError(NormalizeError):
    """Raised when the backend text has no usable commit header.

    Attributes:
        raw_text: The text exactly as the backend returned it.
    """

    def __init__(self, message: str, raw_text: str):
        super().__init__(message)
        self.raw_text = raw_text


def match_header(header: str) -> Optional[re.Match]:
    """Match a header against the grammar, including the type vocabulary."""
    match = HEADER_PATTERN.match(header)
    if match and match.group("type") in COMMIT_TYPES:
        return match
    return None


class CommitMessage(BaseModel):
    """A validated conventional commit message.

    Attributes:
        header: '<type>(<scope>)?!?: <description>'.
        body: Free text after the header, or None.
    """

    model_config = ConfigDict(frozen=True)

    header: str
    body: Optional[str] = None

    @field_validator("header")
    @classmethod
    def header_must_match_grammar(cls, v: str) -> str:
        """Ensure the header follows the commit grammar."""
        v = v.strip()
        if not match_header(v):
            raise ValueError(
                f"Header must look like '<type>(<scope>): <description>' "
                f"with type one of {', '.join(COMMIT_TYPES)}: {v!r}"
            )
        return v

    @field_validator("body")
    @classmethod
    def clean_body(cls, v: Optional[str]) -> Optional[str]:
        """Drop leading blank lines and trailing whitespace."""
        if v is None:
            return None
        lines = [line.rstrip() for line in v.splitlines()]
        while lines and not lines[0]:
            lines.pop(0)
        text = "\n".join(lines).rstrip()
        return text or None

    @property
    def type(self) -> str:
        return match_header(self.header).group("type")

    @property
    def scope(self) -> Optional[str]:
        return match_header(self.header).group("scope")

    @property
    def description(self) -> str:
        return match_header(self.header).group("description")

    @property
    def breaking(self) -> bool:
        return match_header(self.header).group("breaking") is not None

    def render(self) -> str:
        """Render the message as it would be passed to 'git commit -F'.

        Example output:
            fix(parser): handle empty diff

            Adds a guard clause.
        """
        if self.body:
            return f"{self.header}\n\n{self.body}"
        return self.header

    def __str__(self) -> str:
        return self.render()


# Prompt scaffolding some models echo back around the answer
_ECHO_LINE = re.compile(r"^\s*\[?\s*(output|input diff|diff to analyze)\s*\]?\s*:?\s*$", re.IGNORECASE)
_FENCE_LINE = re.compile(r"^\s*```[\w+-]*\s*$")
_CLOSING_FENCE = re.compile(r"^\s*```\s*$")

_LIST_MARKER = re.compile(r"^(?:[-*+]|\d+[.)])\s+")
_LABEL = re.compile(r"^(?:suggested\s+)?commit(?:\s+message)?\s*:\s*", re.IGNORECASE)
_PREAMBLE = re.compile(r"^(?:here(?:'s| is| are)|sure|certainly|okay|ok|based on)\b", re.IGNORECASE)
_LEADING_WORD = re.compile(r"^([A-Za-z]+)")
_WRAPPING = "\"'`*"


def _repair_header(line: str) -> str:
    """Apply the single repair pass to a candidate header line."""
    candidate = line.strip()
    candidate = _LIST_MARKER.sub("", candidate)
    candidate = candidate.strip(_WRAPPING).strip()
    candidate = _LABEL.sub("", candidate)
    candidate = candidate.strip(_WRAPPING).strip()

    word = _LEADING_WORD.match(candidate)
    if word and word.group(1).lower() in COMMIT_TYPES:
        candidate = word.group(1).lower() + candidate[word.end():]
    return candidate


def _is_preamble(line: str) -> bool:
    stripped = line.strip().strip(_WRAPPING).strip()
    return bool(_PREAMBLE.match(stripped)) or stripped.endswith(":")


def normalize_response(raw_text: str) -> CommitMessage:
    """Normalize raw backend text into a CommitMessage.

    The first non-empty line is the header. Code fence lines and echoed
    prompt markers ('[OUTPUT]', '[INPUT DIFF]') before it are skipped. If it
    does not match the grammar, one repair pass is tried: leading preamble
    lines are skipped, then a list marker, wrapping quotes or backticks and a
    'Commit message:' label are stripped and the type is lower-cased.

    The lines after the header become the body, verbatim. The only exception
    is the closing fence of a code block opened before the header.

    Normalizing a rendered message returns an equal message.

    Args:
        raw_text: The text returned by the backend.

    Returns:
        The validated commit message.

    Raises:
        InvalidFormatError: If no valid header can be found.
    """
    lines = (raw_text or "").strip().split("\n")

    header: Optional[str] = None
    header_index: Optional[int] = None
    fenced = False
    seen_text = False

    for i, line in enumerate(lines):
        if not line.strip():
            continue
        if _FENCE_LINE.match(line):
            fenced = True
            continue
        if _ECHO_LINE.match(line):
            continue

        seen_text = True
        if match_header(line.strip()):
            header, header_index = line.strip(), i
            break
        candidate = _repair_header(line)
        if match_header(candidate):
            header, header_index = candidate, i
            break
        if not _is_preamble(line):
            break

    if not seen_text:
        raise InvalidFormatError("The model returned an empty response.", raw_text)

    if header_index is None:
        raise InvalidFormatError(
            "The model response does not start with a valid commit header "
            "('<type>(<scope>): <description>').",
            raw_text,
        )

    body_lines = lines[header_index + 1:]
    if fenced:
        while body_lines and not body_lines[-1].strip():
            body_lines.pop()
        if body_lines and _CLOSING_FENCE.match(body_lines[-1]):
            body_lines.pop()

    return CommitMessage(header=header, body="\n".join(body_lines))
