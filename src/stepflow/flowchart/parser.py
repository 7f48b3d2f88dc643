"""Line parser: free-form plan text to raw step records.

Recognized line shapes::

    Step 1: Start
    Step 2a: Resume upload
    2b) Skills input
    Step 3: from 2a: Match jobs
    Step 4: (continue from 2a,2b) Merge results

Lines that match none of these still become steps, numbered by their
position among the non-blank lines.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..utils.logging import get_logger

logger = get_logger(__name__)

_STEP_PATTERN = re.compile(r"^(?:step\s+)?(\d+)([a-z]?)[\s.:)\-]*(.*)$", re.IGNORECASE | re.ASCII)

_TOKEN = r"\d+[a-z]?"
_TOKEN_LIST = rf"{_TOKEN}(?:\s*,\s*{_TOKEN})*"
_TOKEN_PATTERN = re.compile(r"(\d+)([a-z]?)", re.IGNORECASE | re.ASCII)
_PAREN_CONTINUATION = re.compile(
    rf"^\(\s*(?:continue\s+)?from\s+(?P<tokens>{_TOKEN_LIST})\s*\)(?P<rest>.*)$",
    re.IGNORECASE | re.ASCII,
)
_INLINE_CONTINUATION = re.compile(
    rf"^(?:continue\s+)?from\s+(?P<tokens>{_TOKEN_LIST})\b[\s.:)\-]*(?P<rest>.*)$",
    re.IGNORECASE | re.ASCII,
)


def step_id(level: int, branch: Optional[str] = None) -> str:
    return f"step-{level}{branch or ''}"


@dataclass(frozen=True)
class ContinuationToken:
    """A raw ``<level><branch?>`` reference from a "from X" clause."""

    literal_level: int
    branch: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.literal_level}{self.branch or ''}"


@dataclass(frozen=True)
class RawStep:
    literal_id: str
    text: str
    literal_level: int
    branch: Optional[str] = None
    continues_from_tokens: Tuple[ContinuationToken, ...] = ()
    line_number: int = 0
    structured: bool = True

    @property
    def is_parallel(self) -> bool:
        return self.branch is not None


def split_lines(text: str) -> List[str]:
    """Return the trimmed, non-blank lines of ``text``."""

    clean = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    if clean.startswith("\ufeff"):
        clean = clean[1:]
    return [line.strip() for line in clean.split("\n") if line.strip()]


def parse_continuation(text: str) -> Tuple[Tuple[ContinuationToken, ...], str]:
    """Strip a leading continuation clause from ``text``.

    Returns the parsed tokens (empty when there is no clause) and the
    remaining text, trimmed.
    """

    stripped = text.strip()
    match = _PAREN_CONTINUATION.match(stripped) or _INLINE_CONTINUATION.match(stripped)
    if not match:
        return (), stripped
    tokens = tuple(
        ContinuationToken(literal_level=int(number), branch=letter.lower() or None)
        for number, letter in _TOKEN_PATTERN.findall(match.group("tokens"))
    )
    return tokens, match.group("rest").strip()


def parse_line(line: str, line_number: int) -> RawStep:
    """Parse one trimmed, non-blank line; ``line_number`` is 1-based."""

    match = _STEP_PATTERN.match(line)
    if not match:
        return RawStep(
            literal_id=step_id(line_number),
            text=line,
            literal_level=line_number,
            line_number=line_number,
            structured=False,
        )

    number, letter, rest = match.groups()
    level = int(number)
    branch = letter.lower() or None
    tokens, body = parse_continuation(rest)
    return RawStep(
        literal_id=step_id(level, branch),
        text=body,
        literal_level=level,
        branch=branch,
        continues_from_tokens=tokens,
        line_number=line_number,
    )


def parse_lines(text: str) -> List[RawStep]:
    """Turn plan text into one raw step per non-blank line."""

    steps = [parse_line(line, idx) for idx, line in enumerate(split_lines(text), start=1)]
    logger.debug(
        "Parsed plan lines",
        extra={
            "steps": len(steps),
            "fallback_lines": sum(1 for step in steps if not step.structured),
        },
    )
    return steps
