"""Line matchers for the datacard format.

Every matcher takes a single line of text and returns a structured match
(or None). Nothing here knows about documents or blocks; the segmenter and
classifier build on these primitives.

Patterns:
  divider   — ``---``, ``   -------   `` (3+ dashes, nothing else)
  header    — ``imax``/``jmax``/``kmax`` line prefixes
  shapes    — ``shapes`` as the leading token (any case)
  keyword   — a vocabulary word as a whole token
"""
from __future__ import annotations

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Match types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TokenMatch:
    """A whitespace-delimited token at a specific offset."""

    text: str
    start: int
    end: int  # Exclusive


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

_DIVIDER_RE = re.compile(r"^\s*-{3,}\s*$")

# Header markers are prefix matches on the trimmed line, as in "imax 2" or
# "imax *". No word boundary: "imaxfoo" still counts.
HEADER_PREFIXES: tuple[str, str, str] = ("imax", "jmax", "kmax")

_SHAPES_RE = re.compile(r"^\s*shapes(?:\s|$)", re.IGNORECASE)
_TOKEN_RE = re.compile(r"\S+")


# ---------------------------------------------------------------------------
# Public matchers
# ---------------------------------------------------------------------------


def is_divider(line: str) -> bool:
    return _DIVIDER_RE.match(line) is not None


def is_blank(line: str) -> bool:
    return not line.strip()


def match_header_prefix(line: str, position: int) -> bool:
    """Check whether ``line`` carries the header keyword for ``position`` (0-2)."""
    return line.strip().startswith(HEADER_PREFIXES[position])


def match_shapes(line: str) -> TokenMatch | None:
    """Match a line whose first token is ``shapes`` (case-insensitive)."""
    m = _SHAPES_RE.match(line)
    if m is None:
        return None
    start = len(line) - len(line.lstrip())
    return TokenMatch(text=line[start:start + 6], start=start, end=start + 6)


def tokenize(line: str) -> list[TokenMatch]:
    """Split a line into whitespace-delimited tokens with their offsets."""
    return [TokenMatch(m.group(0), m.start(), m.end()) for m in _TOKEN_RE.finditer(line)]


def keyword_pattern(keywords: list[str] | tuple[str, ...]) -> re.Pattern[str]:
    """Build a whole-token matcher for a keyword list.

    Longer keywords are tried first so that ``shapeN2`` wins over ``shape``.
    Token boundaries are whitespace or line ends, matching how the format
    separates fields (``imaximum`` does not match ``imax``).
    """
    if not keywords:
        return re.compile(r"(?!)")
    ordered = sorted(set(keywords), key=lambda k: (-len(k), k))
    alternation = "|".join(re.escape(k) for k in ordered)
    return re.compile(rf"(?<!\S)({alternation})(?!\S)")


def match_keywords(line: str, pattern: re.Pattern[str]) -> list[TokenMatch]:
    """Find every keyword token in ``line`` using a pattern from keyword_pattern()."""
    return [TokenMatch(m.group(1), m.start(1), m.end(1)) for m in pattern.finditer(line)]
