"""Block segmentation for datacards.

Splits a document into blocks at divider lines and assigns every line a
SectionIndex: how many non-blank blocks precede it, where the header block
sits, and whether the line comes before the header.

3-phase approach:
    1. Find divider lines (3+ dashes) and the imax/jmax/kmax header marker.
    2. Cut [0, line_count) into blocks at the dividers; flag blank blocks.
    3. Count non-blank blocks to get each block's raw ordinal.

A divider belongs to the block it opens, so blocks partition the document
with no gap or overlap. Block 0 (lines before the first divider) has no
opening divider and is omitted when the document starts with a divider.
"""
from __future__ import annotations

import logging
import weakref
from bisect import bisect_right
from collections.abc import Sequence
from dataclasses import dataclass

from datacard.document import DocumentSource, TextDocument, as_document
from datacard.patterns import is_blank, is_divider, match_header_prefix

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Block:
    """A run of lines between two dividers (or the document edges)."""

    start: int                 # First line (the opening divider, if any)
    end: int                   # Last line, inclusive
    opens_with_divider: bool
    blank: bool                # True iff every content line is empty after trimming

    @property
    def content_start(self) -> int:
        return self.start + 1 if self.opens_with_divider else self.start


@dataclass(frozen=True, slots=True)
class SectionIndex:
    """Position of one line relative to the document's non-blank blocks."""

    raw_ordinal: int            # Non-blank blocks strictly before this line's block
    header_block_ordinal: int   # raw_ordinal of the header's block (0 without header)
    is_pre_header: bool


@dataclass(frozen=True, slots=True)
class Segmentation:
    """Everything derived from one scan of a document version."""

    version: int
    line_count: int
    dividers: tuple[int, ...]
    blocks: tuple[Block, ...]
    block_starts: tuple[int, ...]     # Sorted, parallel to ``blocks``
    block_ordinals: tuple[int, ...]   # raw ordinal per block, parallel to ``blocks``
    header_line: int | None
    header_block: int | None          # Index into ``blocks``

    @property
    def header_block_ordinal(self) -> int:
        if self.header_block is None:
            return 0
        return self.block_ordinals[self.header_block]

    def block_index(self, line_number: int) -> int:
        """Index of the block containing ``line_number``. O(log blocks)."""
        if line_number < 0 or line_number >= self.line_count:
            raise IndexError(
                f"Line {line_number} out of range (0..{self.line_count - 1})"
            )
        return bisect_right(self.block_starts, line_number) - 1

    def section_index(self, line_number: int) -> SectionIndex:
        idx = self.block_index(line_number)
        is_pre_header = (
            self.header_line is not None
            and self.header_block != 0
            and line_number < self.header_line
        )
        return SectionIndex(
            raw_ordinal=self.block_ordinals[idx],
            header_block_ordinal=self.header_block_ordinal,
            is_pre_header=is_pre_header,
        )


# ---------------------------------------------------------------------------
# Phase 1 -- dividers and header
# ---------------------------------------------------------------------------


def find_dividers(document: DocumentSource) -> list[int]:
    """Return the line indices of all divider lines, in order."""
    doc = as_document(document)
    return [i for i, line in enumerate(doc.lines) if is_divider(line)]


def find_header(document: DocumentSource) -> int | None:
    """Return the first line starting an imax/jmax/kmax run, or None.

    None is the signal that the document is not a datacard; it is never
    raised as an error.
    """
    lines = as_document(document).lines
    for i in range(len(lines) - 2):
        if (
            match_header_prefix(lines[i], 0)
            and match_header_prefix(lines[i + 1], 1)
            and match_header_prefix(lines[i + 2], 2)
        ):
            return i
    return None


# ---------------------------------------------------------------------------
# Phase 2 -- blocks
# ---------------------------------------------------------------------------


def compute_blocks(
    dividers: Sequence[int],
    line_count: int,
    lines: Sequence[str],
) -> list[Block]:
    """Cut ``[0, line_count)`` into blocks using ``dividers`` as separators."""
    if line_count <= 0:
        return []

    spans: list[tuple[int, int, bool]] = []
    first_divider = dividers[0] if dividers else line_count
    if first_divider > 0:
        spans.append((0, first_divider - 1, False))
    for k, d in enumerate(dividers):
        end = dividers[k + 1] - 1 if k + 1 < len(dividers) else line_count - 1
        spans.append((d, end, True))

    blocks: list[Block] = []
    for start, end, opens in spans:
        content_start = start + 1 if opens else start
        blank = all(is_blank(lines[i]) for i in range(content_start, end + 1))
        blocks.append(Block(start=start, end=end, opens_with_divider=opens, blank=blank))
    return blocks


def _block_ordinals(blocks: Sequence[Block]) -> list[int]:
    ordinals: list[int] = []
    seen = 0
    for block in blocks:
        ordinals.append(seen)
        if not block.blank:
            seen += 1
    return ordinals


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

_CACHE: weakref.WeakKeyDictionary[TextDocument, Segmentation] = weakref.WeakKeyDictionary()


def segment(document: DocumentSource) -> Segmentation:
    """Scan a document once and return its segmentation.

    Results are memoized per TextDocument and invalidated when its version
    changes, so repeated per-line queries do not rescan the whole document.
    """
    doc = as_document(document)
    cached = _CACHE.get(doc)
    if cached is not None and cached.version == doc.version:
        return cached

    lines = doc.lines
    dividers = find_dividers(doc)
    blocks = compute_blocks(dividers, len(lines), lines)
    ordinals = _block_ordinals(blocks)
    header_line = find_header(doc)

    starts = tuple(b.start for b in blocks)
    header_block: int | None = None
    if header_line is not None:
        header_block = bisect_right(starts, header_line) - 1

    seg = Segmentation(
        version=doc.version,
        line_count=len(lines),
        dividers=tuple(dividers),
        blocks=tuple(blocks),
        block_starts=starts,
        block_ordinals=tuple(ordinals),
        header_line=header_line,
        header_block=header_block,
    )
    log.debug(
        "segmented %d lines: %d dividers, %d blocks (%d blank), header at %s",
        len(lines), len(dividers), len(blocks),
        sum(1 for b in blocks if b.blank), header_line,
    )
    _CACHE[doc] = seg
    return seg


def section_index(
    document: DocumentSource,
    line_number: int,
) -> SectionIndex:
    """Compute the SectionIndex of one line."""
    return segment(document).section_index(line_number)
