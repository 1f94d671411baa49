"""Canonical section labels for datacard lines.

Maps a SectionIndex plus the document-wide "has a shapes block" flag to one
of a closed set of labels. Every consumer (alignment, outline, keyword
ranking) keys on these labels, never on raw block counts.

Canonical slots:
  -1  pre_header   — comment blocks above the imax/jmax/kmax header
   0  header
   1  shapes       — optional
   2  channels     — bin / observation
   3  processes    — bin / process / rate
   4  systematics
   *  other
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from datacard.document import DocumentSource, as_document
from datacard.patterns import match_shapes
from datacard.segmenter import SectionIndex, find_header, segment

type CanonicalSection = Literal[
    "pre_header", "header", "shapes", "channels", "processes", "systematics", "other",
]

SECTION_PRE_HEADER: CanonicalSection = "pre_header"
SECTION_HEADER: CanonicalSection = "header"
SECTION_SHAPES: CanonicalSection = "shapes"
SECTION_CHANNELS: CanonicalSection = "channels"
SECTION_PROCESSES: CanonicalSection = "processes"
SECTION_SYSTEMATICS: CanonicalSection = "systematics"
SECTION_OTHER: CanonicalSection = "other"

PRE_HEADER_SLOT = -1

_SLOT_TO_SECTION: dict[int, CanonicalSection] = {
    PRE_HEADER_SLOT: SECTION_PRE_HEADER,
    0: SECTION_HEADER,
    1: SECTION_SHAPES,
    2: SECTION_CHANNELS,
    3: SECTION_PROCESSES,
    4: SECTION_SYSTEMATICS,
}

PRIMARY_KEYWORDS: dict[CanonicalSection, frozenset[str]] = {
    SECTION_HEADER: frozenset({"imax", "jmax", "kmax"}),
    SECTION_SHAPES: frozenset({"shapes"}),
    SECTION_CHANNELS: frozenset({"bin", "observation"}),
    SECTION_PROCESSES: frozenset({"bin", "process", "rate"}),
    SECTION_SYSTEMATICS: frozenset({"lnN", "gmN", "lnU", "shape", "rateParam", "discrete"}),
}


@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    """A line's SectionIndex together with its canonical label."""

    line_number: int
    index: SectionIndex
    slot: int                  # Numeric canonical value; -1 for pre_header
    section: CanonicalSection


def detect(document: DocumentSource) -> bool:
    """True when the imax/jmax/kmax header appears anywhere in the document."""
    return find_header(document) is not None


def has_shapes_block(document: DocumentSource) -> bool:
    """True iff some line's leading token is ``shapes`` (any case)."""
    return any(match_shapes(line) is not None for line in as_document(document).lines)


def canonical_slot(index: SectionIndex, has_shapes: bool) -> int:
    """Numeric canonical value for a SectionIndex.

    Without a shapes block every slot after the header is shifted by
    ``header_block_ordinal + 1`` so channels/processes/systematics land on
    the same numbers as when the shapes block is present.
    """
    if index.is_pre_header:
        return PRE_HEADER_SLOT
    relative = index.raw_ordinal - index.header_block_ordinal
    if has_shapes:
        return relative
    if relative == 0:
        return 0
    return relative + index.header_block_ordinal + 1


def section_for_slot(slot: int) -> CanonicalSection:
    return _SLOT_TO_SECTION.get(slot, SECTION_OTHER)


def canonical_section(index: SectionIndex, has_shapes: bool) -> CanonicalSection:
    """Map a SectionIndex to its canonical label. Pure and total."""
    return section_for_slot(canonical_slot(index, has_shapes))


def primary_keywords(section: CanonicalSection) -> frozenset[str]:
    """Keywords that characterize ``section`` (empty for pre_header/other)."""
    return PRIMARY_KEYWORDS.get(section, frozenset())


def classify_line(
    document: DocumentSource,
    line_number: int,
    *,
    has_shapes: bool | None = None,
) -> ClassifiedLine:
    """SectionIndex and canonical label for one line."""
    doc = as_document(document)
    index = segment(doc).section_index(line_number)
    if has_shapes is None:
        has_shapes = has_shapes_block(doc)
    slot = canonical_slot(index, has_shapes)
    return ClassifiedLine(
        line_number=line_number,
        index=index,
        slot=slot,
        section=section_for_slot(slot),
    )


def section_line_range(
    document: DocumentSource,
    section: CanonicalSection,
) -> tuple[int, int] | None:
    """First and last content line of the blocks labelled ``section``.

    Opening dividers are excluded. Blank blocks are skipped. Returns None
    when no block carries the label.
    """
    doc = as_document(document)
    seg = segment(doc)
    if seg.line_count == 0:
        return None
    has_shapes = has_shapes_block(doc)

    start: int | None = None
    end: int | None = None
    for block in seg.blocks:
        if block.blank:
            continue
        label = canonical_section(seg.section_index(block.content_start), has_shapes)
        if label != section:
            continue
        if start is None:
            start = block.content_start
        end = block.end
    if start is None or end is None:
        return None
    return start, end
