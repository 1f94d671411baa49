"""Editor-facing views computed from the segmentation.

Folding ranges, outline entries, keyword ranking and keyword lookup by column.
Each is a pure function of the document (and the vocabulary, where keywords
are involved); presenting them is left to the editor.
"""
from __future__ import annotations

from dataclasses import dataclass

from datacard.classifier import (
    CanonicalSection,
    canonical_slot,
    classify_line,
    has_shapes_block,
    primary_keywords,
    section_for_slot,
)
from datacard.document import DocumentSource, as_document
from datacard.patterns import is_blank, match_keywords
from datacard.segmenter import segment
from datacard.vocabulary import KeywordVocabulary


@dataclass(frozen=True, slots=True)
class FoldingRange:
    """Fold from a divider line down to the line above the next divider."""

    start: int
    end: int  # Inclusive


@dataclass(frozen=True, slots=True)
class OutlineEntry:
    """One non-blank block in the document outline."""

    section: CanonicalSection
    slot: int
    start: int       # First content line
    end: int         # Last line, inclusive
    label: str       # First non-blank content line, stripped


def folding_ranges(document: DocumentSource) -> list[FoldingRange]:
    """Fold regions between consecutive dividers.

    A region needs at least one line between the two dividers. Text after the
    last divider is not folded.
    """
    dividers = segment(document).dividers
    ranges: list[FoldingRange] = []
    for prev, cur in zip(dividers, dividers[1:]):
        if cur - 1 > prev:
            ranges.append(FoldingRange(prev, cur - 1))
    return ranges


def outline(document: DocumentSource) -> list[OutlineEntry]:
    """List the non-blank blocks with their canonical sections."""
    doc = as_document(document)
    seg = segment(doc)
    has_shapes = has_shapes_block(doc)
    entries: list[OutlineEntry] = []
    for block in seg.blocks:
        if block.blank:
            continue
        label = ""
        for i in range(block.content_start, block.end + 1):
            if not is_blank(doc.lines[i]):
                label = doc.lines[i].strip()
                break
        slot = canonical_slot(seg.section_index(block.content_start), has_shapes)
        entries.append(OutlineEntry(
            section=section_for_slot(slot),
            slot=slot,
            start=block.content_start,
            end=block.end,
            label=label,
        ))
    return entries


def rank_keywords(
    document: DocumentSource,
    line_number: int,
    vocabulary: KeywordVocabulary,
    *,
    prefix: str = "",
) -> list[str]:
    """Vocabulary keywords for completion at ``line_number``.

    Keywords primary to the line's section come first, the rest follow in
    vocabulary order. ``prefix`` filters case-insensitively.
    """
    section = classify_line(document, line_number).section
    primary = primary_keywords(section)
    wanted = prefix.lower()
    candidates = [k for k in vocabulary.keywords if k.lower().startswith(wanted)]
    return [k for k in candidates if k in primary] + [k for k in candidates if k not in primary]


def keyword_at(line: str, column: int, vocabulary: KeywordVocabulary) -> str | None:
    """The vocabulary keyword covering character ``column`` of ``line``, if any."""
    for token in match_keywords(line, vocabulary.pattern):
        if token.start <= column < token.end:
            return token.text
    return None
