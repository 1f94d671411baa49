"""Datacard section segmentation, classification and column alignment."""

from datacard.aligner import AlignedText, AlignerConfig, AlignmentPlan, align
from datacard.classifier import (
    CanonicalSection,
    canonical_section,
    classify_line,
    detect,
    has_shapes_block,
    primary_keywords,
)
from datacard.document import LineRangeEdit, StaleEditError, TextDocument
from datacard.outline import folding_ranges, keyword_at, outline, rank_keywords
from datacard.segmenter import (
    Block,
    SectionIndex,
    compute_blocks,
    find_dividers,
    find_header,
    section_index,
    segment,
)
from datacard.types import (
    Err,
    Ok,
    OrderingError,
    PaddingUnderflowWarning,
    Result,
    SectionNotFoundError,
)
from datacard.vocabulary import KeywordVocabulary, load_default_vocabulary

__all__ = [
    "AlignedText",
    "AlignerConfig",
    "AlignmentPlan",
    "Block",
    "CanonicalSection",
    "Err",
    "KeywordVocabulary",
    "LineRangeEdit",
    "Ok",
    "OrderingError",
    "PaddingUnderflowWarning",
    "Result",
    "SectionIndex",
    "SectionNotFoundError",
    "StaleEditError",
    "TextDocument",
    "align",
    "canonical_section",
    "classify_line",
    "compute_blocks",
    "detect",
    "find_dividers",
    "find_header",
    "folding_ranges",
    "has_shapes_block",
    "keyword_at",
    "load_default_vocabulary",
    "outline",
    "primary_keywords",
    "rank_keywords",
    "section_index",
    "segment",
]
