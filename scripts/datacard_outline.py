#!/usr/bin/env python3
"""Dump the block structure of a datacard as JSON.

Usage:
    python3 scripts/datacard_outline.py datacard.txt
    python3 scripts/datacard_outline.py datacard.txt --line 12 --vocabulary my_keywords.json

Output (stdout, JSON):
    detected       — imax/jmax/kmax header found
    has_shapes     — a shapes line is present
    header_line    — first header line, or null
    blocks         — every block with raw ordinal and canonical section
    outline        — non-blank blocks with labels
    folding        — fold ranges between dividers
    line           — (with --line) section index and ranked keywords at that line

Human messages go to stderr.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from datacard.classifier import canonical_section, classify_line, detect, has_shapes_block
from datacard.document import TextDocument
from datacard.outline import folding_ranges, outline, rank_keywords
from datacard.segmenter import segment
from datacard.vocabulary import KeywordVocabulary, load_default_vocabulary

log = logging.getLogger("datacard_outline")


def dump_json(obj: Any) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()


def build_report(
    doc: TextDocument,
    vocabulary: KeywordVocabulary,
    line_number: int | None = None,
) -> dict[str, Any]:
    seg = segment(doc)
    has_shapes = has_shapes_block(doc)

    blocks: list[dict[str, Any]] = []
    for block, ordinal in zip(seg.blocks, seg.block_ordinals):
        entry: dict[str, Any] = {
            "start": block.start,
            "end": block.end,
            "blank": block.blank,
            "raw_ordinal": ordinal,
            "section": None,
        }
        if not block.blank:
            index = seg.section_index(block.content_start)
            entry["section"] = canonical_section(index, has_shapes)
        blocks.append(entry)

    report: dict[str, Any] = {
        "path": str(doc.path) if doc.path else None,
        "detected": detect(doc),
        "has_shapes": has_shapes,
        "header_line": seg.header_line,
        "blocks": blocks,
        "outline": [
            {"section": e.section, "start": e.start, "end": e.end, "label": e.label}
            for e in outline(doc)
        ],
        "folding": [[r.start, r.end] for r in folding_ranges(doc)],
    }

    if line_number is not None:
        classified = classify_line(doc, line_number, has_shapes=has_shapes)
        report["line"] = {
            "line": line_number,
            "raw_ordinal": classified.index.raw_ordinal,
            "header_block_ordinal": classified.index.header_block_ordinal,
            "is_pre_header": classified.index.is_pre_header,
            "section": classified.section,
            "keywords": rank_keywords(doc, line_number, vocabulary),
        }
    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dump the block structure of a datacard as JSON.")
    parser.add_argument("path", type=Path, help="Datacard text file")
    parser.add_argument("--line", type=int, default=None, help="Also classify this 0-based line")
    parser.add_argument(
        "--vocabulary",
        type=Path,
        default=None,
        help="Keyword vocabulary JSON (default: bundled keywords.json)",
    )
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    if not args.path.is_file():
        print(f"File not found: {args.path}", file=sys.stderr)
        return 2

    try:
        vocabulary = (
            KeywordVocabulary.from_json(args.vocabulary)
            if args.vocabulary is not None
            else load_default_vocabulary()
        )
    except (OSError, ValueError) as exc:
        print(f"Failed to load vocabulary: {exc}", file=sys.stderr)
        return 2

    doc = TextDocument.from_path(args.path)
    if args.line is not None and not 0 <= args.line < doc.line_count:
        print(f"--line {args.line} outside 0..{doc.line_count - 1}", file=sys.stderr)
        return 2

    report = build_report(doc, vocabulary, args.line)
    if not report["detected"]:
        log.info("%s has no imax/jmax/kmax header; not a datacard", args.path)
    dump_json(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
