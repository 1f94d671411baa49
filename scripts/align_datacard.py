#!/usr/bin/env python3
"""Align the process and systematics columns of a datacard.

Usage:
    python3 scripts/align_datacard.py datacard.txt > aligned.txt
    python3 scripts/align_datacard.py datacard.txt --in-place
    python3 scripts/align_datacard.py datacard.txt --pad 2 --in-place --verbose

Without --in-place the aligned document goes to stdout. With --in-place the
file is rewritten and a JSON summary goes to stdout. Human messages go to
stderr.

Exit codes: 0 aligned, 1 alignment failed (nothing written), 2 not a datacard.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from datacard.aligner import AlignerConfig, align
from datacard.classifier import detect
from datacard.document import TextDocument
from datacard.types import Err

log = logging.getLogger("align_datacard")


def dump_json(obj: Any) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Align the process and systematics columns of a datacard."
    )
    parser.add_argument("path", type=Path, help="Datacard text file")
    parser.add_argument(
        "--in-place",
        action="store_true",
        help="Rewrite the file instead of printing the aligned text",
    )
    parser.add_argument(
        "--pad",
        type=int,
        default=AlignerConfig().pad,
        help="Spaces between the widest token of a column and the next column (default: 3)",
    )
    parser.add_argument(
        "--no-merge-head",
        action="store_true",
        help="Keep systematic name and type as separate columns",
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
    if args.pad < 0:
        print(f"--pad must be >= 0, got {args.pad}", file=sys.stderr)
        return 2

    doc = TextDocument.from_path(args.path)
    if not detect(doc):
        print(f"{args.path} is not a datacard (no imax/jmax/kmax header)", file=sys.stderr)
        return 2

    config = AlignerConfig(pad=args.pad, merge_systematics_head=not args.no_merge_head)
    result = align(doc, config=config)
    if isinstance(result, Err):
        print(f"Alignment failed: {result.error.message}", file=sys.stderr)
        return 1
    aligned = result.value

    if not args.in_place:
        sys.stdout.write(aligned.text)
        if not aligned.text.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    doc.apply_edit(aligned.edit)
    args.path.write_text(doc.get_text(), encoding="utf-8")
    log.info("aligned %d rows in %s", aligned.rows_aligned, args.path)
    dump_json({
        "path": str(args.path),
        "lines": [aligned.edit.start, aligned.edit.end],
        "rows_aligned": aligned.rows_aligned,
        "column_offsets": list(aligned.plan.offsets),
        "underflows": [
            {"line": u.line_number, "column": u.column, "overflow": u.overflow}
            for u in aligned.underflows
        ],
    })
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
