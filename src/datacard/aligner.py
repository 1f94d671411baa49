"""Column alignment for the processes and systematics blocks.

Reflows every content row between the first processes line and the last
systematics line so that column k starts at the same offset on every row.
Token text is copied verbatim; only the whitespace between tokens changes.

Steps:
    1. Locate the processes and systematics line ranges.
    2. Tokenize each non-blank, non-divider row into column cells.
       Systematics rows join their first two tokens (name + type) into one
       cell separated by a single space.
    3. Plan offsets: column k starts max_width(k-1) + pad after column k-1.
    4. Rebuild rows against the plan and emit one line-range edit.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from datacard.classifier import SECTION_PROCESSES, SECTION_SYSTEMATICS, section_line_range
from datacard.document import DocumentSource, LineRangeEdit, as_document
from datacard.patterns import is_blank, is_divider, tokenize
from datacard.types import (
    AlignmentError,
    ColumnSpan,
    Err,
    Ok,
    OrderingError,
    PaddingUnderflowWarning,
    Result,
    SectionNotFoundError,
)

log = logging.getLogger(__name__)

DEFAULT_PAD = 3


@dataclass(frozen=True, slots=True)
class AlignerConfig:
    """Knobs for align()."""

    pad: int = DEFAULT_PAD
    merge_systematics_head: bool = True  # Treat "name type" as one column

    def __post_init__(self) -> None:
        if self.pad < 0:
            raise ValueError(f"pad must be >= 0, got {self.pad}")


@dataclass(frozen=True, slots=True)
class AlignmentPlan:
    """Target start offset per column index, non-decreasing."""

    offsets: tuple[int, ...]
    widths: tuple[int, ...]   # Max measured width per column index
    pad: int


@dataclass(frozen=True, slots=True)
class AlignedText:
    """Successful alignment: the full new text plus the single edit producing it."""

    text: str
    edit: LineRangeEdit
    plan: AlignmentPlan
    rows_aligned: int
    underflows: tuple[PaddingUnderflowWarning, ...] = ()


# ---------------------------------------------------------------------------
# Column primitives
# ---------------------------------------------------------------------------


def column_spans(line: str) -> list[ColumnSpan]:
    """Start/end offsets of each run of non-whitespace, left to right."""
    return [ColumnSpan(t.start, t.end) for t in tokenize(line)]


def row_cells(line: str) -> list[str]:
    """Token text of each column, copied verbatim from ``line``."""
    return [line[span.start:span.end] for span in column_spans(line)]


def merge_head(cells: Sequence[str]) -> list[str]:
    """Join cells 0 and 1 with a single space. Shorter rows pass through.

    The whitespace originally between name and type is not kept; a tab there
    would be measured as one character but rendered up to the next tab stop.
    """
    if len(cells) < 2:
        return list(cells)
    return [f"{cells[0]} {cells[1]}", *cells[2:]]


def plan_columns(rows: Sequence[Sequence[str]], pad: int = DEFAULT_PAD) -> AlignmentPlan:
    """Compute target offsets from the widest cell at each column index."""
    widths: list[int] = []
    for cells in rows:
        for k, cell in enumerate(cells):
            if k == len(widths):
                widths.append(len(cell))
            elif len(cell) > widths[k]:
                widths[k] = len(cell)

    offsets: list[int] = []
    cursor = 0
    for width in widths:
        offsets.append(cursor)
        cursor += width + pad
    return AlignmentPlan(offsets=tuple(offsets), widths=tuple(widths), pad=pad)


def rebuild_row(
    cells: Sequence[str],
    plan: AlignmentPlan,
    *,
    line_number: int = -1,
) -> tuple[str, list[PaddingUnderflowWarning]]:
    """Place each cell at its planned offset.

    A cell that would start before its offset is placed directly after the
    previous one (padding clamped to zero) and reported as an underflow.
    """
    parts: list[str] = []
    length = 0
    underflows: list[PaddingUnderflowWarning] = []
    for k, cell in enumerate(cells):
        target = plan.offsets[k] if k < len(plan.offsets) else length
        padding = target - length
        if padding < 0:
            underflows.append(PaddingUnderflowWarning(line_number, k, -padding))
            padding = 0
        parts.append(" " * padding)
        parts.append(cell)
        length += padding + len(cell)
    return "".join(parts), underflows


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def align(
    document: DocumentSource,
    *,
    config: AlignerConfig | None = None,
) -> Result[AlignedText, AlignmentError]:
    """Align the processes and systematics blocks into shared columns.

    Returns ``Err`` without touching anything when either block is missing
    or the systematics block does not come after the processes block.
    """
    cfg = config or AlignerConfig()
    doc = as_document(document)
    lines = doc.lines

    processes = section_line_range(doc, SECTION_PROCESSES)
    if processes is None:
        return Err(SectionNotFoundError(section=SECTION_PROCESSES))
    systematics = section_line_range(doc, SECTION_SYSTEMATICS)
    if systematics is None:
        return Err(SectionNotFoundError(section=SECTION_SYSTEMATICS))

    p_start, p_end = processes
    s_start, s_end = systematics
    if s_start <= p_end:
        return Err(OrderingError(processes=processes, systematics=systematics))

    rows: dict[int, list[str]] = {}
    for i in range(p_start, s_end + 1):
        line = lines[i]
        if is_blank(line) or is_divider(line):
            continue
        cells = row_cells(line)
        if cfg.merge_systematics_head and s_start <= i <= s_end:
            cells = merge_head(cells)
        rows[i] = cells

    plan = plan_columns(list(rows.values()), cfg.pad)
    log.debug(
        "alignment plan for lines %d-%d: %d rows, offsets=%s",
        p_start, s_end, len(rows), plan.offsets,
    )

    rebuilt: list[str] = []
    underflows: list[PaddingUnderflowWarning] = []
    for i in range(p_start, s_end + 1):
        cells = rows.get(i)
        if cells is None:
            rebuilt.append(lines[i])
            continue
        new_line, row_underflows = rebuild_row(cells, plan, line_number=i)
        rebuilt.append(new_line)
        underflows.extend(row_underflows)

    for u in underflows:
        log.warning(
            "line %d column %d overflows its target offset by %d chars; padding clamped",
            u.line_number, u.column, u.overflow,
        )

    new_text = "\n".join(rebuilt)
    edit = LineRangeEdit(
        start=p_start, end=s_end, new_text=new_text, expected_version=doc.version,
    )
    full_text = "\n".join([*lines[:p_start], *rebuilt, *lines[s_end + 1:]])
    return Ok(AlignedText(
        text=full_text,
        edit=edit,
        plan=plan,
        rows_aligned=len(rows),
        underflows=tuple(underflows),
    ))
