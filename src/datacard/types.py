"""Shared result and failure types.

Type hierarchy:
  Ok[T] / Err[E]         — Strict algebraic Result type
  ColumnSpan             — Character range of one whitespace token
  SectionNotFoundError   — Alignment could not find a required block
  OrderingError          — Systematics block does not follow processes
  PaddingUnderflowWarning — Recovered column overflow at rebuild time

Failures are plain frozen records returned inside ``Err``; nothing here is
raised. Structural scans report absence with None/False instead.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Success case of Result[T, E].

    Usage::

        match align(doc):
            case Ok(value=aligned): doc.apply_edit(aligned.edit)
            case Err(error=e): print(e.message)
    """
    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failure case of Result[T, E]. Keeps the typed reason."""
    error: E


type Result[T, E] = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Column spans
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ColumnSpan:
    """Half-open character range ``[start, end)`` of one token in a line."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"start must be >= 0, got {self.start}")
        if self.end <= self.start:
            raise ValueError(f"end must be > start, got {self.end} <= {self.start}")


# ---------------------------------------------------------------------------
# Alignment failures
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SectionNotFoundError:
    """The processes or systematics block is missing."""
    section: str  # "processes" | "systematics"

    @property
    def message(self) -> str:
        return f"Could not locate the {self.section} block"


@dataclass(frozen=True, slots=True)
class OrderingError:
    """The systematics block starts at or before the end of the processes block."""
    processes: tuple[int, int]    # (start, end) lines, inclusive
    systematics: tuple[int, int]

    @property
    def message(self) -> str:
        return (
            f"Systematics block (lines {self.systematics[0]}-{self.systematics[1]}) "
            f"must follow the processes block (lines {self.processes[0]}-{self.processes[1]})"
        )


type AlignmentError = SectionNotFoundError | OrderingError


@dataclass(frozen=True, slots=True)
class PaddingUnderflowWarning:
    """A token ran past its column's target offset; padding was clamped to 0."""
    line_number: int
    column: int
    overflow: int  # Characters past the target offset
