"""Line-addressable text buffer with an atomic line-range edit.

A TextDocument holds an immutable tuple of lines plus a version counter.
Readers take the current ``lines`` tuple as their snapshot; ``apply_edit``
swaps in a new tuple in a single assignment, so a reader never sees a
half-rewritten range.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


type DocumentSource = TextDocument | Sequence[str] | str


class StaleEditError(RuntimeError):
    """Raised when an edit computed for one version is applied to another."""


@dataclass(frozen=True, slots=True)
class LineRangeEdit:
    """Replace lines ``start..end`` (inclusive) with ``new_text``."""

    start: int
    end: int
    new_text: str
    expected_version: int | None = None

    @property
    def new_lines(self) -> list[str]:
        return self.new_text.split("\n")


class TextDocument:
    """An ordered, 0-indexed sequence of lines."""

    __slots__ = ("_lines", "_version", "path", "__weakref__")

    def __init__(
        self,
        lines: Sequence[str],
        *,
        version: int = 0,
        path: Path | None = None,
    ) -> None:
        self._lines: tuple[str, ...] = tuple(lines)
        self._version = version
        self.path = path

    @classmethod
    def from_text(cls, text: str, *, path: Path | None = None) -> TextDocument:
        """Split on newlines. A trailing newline yields a final empty line."""
        return cls(text.replace("\r\n", "\n").split("\n"), path=path)

    @classmethod
    def from_path(cls, path: Path) -> TextDocument:
        return cls.from_text(path.read_text(encoding="utf-8"), path=path)

    @property
    def lines(self) -> tuple[str, ...]:
        return self._lines

    @property
    def version(self) -> int:
        return self._version

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, index: int) -> str:
        if index < 0 or index >= len(self._lines):
            raise IndexError(f"Line {index} out of range (0..{len(self._lines) - 1})")
        return self._lines[index]

    def get_text(self, start: int | None = None, end: int | None = None) -> str:
        """Return lines ``start..end`` (inclusive) joined by newlines."""
        lo = 0 if start is None else start
        hi = len(self._lines) - 1 if end is None else end
        return "\n".join(self._lines[lo:hi + 1])

    def apply_edit(self, edit: LineRangeEdit) -> None:
        """Apply a line-range replacement as one atomic swap."""
        if edit.expected_version is not None and edit.expected_version != self._version:
            raise StaleEditError(
                f"Edit targets version {edit.expected_version}, document is at {self._version}"
            )
        if edit.start < 0 or edit.end >= len(self._lines) or edit.start > edit.end:
            raise IndexError(
                f"Edit range {edit.start}..{edit.end} outside document "
                f"(0..{len(self._lines) - 1})"
            )
        self._lines = self._lines[:edit.start] + tuple(edit.new_lines) + self._lines[edit.end + 1:]
        self._version += 1

    def __repr__(self) -> str:
        return f"TextDocument(lines={len(self._lines)}, version={self._version})"


def as_document(source: DocumentSource) -> TextDocument:
    """Coerce a document, a list of lines, or raw text into a TextDocument."""
    if isinstance(source, TextDocument):
        return source
    if isinstance(source, str):
        return TextDocument.from_text(source)
    return TextDocument(source)
