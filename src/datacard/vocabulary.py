"""Datacard keyword vocabulary loaded from JSON.

The vocabulary is read-only configuration: an ordered keyword list plus a
keyword -> description map. It is loaded once and handed to the functions
that need it (keyword ranking, hover lookup) rather than read from a global.

JSON shape::

    {"keywords": ["imax", "jmax", ...],
     "descriptions": {"imax": "Number of channels ...", ...}}
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cache
from pathlib import Path
from types import MappingProxyType

import orjson

from datacard.patterns import keyword_pattern

DEFAULT_VOCABULARY_PATH = Path(__file__).resolve().parent / "data" / "keywords.json"


@dataclass(frozen=True, slots=True)
class KeywordVocabulary:
    """Ordered keywords and their human-readable descriptions."""

    keywords: tuple[str, ...]
    descriptions: Mapping[str, str] = field(hash=False)
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "descriptions", MappingProxyType(dict(self.descriptions)))
        object.__setattr__(self, "pattern", keyword_pattern(self.keywords))

    def __contains__(self, word: object) -> bool:
        return word in self.keywords

    def describe(self, word: str) -> str | None:
        """Hover text for ``word``, or None when it is not a known keyword."""
        if word not in self.keywords:
            return None
        return self.descriptions.get(word)

    @classmethod
    def from_payload(cls, data: object, *, source: str = "<payload>") -> KeywordVocabulary:
        if not isinstance(data, dict):
            raise ValueError(f"Vocabulary payload must be a JSON object: {source}")
        keywords = data.get("keywords", [])
        descriptions = data.get("descriptions", {})
        if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
            raise ValueError(f"'keywords' must be a list of strings: {source}")
        if not isinstance(descriptions, dict):
            raise ValueError(f"'descriptions' must be an object: {source}")
        # Keep first occurrence order when the list repeats a keyword
        seen: dict[str, None] = dict.fromkeys(keywords)
        return cls(
            keywords=tuple(seen),
            descriptions={str(k): str(v) for k, v in descriptions.items()},
        )

    @classmethod
    def from_json(cls, path: Path) -> KeywordVocabulary:
        """Load from a keywords JSON file."""
        return cls.from_payload(orjson.loads(path.read_bytes()), source=str(path))


@cache
def load_default_vocabulary() -> KeywordVocabulary:
    """The bundled vocabulary, loaded on first use and shared afterwards."""
    return KeywordVocabulary.from_json(DEFAULT_VOCABULARY_PATH)
