# emoji_search/core/models.py
"""
Value types shared across the engine.

EmojiEntry    - one catalog item (custom or standard)
SearchToken   - normalized text fragment tagged with the field it came from
SearchResult  - what the facade hands back to callers
CatalogSnapshot - immutable merged view of both catalogs at one point in time
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple


class EmojiKind(str, Enum):
    CUSTOM = "custom"
    STANDARD = "standard"

    @property
    def rank(self) -> int:
        """Tie-break rank: custom emoji sort before standard ones."""
        return 0 if self is EmojiKind.CUSTOM else 1


class TokenSource(str, Enum):
    NAME = "name"
    KEYWORD = "keyword"
    ALIAS = "alias"


class MatchType(str, Enum):
    EXACT = "exact"
    PREFIX = "prefix"
    ALIAS = "alias"
    KEYWORD = "keyword"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class EmojiEntry:
    id: str
    kind: EmojiKind
    render_value: str
    keywords: Tuple[str, ...] = ()
    aliases: Tuple[str, ...] = ()
    category: Optional[str] = None

    @property
    def is_custom(self) -> bool:
        return self.kind is EmojiKind.CUSTOM

    def with_metadata(self, keywords=(), aliases=(), category=None) -> "EmojiEntry":
        """Return a copy with extra keywords/aliases appended (order kept, no dupes)."""
        kws = _merge(self.keywords, keywords, exclude=self.id)
        als = _merge(self.aliases, aliases, exclude=self.id)
        return EmojiEntry(
            id=self.id,
            kind=self.kind,
            render_value=self.render_value,
            keywords=kws,
            aliases=als,
            category=self.category or category,
        )


def _merge(base, extra, exclude: str = "") -> Tuple[str, ...]:
    seen = set()
    out = []
    for item in list(base) + list(extra):
        if not item or item == exclude or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return tuple(out)


@dataclass(frozen=True, order=True)
class SearchToken:
    text: str
    source: TokenSource


@dataclass(frozen=True)
class SearchResult:
    id: str
    kind: EmojiKind
    render_value: str
    match_type: Optional[MatchType] = None
    matched_on: Optional[str] = None
    tier: Optional[int] = None
    score: float = 0.0
    frequency: int = 0

    @classmethod
    def from_entry(cls, entry: EmojiEntry, **kw) -> "SearchResult":
        return cls(id=entry.id, kind=entry.kind, render_value=entry.render_value, **kw)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "render_value": self.render_value,
            "match_type": self.match_type.value if self.match_type else None,
            "matched_on": self.matched_on,
        }


@dataclass(frozen=True)
class CatalogSnapshot:
    """
    Read-only merged catalog. `entries` has exactly one entry per id;
    custom entries shadow standard ones with the same name.
    """

    entries: Mapping[str, EmojiEntry] = field(default_factory=dict)
    loaded_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        # freeze the mapping so a snapshot can be shared between readers
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[EmojiEntry]:
        return iter(self.entries.values())

    def __contains__(self, emoji_id: object) -> bool:
        return emoji_id in self.entries

    def get(self, emoji_id: str) -> Optional[EmojiEntry]:
        return self.entries.get(emoji_id)

    def count(self, kind: EmojiKind) -> int:
        return sum(1 for e in self.entries.values() if e.kind is kind)
