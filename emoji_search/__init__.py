"""
emoji_search

Multi-tier emoji search over a custom + standard catalog with romaji and
English aliases, fuzzy matching and usage-frequency tie-breaks.
"""

from .core import (
    CatalogStore,
    CatalogUnavailable,
    EmojiEntry,
    EmojiKind,
    EmojiSearchEngine,
    EmojiSearchError,
    MatchType,
    SearchResult,
    __version__,
)

__all__ = [
    "CatalogStore",
    "CatalogUnavailable",
    "EmojiEntry",
    "EmojiKind",
    "EmojiSearchEngine",
    "EmojiSearchError",
    "MatchType",
    "SearchResult",
    "__version__",
]
