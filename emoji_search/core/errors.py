# emoji_search/core/errors.py
"""Exception types raised by the search engine."""

from __future__ import annotations


class EmojiSearchError(Exception):
    """Base class for every error the engine raises on purpose."""


class CatalogUnavailable(EmojiSearchError):
    """
    The catalog source could not produce a catalog (network/parse error,
    rejected payload, stale cache). The previously active index stays in use.
    """

    def __init__(self, message: str = "catalog unavailable", *, source: str = ""):
        super().__init__(message)
        self.source = source
