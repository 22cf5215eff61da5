"""
emoji_search.core

The search engine proper.
Contains:
 - text normalization and romaji transliteration (normalizer, lexicon)
 - catalog loading and merging (CatalogStore, catalog sources)
 - index structures: trie, BK-tree, trigram postings (IndexBuilder)
 - tiered matching and ranking (TierRanker)
 - usage tracking (FrequencyTracker)
 - the query facade (EmojiSearchEngine)
"""

from .catalog_sources import JsonCatalogSource, StaticCatalogSource, parse_emoji_list
from .catalog_store import CatalogStore
from .errors import CatalogUnavailable, EmojiSearchError
from .frequency_tracker import FrequencyTracker
from .index_builder import IndexBuilder, InvertedIndex
from .models import CatalogSnapshot, EmojiEntry, EmojiKind, MatchType, SearchResult, SearchToken, TokenSource
from .normalizer import normalize
from .ranker import TierRanker
from .search_engine import EmojiSearchEngine
from .shortcodes import Segment, parse_shortcodes

__all__ = [
    "CatalogSnapshot",
    "CatalogStore",
    "CatalogUnavailable",
    "EmojiEntry",
    "EmojiKind",
    "EmojiSearchEngine",
    "EmojiSearchError",
    "FrequencyTracker",
    "IndexBuilder",
    "InvertedIndex",
    "JsonCatalogSource",
    "MatchType",
    "SearchResult",
    "SearchToken",
    "Segment",
    "StaticCatalogSource",
    "TierRanker",
    "TokenSource",
    "normalize",
    "parse_emoji_list",
    "parse_shortcodes",
]

# Semantic version of the core module (updated automatically in release tooling)
__version__ = "0.1.0"
