# emoji_search/core/search_engine.py
"""
EmojiSearchEngine - application facade.

Purpose:
 - Own the CatalogStore, the active InvertedIndex, the FrequencyTracker,
   the result cache and the recent-search buffer (nothing is shared between
   engine instances)
 - Simple public API for UI/CLI/tests:
     search(query, limit), preview(query), get_suggestions(query),
     update_frequency(id), await rebuild_index(), get_search_tips(),
     lookup(name), quick_reactions(), stats(), save()
 - Swap the index with one attribute assignment so readers always see a
   complete index, old or new
 - Coalesce concurrent rebuilds onto the one in flight
"""

from __future__ import annotations

import asyncio
import heapq
import logging
import threading
import time
from collections import deque
from typing import Any, Dict, List, Mapping, Optional

from .catalog_store import CatalogStore
from .errors import CatalogUnavailable
from .frequency_tracker import FrequencyTracker
from .index_builder import IndexBuilder, InvertedIndex
from .lexicon import default_standard_catalog
from .models import EmojiEntry, MatchType, SearchResult
from .normalizer import normalize
from .protocols import CatalogSource, CatalogValue, FrequencyPersistence
from .ranker import TierRanker
from ..utils.cache_utils import ResultCache
from ..utils.config_manager import Config
from ..utils.logger_utils import Log
from ..utils.metrics_tracker import Metrics

logger = logging.getLogger(__name__)

SEARCH_TIPS = [
    'Search in English: "bow" finds おじぎ (ojigi)',
    'Use romaji for Japanese emoji: "arigatou" finds ありがとう',
    'Kana works too: "おつかれ" finds otsukare',
    'Common shortcuts: "ty" for thank you, "+1" for thumbs up',
    'Search by category: "greetings", "thanks", "work"',
    'Partial matches work: "tsuka" finds "otsukaresama"',
    'Typos are forgiven: "thumsbup" still finds "thumbsup"',
    "Leave the box empty to browse your most used emoji",
]

# match types whose tokens make useful alternate queries
_SUGGESTION_TYPES = (MatchType.PREFIX, MatchType.KEYWORD, MatchType.ALIAS, MatchType.FUZZY)


class EmojiSearchEngine:
    """
    Query facade over one catalog.

    Construct with a CatalogSource and await rebuild_index() (or use
    `await EmojiSearchEngine.create(source)`), or build directly from maps
    with EmojiSearchEngine.from_catalog(custom, standard).
    """

    def __init__(self,
                 source: Optional[CatalogSource] = None,
                 *,
                 config: Optional[Config] = None,
                 persistence: Optional[FrequencyPersistence] = None,
                 store: Optional[CatalogStore] = None,
                 builder: Optional[IndexBuilder] = None,
                 ranker: Optional[TierRanker] = None,
                 frequency: Optional[FrequencyTracker] = None,
                 metrics: Optional[Metrics] = None):
        self.config = config or Config()
        self.store = store or CatalogStore(source, enrich=bool(self.config["enrich_catalog"]))
        if source is not None and self.store.source is None:
            self.store.source = source
        self.builder = builder or IndexBuilder()
        self.ranker = ranker or TierRanker()
        self.frequency = frequency or FrequencyTracker()
        self.persistence = persistence
        self.metrics = metrics or Metrics()
        self.cache = ResultCache(maxsize=self.config["cache_size"], ttl=self.config["cache_ttl"])

        self._recent: deque = deque(maxlen=max(1, int(self.config["recent_searches"])))
        self._recent_lock = threading.Lock()
        self._rebuild_task: Optional[asyncio.Future] = None
        self.rebuilds = 0

        self._index: InvertedIndex = self.builder.build(self.store.snapshot)
        self._restore_frequency()
        Log.write(f"[EmojiSearchEngine] ready with {len(self._index)} entries")

    @classmethod
    async def create(cls, source: CatalogSource, **kw: Any) -> "EmojiSearchEngine":
        """Construct and load the catalog; raises CatalogUnavailable on failure."""
        engine = cls(source, **kw)
        await engine.rebuild_index()
        return engine

    @classmethod
    def from_catalog(cls,
                     custom: Mapping[str, CatalogValue],
                     standard: Optional[Mapping[str, CatalogValue]] = None,
                     config: Optional[Config] = None,
                     **kw: Any) -> "EmojiSearchEngine":
        config = config or Config()
        if standard is None:
            standard = default_standard_catalog()
        store = CatalogStore.from_maps(custom, standard, enrich=bool(config["enrich_catalog"]))
        return cls(config=config, store=store, **kw)

    # Persistence ---------------------------------------------------------
    def _restore_frequency(self) -> None:
        if self.persistence is None:
            return
        try:
            self.frequency.load(self.persistence.load_frequency())
        except Exception as e:
            Log.write(f"[EmojiSearchEngine] frequency restore failed: {e}")

    def _persist_frequency(self) -> bool:
        if self.persistence is None:
            return False
        try:
            self.persistence.save_frequency(self.frequency.snapshot())
            return True
        except Exception as e:
            # in-memory counts stay authoritative; next save retries
            self.metrics.record("persist_failures")
            Log.write(f"[EmojiSearchEngine] frequency save failed: {e}")
            return False

    def save(self) -> bool:
        """Persist frequencies and metrics now. Returns False when the frequency save failed."""
        ok = self._persist_frequency()
        try:
            self.metrics.save()
        except OSError as e:
            Log.write(f"[EmojiSearchEngine] metrics save failed: {e}")
        return ok

    # Index lifecycle ------------------------------------------------------
    @property
    def index(self) -> InvertedIndex:
        return self._index

    async def rebuild_index(self) -> InvertedIndex:
        """
        Reload the catalog and swap in a fresh index.
        A call made while a rebuild is running waits for that rebuild and
        shares its result or its CatalogUnavailable.
        """
        task = self._rebuild_task
        if task is not None and not task.done():
            self.metrics.record("rebuild_coalesced")
            return await asyncio.shield(task)

        task = asyncio.ensure_future(self._rebuild())
        self._rebuild_task = task
        task.add_done_callback(self._rebuild_finished)
        return await asyncio.shield(task)

    def _rebuild_finished(self, task: asyncio.Future) -> None:
        if self._rebuild_task is task:
            self._rebuild_task = None

    async def _rebuild(self) -> InvertedIndex:
        try:
            with Log.time_block("EmojiSearchEngine.rebuild_index") as timer:
                snapshot = await self.store.fetch()
                try:
                    index = self.builder.build(snapshot)
                except Exception as e:
                    raise CatalogUnavailable(f"index build failed: {e}", source="IndexBuilder") from e
        except CatalogUnavailable as e:
            self.metrics.record("rebuild_failures")
            Log.write(f"[EmojiSearchEngine] rebuild failed, keeping previous index: {e}")
            raise
        # store and index move together
        self.store.commit(snapshot)
        self._index = index
        self.cache.invalidate_all()
        self.rebuilds += 1
        self.metrics.record("rebuild_ms", timer.elapsed * 1000.0)
        return index

    # Queries --------------------------------------------------------------
    def search(self, query: Optional[str], limit: Optional[int] = None) -> List[SearchResult]:
        """
        Ranked results for `query`. Empty input lists popular emoji; input that
        normalizes to nothing returns []. Never raises.
        """
        t0 = time.perf_counter()
        try:
            return self._search(query, limit)
        except Exception as e:
            logger.exception("search failed for %r", query)
            Log.write(f"[EmojiSearchEngine] search error for {query!r}: {e}")
            return []
        finally:
            self.metrics.record("search_ms", (time.perf_counter() - t0) * 1000.0)

    def _search(self, query: Optional[str], limit: Optional[int]) -> List[SearchResult]:
        raw = query if isinstance(query, str) else ("" if query is None else str(query))
        if not raw.strip():
            return self.popular(limit)

        raw = raw[: int(self.config["max_query_length"])]
        norm = normalize(raw)
        if not norm:
            return []
        self._remember(norm)

        if limit is None:
            limit = int(self.config["full_limit"])
        key = (norm, limit)
        cached = self.cache.get(key)
        if cached is not None:
            self.metrics.record("cache_hit")
            return list(cached)

        self.metrics.record("cache_miss")
        results = self.ranker.match(norm, self._index, self.frequency.counts(), limit)
        self.cache.put(key, tuple(results))
        return results

    def preview(self, query: Optional[str]) -> List[SearchResult]:
        return self.search(query, limit=int(self.config["preview_limit"]))

    def popular(self, limit: Optional[int] = None) -> List[SearchResult]:
        """Browse listing: most used first, custom before standard, then id."""
        if limit is None:
            limit = int(self.config["popular_limit"])
        key = ("", limit)
        cached = self.cache.get(key)
        if cached is not None:
            return list(cached)

        counts = self.frequency.counts()
        index = self._index
        top = heapq.nsmallest(
            limit,
            index.snapshot,
            key=lambda e: (-counts.get(e.id, 0), e.kind.rank, e.id),
        )
        results = [SearchResult.from_entry(e, frequency=counts.get(e.id, 0)) for e in top]
        self.cache.put(key, tuple(results))
        return results

    def get_suggestions(self, query: Optional[str]) -> List[str]:
        """
        Alternate query strings: ids, aliases and keywords behind the best
        matches, then recent searches sharing the prefix. Nothing returned
        normalizes to the query itself. Never raises.
        """
        try:
            return self._suggestions(query)
        except Exception as e:
            logger.exception("suggestions failed for %r", query)
            Log.write(f"[EmojiSearchEngine] suggestion error for {query!r}: {e}")
            return []

    def _suggestions(self, query: Optional[str]) -> List[str]:
        limit = int(self.config["suggestion_limit"])
        raw = (query or "").strip()[: int(self.config["max_query_length"])]
        if not raw:
            return self.recent_searches()[:limit]
        norm = normalize(raw)
        if not norm:
            return []

        out: List[str] = []
        seen = {norm}

        def add(text: str) -> bool:
            n = normalize(text)
            if text and text != raw and n and n not in seen:
                seen.add(n)
                out.append(text)
            return len(out) >= limit

        index = self._index
        matches = self.ranker.match(norm, index, self.frequency.counts(),
                                    int(self.config["full_limit"]))
        for res in matches:
            if res.match_type not in _SUGGESTION_TYPES:
                continue
            if add(res.id):
                return out
            entry = index.entry(res.id)
            token = (res.matched_on or "").partition(":")[2]
            for value in entry.aliases + entry.keywords:
                if normalize(value) == token and add(value):
                    return out

        for recent in self.recent_searches():
            if recent.startswith(norm) and add(recent):
                break
        return out

    def get_search_tips(self) -> List[str]:
        return list(SEARCH_TIPS)

    def lookup(self, name: str) -> Optional[EmojiEntry]:
        return self.store.lookup(name)

    def quick_reactions(self) -> Dict[str, str]:
        return self.store.quick_reactions()

    # Feedback -------------------------------------------------------------
    def update_frequency(self, emoji_id: str) -> int:
        """Record one use of `emoji_id` (known or not) and return its new count."""
        count = self.frequency.increment(emoji_id)
        self.cache.invalidate_all()
        self.metrics.record("frequency_updates")
        if self.config["autosave_frequency"]:
            self._persist_frequency()
        return count

    def _remember(self, norm: str) -> None:
        with self._recent_lock:
            try:
                self._recent.remove(norm)
            except ValueError:
                pass
            self._recent.appendleft(norm)

    def recent_searches(self) -> List[str]:
        """Most recent normalized queries first."""
        with self._recent_lock:
            return list(self._recent)

    # Introspection --------------------------------------------------------
    def stats(self) -> Dict[str, Any]:
        index = self._index
        snap = index.snapshot
        return {
            "entries": len(snap),
            "custom": sum(1 for e in snap if e.is_custom),
            "standard": sum(1 for e in snap if not e.is_custom),
            "index": index.stats(),
            "built_at": index.built_at,
            "rebuilds": self.rebuilds,
            "cache": self.cache.stats(),
            "recent_searches": len(self._recent),
            "top_frequency": self.frequency.top(10),
            "metrics": self.metrics.snapshot(),
        }
