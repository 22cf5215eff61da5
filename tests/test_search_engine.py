# tests/test_search_engine.py
import asyncio
import unittest
from unittest.mock import MagicMock

import pytest

from emoji_search.core.catalog_sources import StaticCatalogSource
from emoji_search.core.errors import CatalogUnavailable
from emoji_search.core.models import MatchType
from emoji_search.core.normalizer import normalize
from emoji_search.core.search_engine import EmojiSearchEngine
from emoji_search.utils.config_manager import Config
from emoji_search.utils.logger_utils import Log

from conftest import ARIGATOU, THUMBSUP


class CountingAsyncSource:
    """Async source that yields to the loop so concurrent callers can pile up."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = 0

    async def get_current_catalog(self):
        self.calls += 1
        await asyncio.sleep(0.01)
        if self.error is not None:
            raise self.error
        return self.payload


def _payload():
    return {"custom": {"arigatou": ARIGATOU}, "standard": {"thumbsup": THUMBSUP}}


@pytest.fixture(params=[False, True], ids=["plain", "enriched"])
def any_engine(request, catalog):
    cfg = Config(enrich_catalog=request.param)
    return EmojiSearchEngine.from_catalog(catalog["custom"], catalog["standard"], config=cfg)


# Scenarios -------------------------------------------------------------------

def test_exact_name_ranks_first(any_engine):
    res = any_engine.search("thumbsup")
    assert res[0].id == "thumbsup"
    assert res[0].match_type is MatchType.EXACT


def test_plus_one_finds_thumbsup_by_keyword(any_engine):
    res = any_engine.search("+1")
    assert res[0].id == "thumbsup"
    assert res[0].match_type is MatchType.KEYWORD


def test_alias_finds_custom_emoji(any_engine):
    res = any_engine.search("arigataya")
    assert res[0].id == "arigatou"
    assert res[0].match_type is MatchType.ALIAS


def test_typo_finds_thumbsup_by_fuzzy(any_engine):
    res = any_engine.search("thumsbup")
    assert res[0].id == "thumbsup"
    assert res[0].match_type is MatchType.FUZZY


def test_popular_listing_follows_frequency(any_engine):
    for _ in range(5):
        any_engine.update_frequency("thumbsup")
    for _ in range(2):
        any_engine.update_frequency("arigatou")
    res = any_engine.search("")
    assert [r.id for r in res] == ["thumbsup", "arigatou"]
    assert all(r.match_type is None and r.matched_on is None for r in res)

    for _ in range(3):
        any_engine.update_frequency("arigatou")
    res = any_engine.search("")
    assert [r.id for r in res] == ["arigatou", "thumbsup"]


# Query handling ------------------------------------------------------------------

def test_blank_and_missing_queries_list_popular(engine):
    assert [r.id for r in engine.search("   ")] == ["arigatou", "thumbsup"]
    assert [r.id for r in engine.search(None)] == ["arigatou", "thumbsup"]


def test_query_that_normalizes_to_nothing_returns_empty(engine):
    assert engine.search("!!!") == []
    assert engine.search("★") == []


def test_long_queries_are_truncated(catalog):
    cfg = Config(enrich_catalog=False, max_query_length=8)
    engine = EmojiSearchEngine.from_catalog(catalog["custom"], catalog["standard"], config=cfg)
    res = engine.search("thumbsup" + "x" * 500)
    assert res[0].id == "thumbsup"
    assert res[0].match_type is MatchType.EXACT


def test_search_never_raises(engine, monkeypatch):
    def boom(*a, **kw):
        raise RuntimeError("ranker exploded")

    monkeypatch.setattr(engine.ranker, "match", boom)
    assert engine.search("thumbsup") == []


def test_frequency_never_lifts_across_tiers(engine):
    for _ in range(100):
        engine.update_frequency("arigatou")
    assert engine.search("thumbsup")[0].id == "thumbsup"


def test_results_are_deterministic(engine):
    first = engine.search("a")
    engine.cache.invalidate_all()
    assert engine.search("a") == first


def test_preview_uses_preview_limit(catalog):
    cfg = Config(enrich_catalog=False, preview_limit=1)
    engine = EmojiSearchEngine.from_catalog(catalog["custom"], catalog["standard"], config=cfg)
    assert len(engine.preview("")) == 1
    assert len(engine.search("")) == 2


def test_explicit_limit(engine):
    assert len(engine.search("", limit=1)) == 1


# Cache ---------------------------------------------------------------------------------

def test_repeat_query_hits_cache(engine):
    engine.search("thumbsup")
    engine.search("thumbsup")
    assert engine.cache.stats()["hits"] >= 1
    assert engine.metrics.count("cache_hit") == 1


def test_update_frequency_invalidates_cache(engine):
    engine.search("thumbsup")
    engine.search("")
    assert len(engine.cache) == 2
    engine.update_frequency("thumbsup")
    assert len(engine.cache) == 0
    assert engine.search("")[0].id == "thumbsup"


def test_unknown_ids_are_recorded(engine):
    assert engine.update_frequency("not_in_catalog") == 1
    assert engine.frequency.count("not_in_catalog") == 1


# Suggestions ---------------------------------------------------------------------------

def test_suggestions_from_alias_match(engine):
    assert engine.get_suggestions("thank") == ["arigatou", "thanks"]


def test_suggestions_correct_typos(engine):
    assert "thumbsup" in engine.get_suggestions("thumsbup")


def test_suggestions_include_matching_recent_searches(engine):
    engine.search("thumbs")
    assert engine.get_suggestions("thu") == ["thumbsup", "thumbs"]


def test_empty_suggestion_query_returns_recent(engine):
    engine.search("thumbsup")
    engine.search("arigataya")
    assert engine.get_suggestions("") == ["arigataya", "thumbsup"]


@pytest.mark.parametrize("query", ["thank", "thumsbup", "thu", "arigato", "ARIGATOU", "like"])
def test_suggestions_never_echo_the_query(engine, query):
    engine.search(query)
    for s in engine.get_suggestions(query):
        assert s != query
        assert normalize(s) != normalize(query)


def test_suggestions_never_raise(engine, monkeypatch):
    def boom(*a, **kw):
        raise RuntimeError("ranker exploded")

    monkeypatch.setattr(engine.ranker, "match", boom)
    assert engine.get_suggestions("thank") == []


def test_suggestion_limit(catalog):
    cfg = Config(enrich_catalog=False, suggestion_limit=1)
    engine = EmojiSearchEngine.from_catalog(catalog["custom"], catalog["standard"], config=cfg)
    assert engine.get_suggestions("thank") == ["arigatou"]


def test_recent_searches_are_bounded_and_deduplicated(catalog):
    cfg = Config(enrich_catalog=False, recent_searches=2)
    engine = EmojiSearchEngine.from_catalog(catalog["custom"], catalog["standard"], config=cfg)
    for q in ("a", "b", "a", "c"):
        engine.search(q)
    assert engine.recent_searches() == ["c", "a"]


# Index lifecycle ---------------------------------------------------------------------

def test_create_loads_catalog(config):
    source = StaticCatalogSource(_payload()["custom"], _payload()["standard"])
    engine = asyncio.run(EmojiSearchEngine.create(source, config=config))
    assert engine.search("thumbsup")[0].id == "thumbsup"
    assert engine.rebuilds == 1


def test_rebuild_swaps_index_and_drops_stale_results(config):
    source = StaticCatalogSource(_payload()["custom"], _payload()["standard"])
    engine = asyncio.run(EmojiSearchEngine.create(source, config=config))
    assert engine.search("arigatou")[0].id == "arigatou"

    source.set_catalog(custom={"otsukare": "https://emoji.example/otsukare.png"})
    old = engine.index
    new = asyncio.run(engine.rebuild_index())
    assert engine.index is new and new is not old
    assert all(r.id != "arigatou" for r in engine.search("arigatou"))
    assert engine.search("otsukare")[0].id == "otsukare"


def test_failed_rebuild_keeps_previous_index(config):
    source = StaticCatalogSource(_payload()["custom"], _payload()["standard"])
    engine = asyncio.run(EmojiSearchEngine.create(source, config=config))
    before = engine.index
    engine.store.source = CountingAsyncSource(error=TimeoutError("slow api"))
    with pytest.raises(CatalogUnavailable):
        asyncio.run(engine.rebuild_index())
    assert engine.index is before
    assert engine.search("thumbsup")[0].id == "thumbsup"
    assert engine.metrics.count("rebuild_failures") == 1


def test_concurrent_rebuilds_coalesce(config):
    source = CountingAsyncSource(payload=_payload())

    async def go():
        engine = EmojiSearchEngine(source, config=config)
        a, b, c = await asyncio.gather(engine.rebuild_index(), engine.rebuild_index(), engine.rebuild_index())
        return engine, a, b, c

    engine, a, b, c = asyncio.run(go())
    assert a is b is c
    assert source.calls == 1
    assert engine.rebuilds == 1


def test_coalesced_callers_share_the_failure(config):
    source = CountingAsyncSource(error=ConnectionError("offline"))

    async def go():
        engine = EmojiSearchEngine(source, config=config)
        return await asyncio.gather(engine.rebuild_index(), engine.rebuild_index(), return_exceptions=True)

    results = asyncio.run(go())
    assert all(isinstance(r, CatalogUnavailable) for r in results)
    assert source.calls == 1


def test_rebuild_with_malformed_catalog_map_is_typed_failure(config):
    source = StaticCatalogSource(_payload()["custom"], _payload()["standard"])
    engine = asyncio.run(EmojiSearchEngine.create(source, config=config))
    before_index, before_snap = engine.index, engine.store.snapshot
    engine.store.source = CountingAsyncSource(payload={"custom": ["not", "a", "map"], "standard": {}})
    with pytest.raises(CatalogUnavailable):
        asyncio.run(engine.rebuild_index())
    assert engine.index is before_index
    assert engine.store.snapshot is before_snap


def test_store_is_not_committed_when_index_build_fails(config, monkeypatch):
    source = StaticCatalogSource(_payload()["custom"], _payload()["standard"])
    engine = asyncio.run(EmojiSearchEngine.create(source, config=config))
    before_snap = engine.store.snapshot
    source.set_catalog(custom={"otsukare": "https://emoji.example/otsukare.png"})

    def broken_build(snapshot):
        raise MemoryError("no room")

    monkeypatch.setattr(engine.builder, "build", broken_build)
    with pytest.raises(CatalogUnavailable):
        asyncio.run(engine.rebuild_index())
    assert engine.store.snapshot is before_snap
    assert engine.lookup("otsukare") is None
    assert engine.metrics.count("rebuild_failures") == 1


def test_sequential_rebuilds_are_idempotent(config):
    source = StaticCatalogSource(_payload()["custom"], _payload()["standard"])
    engine = asyncio.run(EmojiSearchEngine.create(source, config=config))
    first = engine.index
    second = asyncio.run(engine.rebuild_index())
    assert first.postings == second.postings
    assert source.calls == 2


def test_engines_do_not_share_state(catalog, config):
    a = EmojiSearchEngine.from_catalog(catalog["custom"], catalog["standard"], config=config)
    b = EmojiSearchEngine.from_catalog(catalog["custom"], catalog["standard"], config=config)
    a.update_frequency("thumbsup")
    assert b.frequency.count("thumbsup") == 0
    a.search("thumbsup")
    assert len(b.cache) == 0


# Misc ------------------------------------------------------------------------------------

def test_search_tips(engine):
    tips = engine.get_search_tips()
    assert tips and all(isinstance(t, str) for t in tips)
    tips.clear()
    assert engine.get_search_tips()


def test_lookup_delegates_to_store(engine):
    assert engine.lookup(":thumbsup:").id == "thumbsup"


def test_stats(engine):
    engine.search("thumbsup")
    engine.update_frequency("thumbsup")
    st = engine.stats()
    assert st["entries"] == 2
    assert st["custom"] == 1 and st["standard"] == 1
    assert st["index"]["entries"] == 2
    assert st["top_frequency"] == [("thumbsup", 1)]
    assert "search_ms" in st["metrics"]


def test_default_catalog_is_bundled():
    engine = EmojiSearchEngine.from_catalog({"otsukare": "https://emoji.example/o.png"})
    assert engine.search("bow")[0].id == "bow"
    assert engine.search("お疲れ")[0].id == "otsukare"




# Bundled catalog -------------------------------------------------------------------------

@pytest.fixture
def bundled():
    return EmojiSearchEngine.from_catalog({"arigatou": "https://emoji.example/arigatou.png"})


def test_bundled_plus_one_prefers_thumbsup(bundled):
    ids = [r.id for r in bundled.search("+1")]
    assert ids[0] == "+1"
    assert ids[1] == "thumbsup"
    assert ids.index("thumbsup") < ids.index("thumbsdown")


def test_bundled_minus_one_prefers_thumbsdown(bundled):
    ids = [r.id for r in bundled.search("-1")]
    assert ids[:2] == ["-1", "thumbsdown"]
    assert "thumbsup" not in ids or ids.index("thumbsdown") < ids.index("thumbsup")


def test_bundled_kana_query_finds_custom_emoji(bundled):
    res = bundled.search("ありがとう")
    assert res[0].id == "arigatou"
    assert res[0].match_type is MatchType.EXACT


def test_bundled_english_keywords_are_not_folded(bundled):
    res = bundled.search("cool")
    assert res[0].id == "sunglasses"
    assert res[0].matched_on == "keyword:cool"


def test_quick_reactions_delegate_to_store():
    engine = EmojiSearchEngine.from_catalog({"arigataya": "img", "kakuninshimasu": "img"})
    assert engine.quick_reactions() == {"kakunin": "kakuninshimasu", "arigataya": "arigataya"}


class FrequencyPersistenceTests(unittest.TestCase):
    def setUp(self):
        Log.configure(path=None)
        self.store = MagicMock()
        self.store.load_frequency.return_value = {"arigatou": {"count": 4, "last_used": 1.0}}

    def _engine(self, **cfg):
        cfg.setdefault("enrich_catalog", False)
        p = _payload()
        return EmojiSearchEngine.from_catalog(p["custom"], p["standard"], config=Config(**cfg),
                                              persistence=self.store)

    def test_counts_restored_on_start(self):
        engine = self._engine()
        self.assertEqual(engine.frequency.count("arigatou"), 4)
        self.assertEqual(engine.search("")[0].id, "arigatou")

    def test_autosave_after_update(self):
        engine = self._engine()
        engine.update_frequency("thumbsup")
        saved = self.store.save_frequency.call_args[0][0]
        self.assertEqual(saved["thumbsup"]["count"], 1)
        self.assertEqual(saved["arigatou"]["count"], 4)

    def test_autosave_can_be_disabled(self):
        engine = self._engine(autosave_frequency=False)
        engine.update_frequency("thumbsup")
        self.store.save_frequency.assert_not_called()
        self.assertTrue(engine.save())
        self.store.save_frequency.assert_called_once()

    def test_save_failure_is_logged_not_raised(self):
        self.store.save_frequency.side_effect = OSError("disk full")
        engine = self._engine()
        self.assertEqual(engine.update_frequency("thumbsup"), 1)
        self.assertEqual(engine.frequency.count("thumbsup"), 1)
        self.assertEqual(engine.metrics.count("persist_failures"), 1)
        self.assertFalse(engine.save())

    def test_load_failure_starts_fresh(self):
        self.store.load_frequency.side_effect = ValueError("corrupt")
        engine = self._engine()
        self.assertEqual(len(engine.frequency), 0)
