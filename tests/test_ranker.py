# tests/test_ranker.py
import pytest

from emoji_search.core.catalog_store import build_snapshot
from emoji_search.core.index_builder import IndexBuilder
from emoji_search.core.models import EmojiEntry, EmojiKind, MatchType
from emoji_search.core.ranker import PIECE_WEIGHT, TierRanker, fuzzy_budget


def _index(custom=None, standard=None):
    snap = build_snapshot(custom or {}, standard or {}, enrich=False)
    return IndexBuilder().build(snap)


def _std(name, *keywords, aliases=()):
    return EmojiEntry(name, EmojiKind.STANDARD, "u", keywords=keywords, aliases=aliases)


@pytest.fixture
def ranker():
    return TierRanker()


def test_exact_beats_everything(ranker):
    idx = _index(standard={
        "heart": _std("heart"),
        "hearts": _std("hearts"),
        "heart_eyes": _std("heart_eyes"),
        "love": _std("love", "heart"),
    })
    res = ranker.match("heart", idx, {"hearts": 99, "love": 99})
    assert res[0].id == "heart"
    assert res[0].match_type is MatchType.EXACT
    assert res[0].tier == 1


def test_exact_tries_underscore_form(ranker):
    idx = _index(standard={"raised_hands": _std("raised_hands")})
    res = ranker.match("raised hands", idx)
    assert res[0].id == "raised_hands"
    assert res[0].match_type is MatchType.EXACT


def test_tiers_are_monotonic(ranker):
    idx = _index(standard={
        "cat": _std("cat"),
        "catalog": _std("catalog"),
        "kitty": _std("kitty", "cute cat"),
        "bobcat": _std("bobcat"),
        "cab": _std("cab"),
    })
    res = ranker.match("cat", idx)
    tiers = [r.tier for r in res]
    assert tiers == sorted(tiers)
    by_id = {r.id: r for r in res}
    assert by_id["cat"].tier == 1
    assert by_id["catalog"].tier == 2 and by_id["catalog"].match_type is MatchType.PREFIX
    assert by_id["kitty"].tier == 2 and by_id["kitty"].match_type is MatchType.KEYWORD
    assert by_id["bobcat"].tier == 4 and by_id["bobcat"].matched_on == "name:bobcat"
    assert by_id["cab"].tier == 5 and by_id["cab"].match_type is MatchType.FUZZY


def test_keyword_and_alias_substring_tier(ranker):
    idx = _index(custom={"arigatou": EmojiEntry("arigatou", EmojiKind.CUSTOM, "img", aliases=("thanks",))},
                 standard={"pray": _std("pray", "many thanks")})
    res = ranker.match("hank", idx)
    by_id = {r.id: r for r in res}
    assert by_id["arigatou"].tier == 3 and by_id["arigatou"].match_type is MatchType.ALIAS
    assert by_id["pray"].tier == 3 and by_id["pray"].match_type is MatchType.KEYWORD
    assert by_id["arigatou"].matched_on == "alias:thanks"


def test_prefix_score_prefers_shorter_completion(ranker):
    idx = _index(standard={"party": _std("party"), "partying_face": _std("partying_face")})
    res = ranker.match("part", idx)
    assert [r.id for r in res] == ["party", "partying_face"]
    assert res[0].score == pytest.approx(0.5)


def test_name_pieces_do_not_count_as_prefix(ranker):
    idx = _index(standard={"thumbs_up": _std("thumbs_up"), "up_arrow": _std("up_arrow")})
    res = ranker.match("up", idx)
    by_id = {r.id: r for r in res}
    assert by_id["up_arrow"].tier == 2
    assert by_id["thumbs_up"].tier == 4


def test_frequency_only_breaks_ties(ranker):
    idx = _index(standard={"smile": _std("smile"), "smiley": _std("smiley"), "smirk": _std("smirk")})
    res = ranker.match("smile", idx, {"smiley": 1000, "smirk": 1000})
    assert res[0].id == "smile"
    idx = _index(standard={"aaa_x": _std("aaa_x"), "aaa_y": _std("aaa_y")})
    assert [r.id for r in ranker.match("aaa", idx)] == ["aaa_x", "aaa_y"]
    assert [r.id for r in ranker.match("aaa", idx, {"aaa_y": 3})] == ["aaa_y", "aaa_x"]


def test_custom_before_standard_on_ties(ranker):
    idx = _index(
        custom={"ok_custom": EmojiEntry("ok_custom", EmojiKind.CUSTOM, "img")},
        standard={"ok_cursed": _std("ok_cursed")},
    )
    res = ranker.match("ok_cu", idx)
    assert [r.id for r in res][:2] == ["ok_custom", "ok_cursed"]


def test_each_entry_appears_once(ranker):
    idx = _index(standard={"heart": _std("heart", "heart", "hearty", aliases=("heart",))})
    res = ranker.match("heart", idx)
    assert [r.id for r in res] == ["heart"]


def test_limit_and_determinism(ranker):
    standard = {f"item_{i:02d}": _std(f"item_{i:02d}") for i in range(30)}
    idx = _index(standard=standard)
    first = ranker.match("item", idx, limit=5)
    assert [r.id for r in first] == [f"item_{i:02d}" for i in range(5)]
    assert ranker.match("item", idx, limit=5) == first
    assert ranker.match("item", idx, limit=0) == []


def test_fuzzy_budget():
    assert fuzzy_budget("ab") == 1
    assert fuzzy_budget("thumbsup") == 2
    assert fuzzy_budget("abcdefghi") == 3


def test_fuzzy_can_be_disabled():
    idx = _index(standard={"thumbsup": _std("thumbsup")})
    assert TierRanker(fuzzy=False).match("thumsbup", idx) == []


def test_piece_hits_rank_below_whole_token_hits(ranker):
    idx = _index(standard={
        "thumbsdown": _std("thumbsdown", "-1"),
        "thumbsup": _std("thumbsup", "+1"),
    })
    res = ranker.match("1", idx)
    assert [r.id for r in res] == ["thumbsup", "thumbsdown"]
    assert res[0].tier == res[1].tier == 2
    assert res[1].score == pytest.approx(res[0].score * PIECE_WEIGHT)
