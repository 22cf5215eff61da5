# tests/test_normalizer.py
import pytest

from emoji_search.core.normalizer import (
    collapse_long_vowels,
    is_romaji,
    kana_to_romaji,
    ngrams,
    normalize,
    split_token,
    strip_diacritics,
    word_parts,
)


@pytest.mark.parametrize("raw, expected", [
    ("ThumbsUp", "thumbsup"),
    ("  thumbs   up  ", "thumbs up"),
    ("Café", "cafe"),
    ("+1", "1"),
    ("raised_hands", "raised_hands"),
    ("ok-hand", "ok-hand"),
    ("!!!", ""),
    ("", ""),
])
def test_normalize_basic(raw, expected):
    assert normalize(raw) == expected


def test_normalize_is_idempotent():
    for raw in ["ThumbsUp", "ありがとう", "お疲れ様です", "Crème brûlée", "ohayou gozaimasu"]:
        once = normalize(raw)
        assert normalize(once) == once


def test_long_vowel_spellings_fold_together():
    assert normalize("ohayou") == normalize("ohayoo") == normalize("ohayo") == "ohayo"
    assert normalize("arigatou") == "arigato"
    assert collapse_long_vowels("kuuki") == "kuki"


def test_japanese_phrases_map_to_romaji():
    assert normalize("ありがとう") == normalize("arigatou")
    assert normalize("お疲れ様") == "otsukaresama"


def test_kana_transliteration():
    assert normalize("おつかれ") == "otsukare"
    assert normalize("アリガトウ") == "arigato"
    assert kana_to_romaji("ちょっと") == "chotto"
    assert kana_to_romaji("しゃしん") == "shashin"
    assert kana_to_romaji("きょう") == "kyou"
    assert kana_to_romaji("ラーメン") == "raamen"


def test_kana_passes_other_characters_through():
    assert kana_to_romaji("abc") == "abc"


def test_strip_diacritics():
    assert strip_diacritics("naïve façade") == "naive facade"


def test_token_splitting():
    assert split_token("raised_hands") == ["raised", "hands"]
    assert split_token("ok--hand") == ["ok", "hand"]
    assert split_token("thumbsup") == ["thumbsup"]
    assert word_parts("thank you_very-much") == ["thank", "you", "very", "much"]


def test_ngrams():
    assert ngrams("abcd") == {"abc", "bcd"}
    assert ngrams("ab") == {"ab"}
    assert ngrams("") == set()


@pytest.mark.parametrize("raw", ["thank you", "good", "cool", "good morning", "book"])
def test_english_words_keep_their_vowels(raw):
    assert normalize(raw) == raw


def test_romaji_detection():
    assert is_romaji("arigatou")
    assert is_romaji("ohayou gozaimasu")
    assert is_romaji("konnichiwa")
    assert is_romaji("chotto")
    assert not is_romaji("thank you")
    assert not is_romaji("good")
    assert not is_romaji("123")
