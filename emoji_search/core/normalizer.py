# emoji_search/core/normalizer.py
"""
Text normalization shared by the index builder and the query path.

normalize() is a pure function of its input:
  1. NFKC fold + lowercase
  2. known Japanese phrases -> canonical romaji (lexicon)
  3. hiragana/katakana -> Hepburn romaji
  4. strip diacritics
  5. drop anything outside [a-z0-9_- ], collapse whitespace
  6. collapse length-vowel variants (ou/oo -> o, uu -> u) when every
     word reads as romaji, so English such as "thank you" or "good" stays put
"""

from __future__ import annotations

import re
import unicodedata
from typing import List, Set

from .lexicon import JAPANESE_ROMAJI

_KANA = {
    "あ": "a", "い": "i", "う": "u", "え": "e", "お": "o",
    "か": "ka", "き": "ki", "く": "ku", "け": "ke", "こ": "ko",
    "が": "ga", "ぎ": "gi", "ぐ": "gu", "げ": "ge", "ご": "go",
    "さ": "sa", "し": "shi", "す": "su", "せ": "se", "そ": "so",
    "ざ": "za", "じ": "ji", "ず": "zu", "ぜ": "ze", "ぞ": "zo",
    "た": "ta", "ち": "chi", "つ": "tsu", "て": "te", "と": "to",
    "だ": "da", "ぢ": "ji", "づ": "zu", "で": "de", "ど": "do",
    "な": "na", "に": "ni", "ぬ": "nu", "ね": "ne", "の": "no",
    "は": "ha", "ひ": "hi", "ふ": "fu", "へ": "he", "ほ": "ho",
    "ば": "ba", "び": "bi", "ぶ": "bu", "べ": "be", "ぼ": "bo",
    "ぱ": "pa", "ぴ": "pi", "ぷ": "pu", "ぺ": "pe", "ぽ": "po",
    "ま": "ma", "み": "mi", "む": "mu", "め": "me", "も": "mo",
    "や": "ya", "ゆ": "yu", "よ": "yo",
    "ら": "ra", "り": "ri", "る": "ru", "れ": "re", "ろ": "ro",
    "わ": "wa", "ゐ": "i", "ゑ": "e", "を": "o", "ん": "n",
    "ぁ": "a", "ぃ": "i", "ぅ": "u", "ぇ": "e", "ぉ": "o",
    "ゔ": "vu",
}

# small ya/yu/yo after an i-row kana
_YOON = {"ゃ": "a", "ゅ": "u", "ょ": "o"}
_SMALL_Y = {"ゃ": "ya", "ゅ": "yu", "ょ": "yo"}

_PHRASES = sorted(JAPANESE_ROMAJI, key=len, reverse=True)

_ALLOWED_RE = re.compile(r"[^a-z0-9_\- ]")
_SPACE_RE = re.compile(r"\s+")
_LONG_O_RE = re.compile(r"o[ou]+")
_LONG_U_RE = re.compile(r"uu+")
_SPLIT_RE = re.compile(r"[_\-]+")
_WORD_RE = re.compile(r"[_\-\s]+")
_NON_ALPHA_RE = re.compile(r"[^a-z]+")

# a word made only of Hepburn syllables: (onset) vowel, syllabic n,
# or a doubled consonant before its syllable (kk, tt, tch)
_ROMAJI_WORD_RE = re.compile(
    r"(?:(?:sh|ch|ts|[kgnhbpmr]y|[kgsztdnhbpmrjfvwy])?[aiueo]"
    r"|n(?![aiueoy])"
    r"|([kstpgdbzfjh])(?=\1)"
    r"|t(?=ch))+"
)


def _katakana_to_hiragana(text: str) -> str:
    chars: List[str] = []
    for ch in text:
        code = ord(ch)
        if 0x30A1 <= code <= 0x30F6:
            chars.append(chr(code - 0x60))
        else:
            chars.append(ch)
    return "".join(chars)


def _replace_phrases(text: str) -> str:
    if text.isascii():
        return text
    for phrase in _PHRASES:
        if phrase in text:
            text = text.replace(phrase, JAPANESE_ROMAJI[phrase][0].replace(" ", ""))
    return text


def kana_to_romaji(text: str) -> str:
    """Transliterate hiragana/katakana to Hepburn romaji; other characters pass through."""
    text = _katakana_to_hiragana(text)
    out: List[str] = []
    double_next = False
    for ch in text:
        if ch == "っ":
            double_next = True
            continue
        if ch in _YOON and out and out[-1].endswith("i") and len(out[-1]) >= 2:
            prev = out.pop()
            # shi+ya -> sha, chi+yu -> chu, ki+yo -> kyo
            stem = prev[:-1] if prev[:-1] in ("sh", "ch", "j") else prev[:-1] + "y"
            out.append(stem + _YOON[ch])
            continue
        if ch == "ー":
            if out and out[-1][-1:] in "aeiou":
                out.append(out[-1][-1])
            continue
        roman = _KANA.get(ch) or _SMALL_Y.get(ch, ch)
        if double_next and roman[:1].isalpha() and roman[:1] not in "aeiou":
            roman = roman[0] + roman
        double_next = False
        out.append(roman)
    return "".join(out)


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def collapse_long_vowels(text: str) -> str:
    """Fold romaji long-vowel spellings onto one form: ohayou/ohayoo/ohayo -> ohayo."""
    return _LONG_U_RE.sub("u", _LONG_O_RE.sub("o", text))


def is_romaji(text: str) -> bool:
    """True when every alphabetic run in `text` parses as Hepburn syllables."""
    words = [w for w in _NON_ALPHA_RE.split(text) if w]
    return bool(words) and all(_ROMAJI_WORD_RE.fullmatch(w) for w in words)


def normalize(text: str) -> str:
    if not text:
        return ""
    s = unicodedata.normalize("NFKC", str(text)).lower()
    s = _replace_phrases(s)
    if not s.isascii():
        s = kana_to_romaji(s)
        s = strip_diacritics(s)
    s = _ALLOWED_RE.sub("", s)
    s = _SPACE_RE.sub(" ", s).strip()
    if is_romaji(s):
        s = collapse_long_vowels(s)
    return s


def split_token(text: str) -> List[str]:
    """`_`/`-` sub-splits of an already normalized token (empty pieces dropped)."""
    return [p for p in _SPLIT_RE.split(text) if p]


def word_parts(text: str) -> List[str]:
    """`_`/`-`/space sub-splits of an already normalized token."""
    return [p for p in _WORD_RE.split(text) if p]


def ngrams(text: str, n: int = 3) -> Set[str]:
    """Character n-grams of `text`; strings shorter than n yield themselves."""
    if not text:
        return set()
    if len(text) <= n:
        return {text}
    return {text[i:i + n] for i in range(len(text) - n + 1)}
