# emoji_search/core/ranker.py
"""
TierRanker - tiered matching over an InvertedIndex.

Tiers (lower ranks first, all of them run for every query):
  1 exact       query == normalized id (also with spaces as `_`)      score 1.0
  2 prefix      normalized id or keyword/alias token starts with query  1 / (1 + extra chars)
  3 substring   query inside a keyword/alias token                      len(q) / len(token)
  4 name substr query inside the normalized id                          NAME_SUBSTRING_WEIGHT * len(q) / len(id)
  5 fuzzy       OSA distance <= max(1, ceil(len(q) / FUZZY_DIVISOR))    1 / (1 + d)

A hit on a `_`/`-`/space piece of a longer token scores PIECE_WEIGHT
times the whole-token score. Every entry keeps only its best
(tier, score). Ordering inside a tier: score desc, frequency desc,
custom before standard, id asc. Frequency is only ever a tie-break, so
it can never lift an entry into a better tier.
Top-k selection uses heapq.nsmallest rather than sorting every candidate.
"""

from __future__ import annotations

import heapq
import logging
import math
from typing import Dict, List, Mapping, Optional, Tuple

from .index_builder import InvertedIndex
from .models import MatchType, SearchResult, SearchToken, TokenSource

logger = logging.getLogger(__name__)

TIER_EXACT = 1
TIER_PREFIX = 2
TIER_SUBSTRING = 3
TIER_NAME_SUBSTRING = 4
TIER_FUZZY = 5

NAME_SUBSTRING_WEIGHT = 0.8
# a hit on a sub-split piece ("1" out of "-1") counts for less than the whole token
PIECE_WEIGHT = 0.5
FUZZY_DIVISOR = 4

# (tier, score, match_type, matched_on)
Match = Tuple[int, float, MatchType, str]

_SOURCE_TYPE = {
    TokenSource.NAME: MatchType.PREFIX,
    TokenSource.KEYWORD: MatchType.KEYWORD,
    TokenSource.ALIAS: MatchType.ALIAS,
}


def fuzzy_budget(query: str) -> int:
    return max(1, math.ceil(len(query) / FUZZY_DIVISOR))


class TierRanker:
    """
    match(query, index, frequency, limit) -> List[SearchResult]

    `query` must already be normalized; `frequency` is an {id: count} view
    taken once per call so the ordering is stable for the whole pass.
    """

    def __init__(self, fuzzy: bool = True):
        self.fuzzy = fuzzy

    def match(self, query: str, index: InvertedIndex,
              frequency: Optional[Mapping[str, int]] = None,
              limit: int = 50) -> List[SearchResult]:
        if not query or limit <= 0:
            return []
        frequency = frequency or {}
        best = self.candidates(query, index)
        if not best:
            return []

        def _key(emoji_id: str):
            tier, score, _mt, _on = best[emoji_id]
            entry = index.entry(emoji_id)
            return (tier, -round(score, 6), -frequency.get(emoji_id, 0), entry.kind.rank, emoji_id)

        top = heapq.nsmallest(limit, best, key=_key)
        out = []
        for emoji_id in top:
            tier, score, mtype, matched_on = best[emoji_id]
            out.append(SearchResult.from_entry(
                index.entry(emoji_id),
                match_type=mtype,
                matched_on=matched_on,
                tier=tier,
                score=round(score, 6),
                frequency=frequency.get(emoji_id, 0),
            ))
        logger.debug("match %r: %d candidates, returned %d", query, len(best), len(out))
        return out

    def candidates(self, query: str, index: InvertedIndex) -> Dict[str, Match]:
        """Best match per entry id across every tier."""
        best: Dict[str, Match] = {}

        def offer(emoji_id: str, tier: int, score: float, mtype: MatchType, matched_on: str,
                  tok: Optional[SearchToken] = None) -> None:
            if emoji_id not in index:
                return
            if tok is not None and index.is_piece(tok, emoji_id):
                score *= PIECE_WEIGHT
            cur = best.get(emoji_id)
            if cur is None or (tier, -score) < (cur[0], -cur[1]):
                best[emoji_id] = (tier, score, mtype, matched_on)

        # tier 1
        forms = [query]
        if " " in query:
            forms.append(query.replace(" ", "_"))
        for form in forms:
            for emoji_id in index.ids_by_norm.get(form, ()):
                offer(emoji_id, TIER_EXACT, 1.0, MatchType.EXACT, f"name:{form}")

        # tier 2
        qlen = len(query)
        for text in index.prefix_texts(query):
            score = 1.0 / (1 + len(text) - qlen)
            for tok in index.by_text.get(text, ()):
                for emoji_id in index.ids_for(tok):
                    if tok.source is TokenSource.NAME and index.normalized_ids.get(emoji_id) != text:
                        # id pieces feed fuzzy matching only
                        continue
                    offer(emoji_id, TIER_PREFIX, score, _SOURCE_TYPE[tok.source], _on(tok), tok)

        # tiers 3 and 4
        for text in index.substring_texts(query):
            ratio = qlen / len(text)
            for tok in index.by_text.get(text, ()):
                for emoji_id in index.ids_for(tok):
                    if tok.source is TokenSource.NAME:
                        if index.normalized_ids.get(emoji_id) == text:
                            offer(emoji_id, TIER_NAME_SUBSTRING, NAME_SUBSTRING_WEIGHT * ratio,
                                  MatchType.KEYWORD, f"name:{emoji_id}")
                    else:
                        offer(emoji_id, TIER_SUBSTRING, ratio, _SOURCE_TYPE[tok.source], _on(tok), tok)

        # tier 5
        if self.fuzzy:
            for text, dist in index.fuzzy_texts(query, fuzzy_budget(query)):
                score = 1.0 / (1 + dist)
                for tok in index.by_text.get(text, ()):
                    for emoji_id in index.ids_for(tok):
                        offer(emoji_id, TIER_FUZZY, score, MatchType.FUZZY, _on(tok), tok)
        return best


def _on(tok: SearchToken) -> str:
    return f"{tok.source.value}:{tok.text}"
