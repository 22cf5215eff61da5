# emoji_search/core/index_builder.py
"""
IndexBuilder - turns a CatalogSnapshot into an immutable InvertedIndex.

Per entry it emits SearchTokens from three sources:
 - NAME:    the normalized id and its `_`/`-` pieces
 - KEYWORD: each normalized keyword and its `_`/`-`/space pieces
 - ALIAS:   each normalized alias and its word pieces

From those it derives:
 - postings   SearchToken -> ids
 - forward    id -> SearchTokens
 - by_text    token text -> SearchTokens sharing that text (one per source)
 - a Trie over token texts (prefix tier)
 - trigram postings over token texts (substring tiers)
 - a BK-tree over token texts (fuzzy tier)

build() never touches an index it returned earlier, so the facade can swap
the active index with a single assignment while readers keep using the old
one.
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from typing import Dict, FrozenSet, List, Mapping, Optional, Set, Tuple

from .bktree import BKTree
from .models import CatalogSnapshot, EmojiEntry, SearchToken, TokenSource
from .normalizer import ngrams, normalize, split_token, word_parts
from .trie import Trie
from ..utils.logger_utils import Log

logger = logging.getLogger(__name__)

TRIGRAM = 3


class InvertedIndex:
    """Read-only search structures derived from one catalog snapshot."""

    def __init__(
        self,
        snapshot: CatalogSnapshot,
        postings: Mapping[SearchToken, FrozenSet[str]],
        forward: Mapping[str, FrozenSet[SearchToken]],
        normalized_ids: Mapping[str, str],
        pieces: Optional[Mapping[SearchToken, FrozenSet[str]]] = None,
        built_at: Optional[float] = None,
    ) -> None:
        self.snapshot = snapshot
        self.postings: Dict[SearchToken, FrozenSet[str]] = dict(postings)
        # token -> ids that only carry it as a sub-split piece of a longer token
        self.pieces: Dict[SearchToken, FrozenSet[str]] = dict(pieces or {})
        self.forward: Dict[str, FrozenSet[SearchToken]] = dict(forward)
        # id -> normalized id
        self.normalized_ids: Dict[str, str] = dict(normalized_ids)
        self.built_at = built_at if built_at is not None else time.time()

        by_norm: Dict[str, Set[str]] = defaultdict(set)
        for emoji_id, norm in self.normalized_ids.items():
            if norm:
                by_norm[norm].add(emoji_id)
        # normalized id -> ids (several raw ids can fold onto one form)
        self.ids_by_norm: Dict[str, FrozenSet[str]] = {k: frozenset(v) for k, v in by_norm.items()}

        by_text: Dict[str, List[SearchToken]] = defaultdict(list)
        for tok in self.postings:
            by_text[tok.text].append(tok)
        self.by_text: Dict[str, Tuple[SearchToken, ...]] = {
            text: tuple(sorted(toks)) for text, toks in by_text.items()
        }

        self.trie = Trie(self.by_text)
        self.bktree = BKTree(sorted(self.by_text))

        grams: Dict[str, Set[str]] = defaultdict(set)
        for text in self.by_text:
            for g in ngrams(text, TRIGRAM):
                grams[g].add(text)
        self.trigrams: Dict[str, FrozenSet[str]] = {g: frozenset(t) for g, t in grams.items()}

    # lookups -------------------------------------------------------------
    def entry(self, emoji_id: str) -> Optional[EmojiEntry]:
        return self.snapshot.get(emoji_id)

    def tokens_for(self, emoji_id: str) -> FrozenSet[SearchToken]:
        return self.forward.get(emoji_id, frozenset())

    def ids_for(self, token: SearchToken) -> FrozenSet[str]:
        return self.postings.get(token, frozenset())

    def is_piece(self, token: SearchToken, emoji_id: str) -> bool:
        return emoji_id in self.pieces.get(token, ())

    def prefix_texts(self, prefix: str) -> List[str]:
        return [text for text, _count in self.trie.search_prefix(prefix)]

    def substring_texts(self, query: str) -> List[str]:
        """Token texts containing `query`, sorted for deterministic iteration."""
        if not query:
            return []
        if len(query) < TRIGRAM:
            return sorted(t for t in self.by_text if query in t)

        candidates: Optional[Set[str]] = None
        for g in ngrams(query, TRIGRAM):
            texts = self.trigrams.get(g)
            if not texts:
                return []
            candidates = set(texts) if candidates is None else candidates & texts
            if not candidates:
                return []
        return sorted(t for t in (candidates or ()) if query in t)

    def fuzzy_texts(self, query: str, max_dist: int) -> List[Tuple[str, int]]:
        return self.bktree.query_osa(query, max_dist)

    # introspection -------------------------------------------------------
    def __len__(self) -> int:
        return len(self.snapshot)

    def __contains__(self, emoji_id: object) -> bool:
        return emoji_id in self.snapshot

    def token_count(self) -> int:
        return len(self.postings)

    def stats(self) -> Dict[str, int]:
        return {
            "entries": len(self.snapshot),
            "tokens": len(self.postings),
            "texts": len(self.by_text),
            "trigrams": len(self.trigrams),
        }


def split_entry_tokens(entry: EmojiEntry) -> Tuple[Set[SearchToken], Set[SearchToken]]:
    """
    (whole, pieces) for one entry: whole tokens are the normalized id and each
    normalized keyword/alias; pieces are their `_`/`-`/space sub-splits that
    are not also whole tokens of the same entry.
    """
    whole: Set[SearchToken] = set()
    pieces: Set[SearchToken] = set()

    nid = normalize(entry.id)
    if nid:
        whole.add(SearchToken(nid, TokenSource.NAME))
        for part in split_token(nid):
            pieces.add(SearchToken(part, TokenSource.NAME))

    for source, values in ((TokenSource.KEYWORD, entry.keywords), (TokenSource.ALIAS, entry.aliases)):
        for raw in values:
            text = normalize(raw)
            if not text:
                continue
            whole.add(SearchToken(text, source))
            for part in word_parts(text):
                pieces.add(SearchToken(part, source))
    return whole, pieces - whole


def entry_tokens(entry: EmojiEntry) -> Set[SearchToken]:
    """Every SearchToken an entry contributes to the index."""
    whole, pieces = split_entry_tokens(entry)
    return whole | pieces


class IndexBuilder:
    """Stateless builder; one instance can serve any number of engines."""

    def build(self, snapshot: CatalogSnapshot) -> InvertedIndex:
        with Log.time_block("IndexBuilder.build"):
            postings: Dict[SearchToken, Set[str]] = defaultdict(set)
            piece_ids: Dict[SearchToken, Set[str]] = defaultdict(set)
            forward: Dict[str, FrozenSet[SearchToken]] = {}
            normalized_ids: Dict[str, str] = {}

            for entry in snapshot:
                whole, pieces = split_entry_tokens(entry)
                forward[entry.id] = frozenset(whole | pieces)
                normalized_ids[entry.id] = normalize(entry.id)
                for tok in whole | pieces:
                    postings[tok].add(entry.id)
                for tok in pieces:
                    piece_ids[tok].add(entry.id)

            index = InvertedIndex(
                snapshot=snapshot,
                postings={tok: frozenset(ids) for tok, ids in postings.items()},
                forward=forward,
                normalized_ids=normalized_ids,
                pieces={tok: frozenset(ids) for tok, ids in piece_ids.items()},
            )
        Log.write(f"[IndexBuilder] indexed {len(snapshot)} entries, {index.token_count()} tokens")
        logger.debug("index stats: %s", index.stats())
        return index
