# trie.py
# Prefix tree over normalized index tokens.
# Each terminal node counts how many times its token was inserted; results
# come back shortest first so a limit keeps the closest completions.

from __future__ import annotations
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

Token = str
Count = int
Candidate = Tuple[Token, Count]


class TrieNode:
    """
    A single node in the Trie.
    children: char -> TrieNode
    is_token: marks the end of an indexed token
    count: number of inserts of this token
    """

    __slots__ = ("children", "is_token", "count")

    def __init__(self) -> None:
        self.children: Dict[str, TrieNode] = defaultdict(TrieNode)
        self.is_token = False
        self.count = 0


class Trie:
    """
    Token trie used by the ranker's prefix tier. Input is expected to be
    normalized already; nothing is lowercased or stripped here.
    """

    def __init__(self, tokens: Iterable[str] = ()) -> None:
        self._root = TrieNode()
        self._size = 0
        for tok in tokens:
            self.insert(tok)

    # insertion -----------------------------------------------------
    def insert(self, token: str) -> None:
        if not token:
            return

        node = self._root
        for ch in token:
            node = node.children[ch]
        if not node.is_token:
            self._size += 1
        node.is_token = True
        node.count += 1

    # search/traversal ---------------------------------------------------------
    def search_prefix(self, prefix: str, limit: Optional[int] = None) -> List[Candidate]:
        """
        Return (token, count) for every token starting with `prefix`
        (the prefix itself included when it is a token).
        Sorted by shorter token first, then lexicographically, so the
        closest completions lead when `limit` cuts the list.
        """
        if not prefix:
            return []

        node = self._root
        for ch in prefix:
            nxt = node.children.get(ch)
            if nxt is None:
                return []
            node = nxt

        out: List[Candidate] = []
        self._collect(node, prefix, out)
        out.sort(key=lambda t: (len(t[0]), t[0]))
        return out if limit is None else out[:limit]

    # internal collector ---------------------------------------------------------
    def _collect(self, node: TrieNode, prefix: str, results: List[Candidate]) -> None:
        """Iterative DFS collecting tokens under a prefix node."""
        stack = [(node, prefix)]
        while stack:
            cur, text = stack.pop()
            if cur.is_token:
                results.append((text, cur.count))
            for ch, child in cur.children.items():
                stack.append((child, text + ch))

    # convenience -----------------------------------------------------
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def __contains__(self, token: str) -> bool:
        node = self._root
        for ch in token:
            node = node.children.get(ch)
            if node is None:
                return False
        return node.is_token
