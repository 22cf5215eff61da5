# bktree.py
# BK-tree for typo-tolerant token lookup in the fuzzy tier.
# - The tree is keyed on Levenshtein distance, a true metric, so the triangle
#   inequality prunes safely.
# - Matches are then re-scored with optimal string alignment (restricted
#   Damerau-Levenshtein) so an adjacent transposition costs 1, not 2.
#   OSA <= d implies Levenshtein <= 2d, so query_osa() walks the tree with
#   radius 2d and filters.
# Query uses an explicit stack (no recursion).

from typing import Iterable, List, Optional, Tuple


def levenshtein_with_cutoff(a: str, b: str, max_dist: Optional[int] = None) -> int:
    """
    Levenshtein distance with optional early exit once every cell of a row
    exceeds max_dist (returns max_dist + 1 in that case).
    """
    if a == b:
        return 0

    # ensure a is the longer string to simplify indexing
    if len(a) < len(b):
        a, b = b, a

    la, lb = len(a), len(b)

    if max_dist is not None and la - lb > max_dist:
        return max_dist + 1

    prev = list(range(lb + 1))

    for i in range(1, la + 1):
        ca = a[i - 1]
        curr = [i]
        row_min = i

        for j in range(1, lb + 1):
            ins = curr[j - 1] + 1
            delete = prev[j] + 1
            replace = prev[j - 1] + (0 if ca == b[j - 1] else 1)
            val = ins if ins < delete else delete
            if replace < val:
                val = replace
            curr.append(val)
            if val < row_min:
                row_min = val

        if max_dist is not None and row_min > max_dist:
            return max_dist + 1
        prev = curr
    return prev[-1]


def osa_distance(a: str, b: str, max_dist: Optional[int] = None) -> int:
    """
    Optimal string alignment distance: Levenshtein plus adjacent
    transpositions ("thumsbup" -> "thumbsup" is 1). Same cutoff contract as
    levenshtein_with_cutoff.
    """
    if a == b:
        return 0

    la, lb = len(a), len(b)
    if max_dist is not None and abs(la - lb) > max_dist:
        return max_dist + 1

    prev2: List[int] = []
    prev = list(range(lb + 1))

    for i in range(1, la + 1):
        curr = [i] + [0] * lb
        row_min = i
        for j in range(1, lb + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            val = min(prev[j] + 1, curr[j - 1] + 1, prev[j - 1] + cost)
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                val = min(val, prev2[j - 2] + 1)
            curr[j] = val
            if val < row_min:
                row_min = val

        # transpositions reach two rows back, so both rows must be over the cutoff
        if max_dist is not None and row_min > max_dist and i > 1 and min(prev) > max_dist:
            return max_dist + 1
        prev2, prev = prev, curr
    d = prev[-1]
    if max_dist is not None and d > max_dist:
        return max_dist + 1
    return d


class BKTree:
    """BK-tree for approximate token lookup."""

    class Node:
        __slots__ = ("word", "children", "count")

        def __init__(self, word: str):
            self.word = word
            self.children: dict[int, "BKTree.Node"] = {}
            self.count = 1

    def __init__(self, words: Iterable[str] = ()):
        self.root: Optional[BKTree.Node] = None
        self._size = 0
        self.insert_many(words)

    # insertion/building -------------------------------------------------------------
    def insert(self, word: str) -> None:
        if not word or not isinstance(word, str):
            return

        if self.root is None:
            self.root = BKTree.Node(word)
            self._size = 1
            return

        node = self.root
        while True:
            d = levenshtein_with_cutoff(word, node.word)
            if d == 0:
                node.count += 1
                return
            child = node.children.get(d)
            if child is None:
                node.children[d] = BKTree.Node(word)
                self._size += 1
                return
            node = child

    def insert_many(self, words: Iterable[str]) -> None:
        for w in words:
            self.insert(w)

    # query ---------------------------------------------------------------------------
    def query(self, word: str, max_dist: int = 2) -> List[Tuple[str, int]]:
        """
        (word, levenshtein distance) for stored words within max_dist,
        sorted by (distance, word).
        """
        if not word or self.root is None:
            return []

        results: List[Tuple[str, int]] = []
        stack = [self.root]
        while stack:
            node = stack.pop()
            d = levenshtein_with_cutoff(word, node.word)
            if d <= max_dist:
                results.append((node.word, d))

            # children distances to consider: [d - max_dist, d + max_dist]
            low = max(1, d - max_dist)
            high = d + max_dist
            for dist_key, child in node.children.items():
                if low <= dist_key <= high:
                    stack.append(child)

        results.sort(key=lambda item: (item[1], item[0]))
        return results

    def query_osa(self, word: str, max_dist: int = 1) -> List[Tuple[str, int]]:
        """Like query() but distances are OSA (transpositions cost 1)."""
        out: List[Tuple[str, int]] = []
        for cand, _lev in self.query(word, max_dist=2 * max_dist):
            d = osa_distance(word, cand, max_dist)
            if d <= max_dist:
                out.append((cand, d))
        out.sort(key=lambda item: (item[1], item[0]))
        return out

    # utilities -------------------------------------------------------------------
    def size(self) -> int:
        return self._size

    def words(self) -> List[Tuple[str, int]]:
        """All stored words with their insert counts, unsorted."""
        out: List[Tuple[str, int]] = []
        if not self.root:
            return out
        stack = [self.root]
        while stack:
            n = stack.pop()
            out.append((n.word, n.count))
            stack.extend(n.children.values())
        return out
