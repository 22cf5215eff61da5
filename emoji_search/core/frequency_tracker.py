# emoji_search/core/frequency_tracker.py
"""
FrequencyTracker
Per-emoji usage counter feeding the ranker's tie-breaks and the popular listing.
 - increment() is lock-guarded so concurrent selections never lose updates
 - counts only grow; reset() is the single way to clear them
 - ids need not exist in the catalog (a removed custom emoji keeps its count)
 - snapshot()/load() speak the plain dict shape the persistence layer stores
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .protocols import FrequencyMap
from ..utils.logger_utils import Log


@dataclass
class FrequencyRecord:
    count: int = 0
    last_used: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return {"count": self.count, "last_used": self.last_used}


class FrequencyTracker:
    """
    Public API:
      increment(emoji_id) -> new count
      count(emoji_id) / last_used(emoji_id)
      counts() -> frozen {id: count} view for one ranking pass
      top(n), snapshot(), load(records), reset()
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._records: Dict[str, FrequencyRecord] = {}
        self._lock = threading.Lock()
        self._clock = clock
        # bumped on every change; lets callers detect staleness cheaply
        self.version = 0

    # Event recording --------------------------------------------------------------
    def increment(self, emoji_id: str, when: Optional[float] = None) -> int:
        if not emoji_id:
            return 0
        ts = self._clock() if when is None else when
        with self._lock:
            rec = self._records.get(emoji_id)
            if rec is None:
                rec = self._records[emoji_id] = FrequencyRecord()
            rec.count += 1
            rec.last_used = max(rec.last_used, ts)
            self.version += 1
            return rec.count

    # Queries -------------------------------------------------------------------------
    def count(self, emoji_id: str) -> int:
        rec = self._records.get(emoji_id)
        return rec.count if rec else 0

    def last_used(self, emoji_id: str) -> Optional[float]:
        rec = self._records.get(emoji_id)
        return rec.last_used if rec else None

    def counts(self) -> Mapping[str, int]:
        """Consistent copy of all counts, taken under the lock."""
        with self._lock:
            return {k: r.count for k, r in self._records.items()}

    def top(self, n: int = 10) -> List[Tuple[str, int]]:
        items = self.counts().items()
        return sorted(items, key=lambda kv: (-kv[1], kv[0]))[:n]

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, emoji_id: object) -> bool:
        return emoji_id in self._records

    # Persistence shape ----------------------------------------------------------------
    def snapshot(self) -> FrequencyMap:
        with self._lock:
            return {k: {"count": r.count, "last_used": r.last_used} for k, r in self._records.items()}

    def load(self, records: Mapping[str, Mapping]) -> None:
        """
        Merge persisted records in. Counts never go down: a stored count lower
        than the in-memory one (updates made before loading) keeps the higher.
        """
        loaded = 0
        with self._lock:
            for emoji_id, raw in (records or {}).items():
                try:
                    cnt = int(raw.get("count", 0))
                    ts = float(raw.get("last_used", 0.0) or 0.0)
                except (AttributeError, TypeError, ValueError):
                    continue
                if cnt <= 0:
                    continue
                rec = self._records.setdefault(emoji_id, FrequencyRecord())
                rec.count = max(rec.count, cnt)
                rec.last_used = max(rec.last_used, ts)
                loaded += 1
            self.version += 1
        Log.write(f"[Frequency] loaded {loaded} records")

    def reset(self) -> None:
        with self._lock:
            self._records.clear()
            self.version += 1
        Log.write("[Frequency] reset all counts")
