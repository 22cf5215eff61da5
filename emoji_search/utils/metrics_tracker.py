# metrics_tracker.py

import json
import os
import threading
from collections import defaultdict
from typing import Dict, Optional


class Metrics:
    """Running sum/count per key; persisted to JSON only when a path is given."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.m = defaultdict(float)
        self.n = defaultdict(int)
        self._lock = threading.Lock()
        self._load()

    def _load(self):
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                d = json.load(f)
        except (OSError, ValueError):
            return
        for k, v in d.items():
            self.m[k] = float(v.get("sum", 0.0))
            self.n[k] = int(v.get("count", 0))

    def save(self):
        if not self.path:
            return
        d = {k: {"sum": self.m[k], "count": self.n[k]} for k in self.m}
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(d, f, indent=2)

    def record(self, key: str, val: float = 1.0):
        with self._lock:
            self.m[key] += val
            self.n[key] += 1

    def count(self, key: str) -> int:
        return self.n.get(key, 0)

    def avg(self, key: str) -> float:
        if self.n.get(key, 0) == 0:
            return 0.0
        return self.m[key] / self.n[key]

    def snapshot(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            return {k: {"count": self.n[k], "avg": self.avg(k)} for k in sorted(self.m)}
