# config_manager.py - JSON config manager for engine settings

import json
import os
from typing import Any, Dict, Optional

from .logger_utils import Log

DEFAULTS: Dict[str, Any] = {
    "preview_limit": 8,          # picker preview under the composer
    "full_limit": 50,            # full result list for a typed query
    "popular_limit": 24,         # browse view when nothing is typed
    "suggestion_limit": 5,
    "cache_size": 256,
    "cache_ttl": 30.0,           # seconds; 0 disables expiry
    "max_query_length": 64,
    "recent_searches": 10,
    "enrich_catalog": True,      # add lexicon aliases/keywords to entries
    "autosave_frequency": True,  # persist counts after each update
}


class Config:
    """
    Settings dict seeded with DEFAULTS. With a path, values are read from and
    written back to a JSON file; without one it stays in memory.
    """

    def __init__(self, path: Optional[str] = None, **overrides: Any):
        self.path = path
        self.data: Dict[str, Any] = dict(DEFAULTS)
        self._load()
        for key, val in overrides.items():
            self.set(key, val, save=False)

    def _load(self) -> None:
        if not self.path:
            return
        if os.path.exists(self.path):
            try:
                with open(self.path, "r", encoding="utf8") as f:
                    raw = json.load(f)
            except (OSError, ValueError) as e:
                Log.write(f"[Config] could not read {self.path}: {e}; using defaults")
                return
            for key, val in raw.items():
                if key in self.data:
                    self.data[key] = self._coerce(key, val)
        else:
            self.save()

    def save(self) -> None:
        if not self.path:
            return
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def set(self, key: str, val: Any, save: bool = True) -> None:
        if key not in self.data:
            raise KeyError(f"no such option: {key}")
        self.data[key] = self._coerce(key, val)
        if save:
            self.save()

    def _coerce(self, key: str, val: Any) -> Any:
        kind = type(DEFAULTS[key])
        if kind is bool and isinstance(val, str):
            return val.strip().lower() in ("1", "true", "yes", "on")
        return kind(val)

    def show(self) -> Dict[str, Any]:
        return dict(self.data)
