# model_store.py - JSON persistence for usage frequencies

# - the frequency file holds {"version": 1, "saved_at": ts, "records": {id: {count, last_used}}}
# - a version mismatch or unreadable file loads as empty (fresh start) and is logged
# - writes go to a temp file first and replace the target, so a crash mid-write
#   never leaves a truncated file behind

import json
import os
import threading
import time
from typing import Dict

from .logger_utils import Log

VERSION = 1

# Directory where data files live by default
DATA_DIRECTORY = os.environ.get("EMOJI_SEARCH_DATA_DIR", "data")
FREQUENCY_PATH = os.path.join(DATA_DIRECTORY, "emoji_frequency.json")


class JsonFrequencyStore:
    """File-backed FrequencyPersistence implementation."""

    def __init__(self, path: str = FREQUENCY_PATH):
        self.path = path
        self._lock = threading.Lock()

    def load_frequency(self) -> Dict[str, dict]:
        """
        Load stored records.
        Returns:
            dict: {id: {"count": int, "last_used": float}}, empty if missing/unreadable.
        """
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            Log.write(f"[FrequencyStore] load failed for {self.path}: {e}")
            return {}

        if not isinstance(data, dict) or data.get("version") != VERSION:
            Log.write("[FrequencyStore] version mismatch; starting fresh")
            return {}
        records = data.get("records") or {}
        Log.write(f"[FrequencyStore] loaded {len(records)} records from {self.path}")
        return records

    def save_frequency(self, records: Dict[str, dict]) -> None:
        """
        Save records to disk.
        Args:
            records (dict): {id: {"count": int, "last_used": float}}
        """
        payload = {"version": VERSION, "saved_at": time.time(), "records": records}
        with self._lock:
            folder = os.path.dirname(self.path)
            if folder:
                os.makedirs(folder, exist_ok=True)
            tmp = f"{self.path}.tmp"
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        Log.write(f"[FrequencyStore] saved {len(records)} records")
