# logger_utils.py - log lines and timing metrics for the engine components

import os
import threading
import time
from datetime import datetime
from typing import Optional

# Directory where log files are stored; created on first write
LOG_DIR = os.environ.get("EMOJI_SEARCH_LOG_DIR", "logs")

# Path to the default log file, can be overridden with Log.configure()
DEFAULT_LOG_PATH = os.path.join(LOG_DIR, "emoji_search.log")


class Log:
    """
    Lightweight logger shared by every component.
    Lines look like: [YYYY-MM-DD HH:MM:SS] [Component] message
    File output can be switched off (path=None) and console echo switched on.
    """

    path: Optional[str] = DEFAULT_LOG_PATH
    echo: bool = False
    _lock = threading.Lock()

    @classmethod
    def configure(cls, path: Optional[str] = DEFAULT_LOG_PATH, echo: bool = False) -> None:
        cls.path = path
        cls.echo = bool(echo)

    @classmethod
    def write(cls, msg: str) -> None:
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{ts}] {msg}"
        if cls.echo:
            print(line)
        if not cls.path:
            return
        with cls._lock:
            folder = os.path.dirname(cls.path)
            if folder:
                os.makedirs(folder, exist_ok=True)
            with open(cls.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

    @classmethod
    def metric(cls, tag: str, value, unit: str = "") -> None:
        """
        Record a metric (timing, counts).
        Example: [2026-10-18 12:45:02] IndexBuilder.build done: 0.012s
        """
        cls.write(f"{tag}: {value}{unit}")

    @staticmethod
    def time_block(label: str) -> "_Timer":
        """
        Measure a code block and log its duration:
            with Log.time_block("IndexBuilder.build"):
                build()
        """
        return _Timer(label)


class _Timer:
    """Context manager used by Log.time_block."""

    def __init__(self, label: str):
        self.label = label
        self.start = time.perf_counter()
        self.elapsed = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        if exc_type is None:
            Log.metric(f"{self.label} done", round(self.elapsed, 4), "s")
        return False
