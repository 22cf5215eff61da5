# emoji_search/core/catalog_sources.py
"""
Ready-made CatalogSource implementations.

 - StaticCatalogSource: in-memory maps (tests, embedding apps)
 - JsonCatalogSource: a JSON file holding either a Slack `emoji.list`
   response or a cached {"custom", "standard", "lastFetched"} catalog
 - parse_emoji_list(): turns an `emoji.list` response into a CatalogPayload

Fetching over the network is the caller's job; these only shape data.
"""

from __future__ import annotations

import json
import os
import time
from typing import Dict, Mapping, Optional

from .errors import CatalogUnavailable
from .lexicon import default_standard_catalog
from .models import EmojiEntry, EmojiKind
from .protocols import CatalogPayload, CatalogValue
from ..utils.logger_utils import Log

ALIAS_PREFIX = "alias:"


def parse_emoji_list(payload: Mapping, standard: Optional[Mapping[str, CatalogValue]] = None) -> CatalogPayload:
    """
    Split a Slack-style `emoji.list` response into custom and standard maps.

    payload: {"ok": bool, "emoji": {name: url | "alias:<target>"}, "error": str}
    - http(s) values become custom entries
    - "alias:<target>" values copy the target's render value, looking in the
      custom map first and the standard map second; unresolved aliases are dropped
    - anything else is ignored (the standard catalog comes from `standard`)
    Raises CatalogUnavailable when ok is false or the emoji map is missing.
    """
    if not isinstance(payload, Mapping):
        raise CatalogUnavailable("emoji.list payload is not an object", source="emoji.list")
    if not payload.get("ok") or not isinstance(payload.get("emoji"), Mapping):
        raise CatalogUnavailable(payload.get("error") or "failed to fetch emoji list", source="emoji.list")

    standard_map = dict(standard) if standard is not None else default_standard_catalog()

    custom: Dict[str, str] = {}
    aliases: Dict[str, str] = {}
    for name, value in payload["emoji"].items():
        if not isinstance(value, str):
            continue
        if value.startswith(ALIAS_PREFIX):
            aliases[name] = value[len(ALIAS_PREFIX):]
        elif value.startswith("http"):
            custom[name] = value

    resolved = 0
    for name, target in sorted(aliases.items()):
        if target in custom:
            custom[name] = custom[target]
            resolved += 1
        elif target in standard_map:
            std = standard_map[target]
            custom[name] = std.render_value if isinstance(std, EmojiEntry) else std
            resolved += 1

    Log.write(
        f"[CatalogSource] emoji.list: {len(custom) - resolved} custom, "
        f"{resolved}/{len(aliases)} aliases resolved"
    )
    return {"custom": custom, "standard": standard_map}


class StaticCatalogSource:
    """Serves fixed maps; set_catalog() swaps them for the next reload."""

    def __init__(self, custom: Optional[Mapping[str, CatalogValue]] = None,
                 standard: Optional[Mapping[str, CatalogValue]] = None):
        self.custom = dict(custom or {})
        self.standard = dict(standard) if standard is not None else default_standard_catalog()
        self.calls = 0

    def set_catalog(self, custom: Optional[Mapping[str, CatalogValue]] = None,
                    standard: Optional[Mapping[str, CatalogValue]] = None) -> None:
        if custom is not None:
            self.custom = dict(custom)
        if standard is not None:
            self.standard = dict(standard)

    def get_current_catalog(self) -> CatalogPayload:
        self.calls += 1
        return {"custom": dict(self.custom), "standard": dict(self.standard)}


class JsonCatalogSource:
    """
    Reads a catalog from disk on every call.

    Accepted layouts:
      {"ok": true, "emoji": {...}}                          (emoji.list response)
      {"custom": {...}, "standard": {...}, "lastFetched": ms}  (cached catalog)
    max_age (seconds) rejects cached catalogs whose lastFetched is older.
    """

    def __init__(self, path: str, max_age: Optional[float] = None,
                 standard: Optional[Mapping[str, CatalogValue]] = None):
        self.path = path
        self.max_age = max_age
        self.standard = standard

    def get_current_catalog(self) -> CatalogPayload:
        if not os.path.exists(self.path):
            raise CatalogUnavailable(f"catalog file not found: {self.path}", source=self.path)
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise CatalogUnavailable(f"unreadable catalog file {self.path}: {e}", source=self.path) from e

        if not isinstance(data, dict):
            raise CatalogUnavailable("catalog file must hold a JSON object", source=self.path)
        if "emoji" in data:
            return parse_emoji_list(data, standard=self.standard)
        if "custom" not in data and "standard" not in data:
            raise CatalogUnavailable("catalog file has neither 'emoji' nor 'custom'/'standard'", source=self.path)

        fetched = data.get("lastFetched")
        if self.max_age is not None and fetched is not None:
            age = time.time() - float(fetched) / 1000.0
            if age > self.max_age:
                raise CatalogUnavailable(f"cached catalog is stale ({int(age)}s old)", source=self.path)

        standard = data.get("standard")
        if standard is None:
            standard = dict(self.standard) if self.standard is not None else default_standard_catalog()
        return {
            "custom": {k: _entry_from_json(k, v, EmojiKind.CUSTOM) for k, v in (data.get("custom") or {}).items()},
            "standard": {k: _entry_from_json(k, v, EmojiKind.STANDARD) for k, v in standard.items()},
        }


def _entry_from_json(name: str, raw, kind: EmojiKind) -> CatalogValue:
    """Cached values are either a bare render value or {value, keywords, aliases}."""
    if isinstance(raw, (str, EmojiEntry)):
        return raw
    if isinstance(raw, Mapping):
        return EmojiEntry(
            id=name,
            kind=kind,
            render_value=str(raw.get("value", "")),
            keywords=tuple(raw.get("keywords") or ()),
            aliases=tuple(raw.get("aliases") or ()),
            category=raw.get("category"),
        )
    raise CatalogUnavailable(f"bad catalog value for {name!r}", source="json")
