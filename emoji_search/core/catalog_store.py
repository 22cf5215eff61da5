# emoji_search/core/catalog_store.py
"""
CatalogStore - owns the merged custom + standard catalog.

 - snapshot: immutable CatalogSnapshot; replaced wholesale, never mutated
 - fetch(): pulls from a CatalogSource (sync or awaitable) and builds a
   snapshot without installing it; commit() installs one
 - reload(): fetch() + commit()
 - custom entries shadow standard ones with the same name
 - optional lexicon enrichment adds romaji/English aliases and categories
 - lookup(): name resolution for `:shortcode:` text, with spelling variants
   and a last-resort partial match over custom names
 - japanese_emoji() / quick_reactions(): discovery over custom names
"""

from __future__ import annotations

import dataclasses
import inspect
from typing import Dict, List, Mapping, Optional

from .errors import CatalogUnavailable
from .lexicon import POLITE_SUFFIXES, QUICK_REACTIONS, REACTION_FRAGMENTS, enrich_entry
from .models import CatalogSnapshot, EmojiEntry, EmojiKind
from .protocols import CatalogSource, CatalogValue
from ..utils.logger_utils import Log

_SHORTCUTS = {"+1": "thumbsup", "-1": "thumbsdown"}
_REGION_SUFFIXES = ("_ja", "_jp")

# shorter names match too much when compared by containment
MIN_PARTIAL_MATCH = 3


def _as_entry(name: str, value: CatalogValue, kind: EmojiKind) -> EmojiEntry:
    if isinstance(value, EmojiEntry):
        if value.id == name and value.kind is kind:
            return value
        return dataclasses.replace(value, id=name, kind=kind)
    if isinstance(value, str):
        return EmojiEntry(id=name, kind=kind, render_value=value)
    raise CatalogUnavailable(f"unsupported catalog value for {name!r}: {type(value).__name__}")


def build_snapshot(custom: Mapping[str, CatalogValue],
                   standard: Mapping[str, CatalogValue],
                   enrich: bool = True) -> CatalogSnapshot:
    """Merge both maps into one snapshot; custom names win over standard ones."""
    custom = custom if custom is not None else {}
    standard = standard if standard is not None else {}
    for label, value in (("custom", custom), ("standard", standard)):
        if not isinstance(value, Mapping):
            raise CatalogUnavailable(f"{label} catalog must be a mapping, got {type(value).__name__}")

    entries: Dict[str, EmojiEntry] = {}
    for name, value in standard.items():
        if name:
            entries[name] = _as_entry(name, value, EmojiKind.STANDARD)

    shadowed = 0
    for name, value in custom.items():
        if not name:
            continue
        if name in entries:
            shadowed += 1
        entries[name] = _as_entry(name, value, EmojiKind.CUSTOM)

    if enrich:
        entries = {name: enrich_entry(e) for name, e in entries.items()}
    if shadowed:
        Log.write(f"[CatalogStore] {shadowed} custom emoji shadow standard names")
    return CatalogSnapshot(entries)


class CatalogStore:
    """
    Public API:
      snapshot            current CatalogSnapshot
      replace(custom, standard) -> CatalogSnapshot
      await fetch()       -> CatalogSnapshot, not yet installed (raises CatalogUnavailable)
      commit(snapshot)    install a fetched snapshot
      await reload()      -> fetch() + commit()
      get(name), lookup(name), __len__
      japanese_emoji(), quick_reactions()
    """

    def __init__(self, source: Optional[CatalogSource] = None, enrich: bool = True):
        self.source = source
        self.enrich = enrich
        self._snapshot = CatalogSnapshot()
        self.reloads = 0

    @classmethod
    def from_maps(cls, custom: Mapping[str, CatalogValue],
                  standard: Mapping[str, CatalogValue],
                  enrich: bool = True) -> "CatalogStore":
        store = cls(enrich=enrich)
        store.replace(custom, standard)
        return store

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    def replace(self, custom: Mapping[str, CatalogValue],
                standard: Mapping[str, CatalogValue]) -> CatalogSnapshot:
        snap = build_snapshot(custom, standard, enrich=self.enrich)
        self._install(snap)
        return snap

    def _install(self, snap: CatalogSnapshot) -> None:
        self._snapshot = snap
        Log.write(
            f"[CatalogStore] loaded {snap.count(EmojiKind.CUSTOM)} custom, "
            f"{snap.count(EmojiKind.STANDARD)} standard"
        )

    async def fetch(self) -> CatalogSnapshot:
        """
        Read the source and build a snapshot, leaving the current one in place.
        Every failure surfaces as CatalogUnavailable chained to the cause.
        """
        if self.source is None:
            raise CatalogUnavailable("no catalog source configured")
        label = type(self.source).__name__
        try:
            payload = self.source.get_current_catalog()
            if inspect.isawaitable(payload):
                payload = await payload
            if not isinstance(payload, Mapping) or ("custom" not in payload and "standard" not in payload):
                raise CatalogUnavailable("catalog payload must have 'custom' and 'standard' maps", source=label)
            return build_snapshot(payload.get("custom"), payload.get("standard"), enrich=self.enrich)
        except CatalogUnavailable as e:
            Log.write(f"[CatalogStore] reload failed ({label}): {e}")
            if not e.source:
                e.source = label
            raise
        except Exception as e:
            Log.write(f"[CatalogStore] reload failed ({label}): {e}")
            raise CatalogUnavailable(str(e) or type(e).__name__, source=label) from e

    def commit(self, snap: CatalogSnapshot) -> CatalogSnapshot:
        self._install(snap)
        self.reloads += 1
        return snap

    async def reload(self) -> CatalogSnapshot:
        return self.commit(await self.fetch())

    # lookups -----------------------------------------------------------
    def get(self, name: str) -> Optional[EmojiEntry]:
        return self._snapshot.get(name)

    def __len__(self) -> int:
        return len(self._snapshot)

    def __contains__(self, name: object) -> bool:
        return name in self._snapshot

    def lookup(self, name: str) -> Optional[EmojiEntry]:
        """Resolve a shortcode name (colons optional), trying common misspellings."""
        clean = (name or "").strip().strip(":")
        if not clean:
            return None
        for candidate in [clean] + lookup_variants(clean):
            entry = self._snapshot.get(candidate)
            if entry is not None:
                return entry
        return self._partial_match(clean.lower())

    def _partial_match(self, low: str) -> Optional[EmojiEntry]:
        # custom names only; shortest name wins, then alphabetical
        if len(low) < MIN_PARTIAL_MATCH:
            return None
        hits = [
            e for e in self._snapshot
            if e.is_custom and len(e.id) >= MIN_PARTIAL_MATCH
            and (low in e.id.lower() or e.id.lower() in low)
        ]
        if not hits:
            return None
        best = min(hits, key=lambda e: (len(e.id), e.id))
        Log.write(f"[CatalogStore] partial match for {low!r}: {best.id!r}")
        return best

    # discovery ---------------------------------------------------------
    def japanese_emoji(self) -> List[EmojiEntry]:
        """Custom emoji whose names look like Japanese-style reactions, shortest name first."""
        found = [
            e for e in self._snapshot
            if e.is_custom and any(f in e.id.lower() for f in REACTION_FRAGMENTS)
        ]
        return sorted(found, key=lambda e: (len(e.id), e.id))

    def quick_reactions(self) -> Dict[str, str]:
        """
        Map each quick reaction to the custom emoji name this workspace uses
        for it: the first known spelling present, otherwise the shortest
        custom name containing the reaction. Reactions with no match are left out.
        """
        custom = sorted((e.id for e in self._snapshot if e.is_custom), key=lambda n: (len(n), n))
        out: Dict[str, str] = {}
        for base, spellings in QUICK_REACTIONS.items():
            hit = next((s for s in spellings if s in custom), None)
            if hit is None:
                hit = next((n for n in custom if base in n.lower()), None)
            if hit is not None:
                out[base] = hit
        Log.write(f"[CatalogStore] quick reactions: {len(out)}/{len(QUICK_REACTIONS)} found")
        return out


def lookup_variants(name: str) -> List[str]:
    """Alternate spellings tried by CatalogStore.lookup, most specific first."""
    out: List[str] = []
    if name in _SHORTCUTS:
        out.append(_SHORTCUTS[name])
    low = name.lower()
    if low != name:
        out.append(low)
    for suffix in POLITE_SUFFIXES:
        if low.endswith(suffix) and len(low) > len(suffix):
            out.append(low[: -len(suffix)])
    out.extend([low + "2", low + "1"])
    if low[-1:] in ("1", "2") and len(low) > 1:
        out.append(low[:-1])
    if "_" in low:
        out.append(low.replace("_", ""))
    if "-" in low:
        out.append(low.replace("-", ""))
    for suffix in _REGION_SUFFIXES:
        if low.endswith(suffix):
            out.append(low[: -len(suffix)])
        else:
            out.append(low + suffix)
    seen = {name}
    uniq = []
    for v in out:
        if v and v not in seen:
            seen.add(v)
            uniq.append(v)
    return uniq
