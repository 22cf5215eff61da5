# emoji_search/core/shortcodes.py
"""Split message text into plain-text and `:shortcode:` emoji segments."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from .catalog_store import CatalogStore
from .models import EmojiEntry

SHORTCODE_RE = re.compile(r":([a-zA-Z0-9_+\-]+):")


@dataclass(frozen=True)
class Segment:
    type: str  # "text" | "emoji"
    content: str
    emoji: Optional[EmojiEntry] = None


def parse_shortcodes(text: str, store: CatalogStore) -> List[Segment]:
    """
    Unknown shortcodes stay in the text untouched. Adjacent text pieces are
    merged so the output alternates text/emoji where possible.
    """
    if not text:
        return []
    out: List[Segment] = []
    pos = 0

    def _text(chunk: str) -> None:
        if not chunk:
            return
        if out and out[-1].type == "text":
            out[-1] = Segment("text", out[-1].content + chunk)
        else:
            out.append(Segment("text", chunk))

    for m in SHORTCODE_RE.finditer(text):
        entry = store.lookup(m.group(1))
        _text(text[pos:m.start()])
        if entry is None:
            _text(m.group(0))
        else:
            out.append(Segment("emoji", m.group(1), entry))
        pos = m.end()
    _text(text[pos:])
    return out
