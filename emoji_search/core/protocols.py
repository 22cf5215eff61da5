# emoji_search/core/protocols.py
"""
Contracts for the collaborators the engine talks to.

The engine never imports a concrete catalog fetcher or persistence backend;
it depends on these Protocols so callers can pass anything with the right
methods (an API client adapter, a JSON file, a test stub).
"""

from __future__ import annotations

from typing import Awaitable, Dict, Mapping, Protocol, Union, runtime_checkable
from typing_extensions import TypedDict

from .models import EmojiEntry


# Payload shapes ---------------------------------------------------------------

CatalogValue = Union[EmojiEntry, str]


class CatalogPayload(TypedDict):
    """
    What a catalog source returns:
      {"custom": {name: EmojiEntry | url}, "standard": {name: EmojiEntry | code points}}
    Bare strings are wrapped into entries with no keywords/aliases.
    """
    custom: Mapping[str, CatalogValue]
    standard: Mapping[str, CatalogValue]


class FrequencyRecordDict(TypedDict):
    count: int
    last_used: float


FrequencyMap = Dict[str, FrequencyRecordDict]


# Protocols ------------------------------------------------------------------

@runtime_checkable
class CatalogSource(Protocol):
    """Produces the latest catalog; may be synchronous or return an awaitable."""

    def get_current_catalog(self) -> Union[CatalogPayload, Awaitable[CatalogPayload]]:
        ...


@runtime_checkable
class FrequencyPersistence(Protocol):
    """Loads and stores usage counts across sessions."""

    def load_frequency(self) -> FrequencyMap:
        ...

    def save_frequency(self, records: FrequencyMap) -> None:
        ...
