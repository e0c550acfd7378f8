"""Typed records built from PokeAPI responses."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

ARTWORK_URL_TEMPLATE = (
    "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/"
    "pokemon/other/official-artwork/{id}.png"
)


def parse_entry_id(url: str) -> int:
    """Return the numeric id at the end of a resource URL.

    ``https://pokeapi.co/api/v2/pokemon/25/`` and
    ``https://pokeapi.co/api/v2/pokemon/25`` both give ``25``.

    Raises:
        ValueError: If the URL has no trailing numeric path segment.
    """
    segments = [s for s in str(url).split('/') if s]
    if not segments:
        raise ValueError(f"Cannot derive an entry id from URL {url!r}")
    try:
        return int(segments[-1])
    except ValueError:
        raise ValueError(f"Cannot derive an entry id from URL {url!r}") from None


@dataclass(frozen=True)
class EntrySummary:
    """One item of the catalog listing."""

    name: str
    source_url: str

    def __post_init__(self) -> None:
        # Malformed URLs fail here rather than when the id is first read.
        parse_entry_id(self.source_url)

    @property
    def id(self) -> int:
        return parse_entry_id(self.source_url)

    @property
    def image_url(self) -> str:
        return ARTWORK_URL_TEMPLATE.format(id=self.id)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'EntrySummary':
        return cls(name=data['name'], source_url=data['url'])


@dataclass(frozen=True)
class EntryDetail:
    """The expanded record for a single entry."""

    id: int
    name: str
    height_decimetres: int
    weight_decagrams: int
    categories: Tuple[str, ...]
    artwork_url: str

    @property
    def height_metres(self) -> float:
        return self.height_decimetres / 10.0

    @property
    def weight_kilograms(self) -> float:
        return self.weight_decagrams / 10.0

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'EntryDetail':
        """Build a detail record from a ``/pokemon/{name}`` response body.

        Raises:
            KeyError: If a required field is missing.
        """
        artwork = data['sprites']['other']['official-artwork']['front_default']
        return cls(
            id=int(data['id']),
            name=data['name'],
            height_decimetres=int(data['height']),
            weight_decagrams=int(data['weight']),
            categories=tuple(t['type']['name'] for t in data['types']),
            artwork_url=artwork or '',
        )
