"""Static game catalog: which games exist and which way their scores point."""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Iterator, Mapping

from leaderboard.services.errors import InvalidInput


class Polarity(str, enum.Enum):
    HIGHER = 'higher'  # bigger raw score is better (default)
    LOWER = 'lower'    # smaller raw value is better, e.g. elapsed seconds


class GameCatalog:
    """Immutable mapping of game token -> Polarity, built once at startup."""

    def __init__(self, games: Mapping[str, Polarity]):
        self._games = MappingProxyType(dict(games))

    @classmethod
    def from_config(cls, raw: Mapping[str, str]) -> 'GameCatalog':
        games = {}
        for token, polarity in raw.items():
            token = str(token).strip()
            if not token:
                raise ValueError('game token must not be empty')
            try:
                games[token] = Polarity(str(polarity or Polarity.HIGHER.value).strip().lower())
            except ValueError:
                raise ValueError(f"unknown polarity {polarity!r} for game {token!r}") from None
        return cls(games)

    def polarity(self, game: str) -> Polarity:
        try:
            return self._games[game]
        except (KeyError, TypeError):
            raise InvalidInput(f'Unknown game: {game}') from None

    def games(self) -> list[str]:
        return list(self._games)

    def as_mapping(self) -> Mapping[str, Polarity]:
        return self._games

    def __contains__(self, game) -> bool:
        return game in self._games

    def __iter__(self) -> Iterator[str]:
        return iter(self._games)

    def __len__(self) -> int:
        return len(self._games)
