"""Conversions between submitted scores, stored integers and display strings."""

from __future__ import annotations

import math
from typing import NamedTuple

from leaderboard.catalog import GameCatalog, Polarity
from leaderboard.services.errors import InvalidInput

DEFAULT_MAX_SAFE_SCORE = 9007199254740991
DEFAULT_INVERT_BASE = 10000

# Largest threshold first
_MAGNITUDES = (
    (10 ** 18, 'Qi'),
    (10 ** 15, 'Q'),
    (10 ** 12, 'T'),
    (10 ** 9, 'B'),
    (10 ** 6, 'M'),
    (10 ** 3, 'K'),
)


class Sanitized(NamedTuple):
    value: int
    clamped: bool


def format_large_score(n: int) -> str:
    """Render a score with a K/M/B/T/Q/Qi suffix, or grouped digits below 1000."""
    for threshold, suffix in _MAGNITUDES:
        # Promote values the next tier down would print as "1000.00"
        if n >= threshold or (threshold > 1000 and round(n / (threshold // 1000), 2) >= 1000):
            return f'{n / threshold:.2f}{suffix}'
    return f'{int(n):,}'


class ScoreCodec:
    def __init__(self, catalog: GameCatalog, max_safe_score: int | None = None,
                 invert_base: int | None = None, logger=None):
        self.catalog = catalog
        self.max_safe_score = int(max_safe_score if max_safe_score is not None else DEFAULT_MAX_SAFE_SCORE)
        self.invert_base = int(invert_base if invert_base is not None else DEFAULT_INVERT_BASE)
        self.logger = logger

    def sanitize(self, raw, ceiling: int | None = None) -> Sanitized:
        """Clamp ``raw`` into ``[0, ceiling]`` and truncate it to an int.

        ``ceiling`` defaults to ``max_safe_score``. Clamping is reported through
        the returned flag and a warning log line; it never fails the call.
        """
        if ceiling is None:
            ceiling = self.max_safe_score
        if isinstance(raw, bool) or not isinstance(raw, (int, float)) or (isinstance(raw, float) and math.isnan(raw)):
            raise InvalidInput(f'Score must be a number, got {raw!r}')
        if raw > ceiling:
            if self.logger:
                self.logger.warning(f"[clamp] score={raw} exceeds ceiling={ceiling}, capping")
            return Sanitized(ceiling, True)
        if raw < 0:
            if self.logger:
                self.logger.warning(f"[clamp] score={raw} below zero, raising to 0")
            return Sanitized(0, True)
        return Sanitized(math.trunc(raw), False)

    def encode_for_storage(self, game: str, raw) -> Sanitized:
        if self.catalog.polarity(game) is Polarity.LOWER:
            # The duration is capped at invert_base, so the stored value lands in [0, invert_base]
            duration = self.sanitize(raw, ceiling=self.invert_base)
            stored = self.sanitize(self.invert_base - duration.value)
            return Sanitized(stored.value, duration.clamped or stored.clamped)
        return self.sanitize(raw)

    def decode_for_display(self, game: str, stored: int) -> str:
        if self.catalog.polarity(game) is Polarity.LOWER:
            return f'{self.invert_base - int(stored)}s'
        return format_large_score(int(stored))
