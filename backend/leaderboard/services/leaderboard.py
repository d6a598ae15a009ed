"""Submission and retrieval rules for the best-score leaderboard.

Every public method returns an outcome object. Store failures and bad input
are reported through ``error`` and never raised to the caller.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field

from leaderboard.catalog import GameCatalog
from leaderboard.services.codec import ScoreCodec
from leaderboard.services.errors import CLAMPED_SCORE, InvalidInput, LeaderboardError
from leaderboard.services.store import ScoreStore


@dataclass
class RankedEntry:
    rank: int
    player: str
    display_score: str
    raw_stored_value: int

    def to_dict(self):
        return asdict(self)


@dataclass
class SubmitOutcome:
    accepted: bool
    is_new_best: bool = False
    stored_value: int | None = None
    display_score: str | None = None
    notices: list[str] = field(default_factory=list)
    error: str | None = None
    message: str | None = None

    def to_dict(self):
        return asdict(self)


@dataclass
class QueryOutcome:
    ok: bool
    entries: list[RankedEntry] = field(default_factory=list)
    error: str | None = None
    message: str | None = None


@dataclass
class DeleteOutcome:
    success: bool
    deleted: int = 0
    error: str | None = None
    message: str | None = None


class LeaderboardService:
    def __init__(self, store: ScoreStore, codec: ScoreCodec, catalog: GameCatalog,
                 logger=None, atomic_upsert: bool = True,
                 player_name_max_length: int = 20):
        self.store = store
        self.codec = codec
        self.catalog = catalog
        self.logger = logger or logging.getLogger(__name__)
        self.atomic_upsert = atomic_upsert
        self.player_name_max_length = int(player_name_max_length)

    # ---- validation ----

    def _validate_game(self, game) -> str:
        self.catalog.polarity(game)
        return game

    def _validate_player(self, player) -> str:
        if not isinstance(player, str):
            raise InvalidInput('Player name is required')
        name = player.strip()
        if not name:
            raise InvalidInput('Player name is required')
        if len(name) > self.player_name_max_length:
            raise InvalidInput(f'Player name must be at most {self.player_name_max_length} characters')
        return name

    def _validate_score(self, raw):
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise InvalidInput('Score must be a number')
        if isinstance(raw, float) and math.isnan(raw):
            raise InvalidInput('Score must be a number')
        if raw < 0:
            raise InvalidInput('Score must not be negative')
        return raw

    def _validate_limit(self, limit) -> int:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise InvalidInput('Limit must be a positive integer')
        return limit

    # ---- operations ----

    def submit(self, game, player, raw_score) -> SubmitOutcome:
        try:
            game = self._validate_game(game)
            player = self._validate_player(player)
            encoded = self.codec.encode_for_storage(game, self._validate_score(raw_score))
            if self.atomic_upsert and self.store.supports_upsert():
                is_new_best = self.store.upsert_if_greater(game, player, encoded.value)
            else:
                is_new_best = self.store.replace_if_greater(game, player, encoded.value)
        except LeaderboardError as exc:
            self.logger.warning(f"[submit-rejected] game={game} player={player} error={exc.kind}: {exc.message}")
            return SubmitOutcome(accepted=False, error=exc.kind, message=exc.message)

        notices = [CLAMPED_SCORE] if encoded.clamped else []
        self.logger.info(
            f"[submit] game={game} player={player} stored={encoded.value} new_best={is_new_best}"
        )
        return SubmitOutcome(
            accepted=True,
            is_new_best=is_new_best,
            stored_value=encoded.value,
            display_score=self.codec.decode_for_display(game, encoded.value),
            notices=notices,
            message='Score submitted successfully' if is_new_best else 'Existing score is higher',
        )

    def query(self, game, limit) -> QueryOutcome:
        try:
            game = self._validate_game(game)
            rows = self.store.top_n(game, self._validate_limit(limit))
        except LeaderboardError as exc:
            self.logger.warning(f"[query-failed] game={game} error={exc.kind}: {exc.message}")
            return QueryOutcome(ok=False, error=exc.kind, message=exc.message)
        entries = [
            RankedEntry(
                rank=idx,
                player=row.player_name,
                display_score=self.codec.decode_for_display(game, row.score),
                raw_stored_value=row.score,
            )
            for idx, row in enumerate(rows, start=1)
        ]
        return QueryOutcome(ok=True, entries=entries)

    def query_all(self, limit) -> dict[str, list[RankedEntry]]:
        """Top ``limit`` entries for every catalog game; failed games are left out."""
        boards = {}
        for game in self.catalog.games():
            outcome = self.query(game, limit)
            if not outcome.ok:
                self.logger.warning(f"[query-all-skip] game={game} error={outcome.error}")
                continue
            boards[game] = outcome.entries
        return boards

    def player_best(self, game, player) -> QueryOutcome:
        """The player's best row with its current rank, or an empty outcome."""
        try:
            game = self._validate_game(game)
            player = self._validate_player(player)
            matches = self.store.find(game, player)
            if not matches:
                return QueryOutcome(ok=True)
            # Several rows can only come from data written outside the service
            best = max(row.score for row in matches)
            rank = self.store.count_above(game, best) + 1
        except LeaderboardError as exc:
            return QueryOutcome(ok=False, error=exc.kind, message=exc.message)
        entry = RankedEntry(
            rank=rank,
            player=player,
            display_score=self.codec.decode_for_display(game, best),
            raw_stored_value=best,
        )
        return QueryOutcome(ok=True, entries=[entry])

    def delete_player(self, game, player) -> DeleteOutcome:
        try:
            game = self._validate_game(game)
            player = self._validate_player(player)
            removed = self.store.delete_where(game, player)
        except LeaderboardError as exc:
            self.logger.error(f"[delete-failed] game={game} player={player} error={exc.kind}: {exc.message}")
            return DeleteOutcome(success=False, error=exc.kind, message=exc.message)
        self.logger.info(f"[delete] game={game} player={player} removed={removed}")
        return DeleteOutcome(success=True, deleted=removed)
