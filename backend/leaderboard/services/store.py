"""Relational persistence for score rows.

The store is a plain append/query/delete relation over ``score_record``.
Best-score rules live in the service; the one exception is
``upsert_if_greater``, the conditional write that lets a submission replace a
row in a single statement.

Every write stamps ``arrival`` with the next value of a per-table counter
(``MAX(arrival) + 1`` read inside the writing statement or transaction).
Ranking ties are broken on it, so wall-clock jumps never reorder a board.
"""

from __future__ import annotations

import time
from contextlib import contextmanager

from sqlalchemy import func, select, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from leaderboard.models import ScoreRecord
from leaderboard.services.errors import StoreConflict, StoreUnavailable

_UPSERT_DIALECTS = {
    'sqlite': sqlite_insert,
    'postgresql': pg_insert,
}


def _next_arrival():
    table = ScoreRecord.__table__
    return select(func.coalesce(func.max(table.c.arrival), 0) + 1).correlate(None)


class ScoreStore:
    def __init__(self, db, logger=None):
        self.db = db
        self.logger = logger

    @contextmanager
    def _guard(self, op: str, game: str | None = None):
        try:
            yield
        except SQLAlchemyError as exc:
            try:
                self.db.session.rollback()
            except SQLAlchemyError:
                pass
            if isinstance(exc, IntegrityError):
                if self.logger:
                    self.logger.warning(f"[store-conflict] op={op} game={game} error={exc.orig}")
                raise StoreConflict(f'{op} rejected: a row for this game and player already exists') from exc
            if self.logger:
                self.logger.error(f"[store-error] op={op} game={game} error={exc}")
            raise StoreUnavailable(f'{op} failed: {exc.__class__.__name__}') from exc

    def _stamp(self, record: ScoreRecord) -> ScoreRecord:
        if record.submitted_at is None:
            record.submitted_at = time.time()
        if record.arrival is None:
            record.arrival = self.db.session.execute(_next_arrival()).scalar_one()
        return record

    def supports_upsert(self) -> bool:
        return self.db.engine.dialect.name in _UPSERT_DIALECTS

    def find(self, game: str, player: str) -> list[ScoreRecord]:
        with self._guard('find', game):
            return ScoreRecord.query.filter_by(game_name=game, player_name=player).all()

    def insert(self, record: ScoreRecord) -> ScoreRecord:
        """Append ``record``.

        The table's (game, player) unique constraint backs ``ON CONFLICT``, so a
        second row for a key raises ``StoreConflict`` instead of being appended.
        """
        with self._guard('insert', record.game_name):
            self.db.session.add(self._stamp(record))
            self.db.session.commit()
        return record

    def delete_where(self, game: str, player: str) -> int:
        with self._guard('delete', game):
            removed = ScoreRecord.query.filter_by(game_name=game, player_name=player).delete()
            self.db.session.commit()
        return removed

    def top_n(self, game: str, n: int) -> list[ScoreRecord]:
        with self._guard('top_n', game):
            return (
                ScoreRecord.query.filter_by(game_name=game)
                .order_by(ScoreRecord.score.desc(), ScoreRecord.arrival.asc(), ScoreRecord.id.asc())
                .limit(int(n))
                .all()
            )

    def count_above(self, game: str, value: int) -> int:
        with self._guard('count_above', game):
            return ScoreRecord.query.filter(
                ScoreRecord.game_name == game, ScoreRecord.score > value
            ).count()

    def upsert_if_greater(self, game: str, player: str, value: int) -> bool:
        """Insert the row, or overwrite it only if ``value`` is strictly greater.

        Returns True when a row was written. Runs as one statement, so two
        concurrent submissions for the same key can never leave the lower one
        in place.
        """
        insert_fn = _UPSERT_DIALECTS[self.db.engine.dialect.name]
        table = ScoreRecord.__table__
        stmt = insert_fn(table).values(
            game_name=game,
            player_name=player,
            score=int(value),
            submitted_at=time.time(),
            arrival=_next_arrival().scalar_subquery(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.game_name, table.c.player_name],
            set_={
                'score': stmt.excluded.score,
                'submitted_at': stmt.excluded.submitted_at,
                'arrival': stmt.excluded.arrival,
            },
            where=table.c.score < stmt.excluded.score,
        )
        with self._guard('upsert', game):
            result = self.db.session.execute(stmt)
            self.db.session.commit()
        return result.rowcount > 0

    def replace_if_greater(self, game: str, player: str, value: int) -> bool:
        """Read-compare-replace for databases without ``ON CONFLICT``.

        Runs in one transaction, but the read and the write are separate
        statements: concurrent callers may both see the same best value.
        """
        with self._guard('replace', game):
            matches = ScoreRecord.query.filter_by(game_name=game, player_name=player).all()
            if matches and int(value) <= max(r.score for r in matches):
                self.db.session.rollback()
                return False
            if matches:
                ScoreRecord.query.filter_by(game_name=game, player_name=player).delete()
            self.db.session.add(self._stamp(ScoreRecord(
                game_name=game,
                player_name=player,
                score=int(value),
            )))
            self.db.session.commit()
        return True

    def ping(self) -> bool:
        with self._guard('ping'):
            self.db.session.execute(text('SELECT 1'))
        return True
