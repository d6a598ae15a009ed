import pytest
from sqlalchemy.exc import OperationalError

from leaderboard import db
from leaderboard.models import ScoreRecord
from leaderboard.services.errors import StoreUnavailable

MAX_SAFE = 9007199254740991


def _stored(game, player):
    return [r.score for r in ScoreRecord.query.filter_by(game_name=game, player_name=player).all()]


def test_first_submission_is_new_best(service):
    outcome = service.submit('pump-clicker', 'Bob', 500)
    assert outcome.accepted
    assert outcome.is_new_best
    assert outcome.stored_value == 500
    assert outcome.notices == []
    assert _stored('pump-clicker', 'Bob') == [500]


def test_lower_score_keeps_existing(service):
    service.submit('pump-clicker', 'Bob', 500)
    outcome = service.submit('pump-clicker', 'Bob', 300)
    assert outcome.accepted
    assert outcome.is_new_best is False
    assert outcome.message == 'Existing score is higher'
    assert _stored('pump-clicker', 'Bob') == [500]


def test_equal_score_is_not_new_best(service):
    service.submit('pump-clicker', 'Bob', 500)
    assert service.submit('pump-clicker', 'Bob', 500).is_new_best is False


def test_stored_value_is_running_maximum(service):
    submitted = [10, 50, 20, 75, 75, 3, 80, 1]
    for i, raw in enumerate(submitted):
        assert service.submit('flappy-cock', 'Amy', raw).accepted
        assert _stored('flappy-cock', 'Amy') == [max(submitted[:i + 1])]
    assert _stored('flappy-cock', 'Amy') == [80]


def test_timed_game_stores_inverted_seconds(service):
    outcome = service.submit('plankton-heist-level1', 'Amy', 42)
    assert outcome.stored_value == 9958
    assert outcome.display_score == '42s'
    result = service.query('plankton-heist-level1', 10)
    assert result.ok
    assert result.entries[0].display_score == '42s'
    assert result.entries[0].raw_stored_value == 9958


def test_timed_game_faster_run_replaces_slower(service):
    service.submit('plankton-heist-level1', 'Amy', 60)
    assert service.submit('plankton-heist-level1', 'Amy', 45).is_new_best
    assert service.submit('plankton-heist-level1', 'Amy', 50).is_new_best is False
    assert _stored('plankton-heist-level1', 'Amy') == [9955]


def test_oversized_score_is_clamped_and_reported(service):
    outcome = service.submit('pump-clicker', 'Bob', MAX_SAFE + 1000)
    assert outcome.accepted
    assert outcome.notices == ['ClampedScore']
    assert outcome.stored_value == MAX_SAFE
    assert _stored('pump-clicker', 'Bob') == [MAX_SAFE]


def test_player_name_is_trimmed(service):
    service.submit('pump-clicker', '  Bob  ', 10)
    assert _stored('pump-clicker', 'Bob') == [10]


@pytest.mark.parametrize('game, player, score', [
    ('pump-clicker', '', 10),
    ('pump-clicker', '   ', 10),
    ('pump-clicker', 'x' * 21, 10),
    ('pump-clicker', None, 10),
    ('pump-clicker', 'Bob', -1),
    ('pump-clicker', 'Bob', 'lots'),
    ('pump-clicker', 'Bob', None),
    ('pump-clicker', 'Bob', True),
    ('pump-clicker', 'Bob', float('nan')),
    ('unknown-game', 'Bob', 10),
])
def test_invalid_input_is_rejected_without_writes(service, game, player, score):
    outcome = service.submit(game, player, score)
    assert outcome.accepted is False
    assert outcome.error == 'InvalidInput'
    assert ScoreRecord.query.count() == 0


def test_store_failure_rejects_submission(service, monkeypatch):
    def boom(*args, **kwargs):
        raise OperationalError('INSERT', {}, Exception('connection refused'))

    monkeypatch.setattr(db.session, 'execute', boom)
    outcome = service.submit('pump-clicker', 'Bob', 10)
    assert outcome.accepted is False
    assert outcome.is_new_best is False
    assert outcome.error == 'StoreUnavailable'


def test_query_orders_by_score_then_arrival(service):
    service.submit('pump-clicker', 'First', 100)
    service.submit('pump-clicker', 'Top', 900)
    service.submit('pump-clicker', 'Second', 100)
    service.submit('pump-clicker', 'Low', 5)
    result = service.query('pump-clicker', 10)
    assert [(e.rank, e.player) for e in result.entries] == [
        (1, 'Top'), (2, 'First'), (3, 'Second'), (4, 'Low'),
    ]
    assert [e.player for e in service.query('pump-clicker', 2).entries] == ['Top', 'First']


def test_query_empty_game_is_ok(service):
    result = service.query('flappy-cock', 10)
    assert result.ok
    assert result.entries == []


def test_query_keeps_games_apart(service):
    service.submit('pump-clicker', 'Bob', 1)
    service.submit('flappy-cock', 'Amy', 2)
    assert [e.player for e in service.query('pump-clicker', 10).entries] == ['Bob']


@pytest.mark.parametrize('limit', [0, -3, 'ten', None])
def test_query_rejects_bad_limit(service, limit):
    result = service.query('pump-clicker', limit)
    assert result.ok is False
    assert result.error == 'InvalidInput'


def test_query_larger_than_board_returns_every_row(service):
    for i in range(120):
        service.submit('pump-clicker', f'P{i}', i)
    entries = service.query('pump-clicker', 150).entries
    assert len(entries) == 120
    assert [e.raw_stored_value for e in entries] == list(range(119, -1, -1))
    assert [e.rank for e in entries] == list(range(1, 121))


def test_query_all_covers_catalog(service):
    service.submit('pump-clicker', 'Bob', 1)
    boards = service.query_all(5)
    assert list(boards) == ['pump-clicker', 'flappy-cock', 'plankton-heist-level1']
    assert [e.player for e in boards['pump-clicker']] == ['Bob']
    assert boards['flappy-cock'] == []


def test_query_all_omits_failing_game(service, monkeypatch):
    real_top_n = service.store.top_n

    def flaky_top_n(game, n):
        if game == 'flappy-cock':
            raise StoreUnavailable('top_n failed')
        return real_top_n(game, n)

    monkeypatch.setattr(service.store, 'top_n', flaky_top_n)
    boards = service.query_all(5)
    assert set(boards) == {'pump-clicker', 'plankton-heist-level1'}


def test_delete_player_removes_rows(service):
    service.submit('pump-clicker', 'Bob', 10)
    service.submit('flappy-cock', 'Bob', 10)
    outcome = service.delete_player('pump-clicker', 'Bob')
    assert outcome.success
    assert outcome.deleted == 1
    assert _stored('pump-clicker', 'Bob') == []
    assert _stored('flappy-cock', 'Bob') == [10]


def test_delete_missing_player_is_idempotent(service):
    service.submit('pump-clicker', 'Amy', 10)
    outcome = service.delete_player('pump-clicker', 'Nobody')
    assert outcome.success
    assert outcome.deleted == 0
    assert ScoreRecord.query.count() == 1


def test_delete_store_failure_is_reported(service, monkeypatch):
    def boom(game, player):
        raise StoreUnavailable('delete failed')

    monkeypatch.setattr(service.store, 'delete_where', boom)
    outcome = service.delete_player('pump-clicker', 'Bob')
    assert outcome.success is False
    assert outcome.error == 'StoreUnavailable'


def test_resubmit_after_delete_starts_fresh(service):
    service.submit('pump-clicker', 'Bob', 500)
    service.delete_player('pump-clicker', 'Bob')
    assert service.submit('pump-clicker', 'Bob', 20).is_new_best
    assert _stored('pump-clicker', 'Bob') == [20]


def test_player_best_reports_rank(service):
    service.submit('pump-clicker', 'Top', 900)
    service.submit('pump-clicker', 'Bob', 500)
    result = service.player_best('pump-clicker', 'Bob')
    assert result.ok
    assert result.entries[0].rank == 2
    assert result.entries[0].raw_stored_value == 500
    assert service.player_best('pump-clicker', 'Nobody').entries == []


def test_player_best_takes_max_of_duplicate_rows(service, monkeypatch):
    rows = [
        ScoreRecord(game_name='pump-clicker', player_name='Bob', score=40),
        ScoreRecord(game_name='pump-clicker', player_name='Bob', score=70),
    ]
    monkeypatch.setattr(service.store, 'find', lambda game, player: rows)
    result = service.player_best('pump-clicker', 'Bob')
    assert result.entries[0].raw_stored_value == 70
