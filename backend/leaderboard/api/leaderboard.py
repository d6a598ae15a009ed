from flask import Blueprint, jsonify, request, current_app
from leaderboard import socketio
from leaderboard.services.errors import INVALID_INPUT, STORE_CONFLICT, STORE_UNAVAILABLE


leaderboard_api = Blueprint('leaderboard_api', __name__)

_ERROR_STATUS = {
    INVALID_INPUT: 400,
    STORE_CONFLICT: 409,
    STORE_UNAVAILABLE: 503,
}

def _service():
    return current_app.extensions['leaderboard']

def _error_response(kind, message):
    return jsonify({'error': kind, 'message': message}), _ERROR_STATUS.get(kind, 500)

def _limit_arg(default_key):
    raw = request.args.get('limit')
    if raw is None:
        return int(current_app.config.get(default_key, 10))
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        # Let the service reject it with its usual message
        return raw
    # Page size cap for HTTP callers; the service itself returns whatever was asked for
    return min(limit, int(current_app.config.get('LEADERBOARD_MAX_LIMIT', 100)))

def _notify(game):
    socketio.emit('leaderboard_update', {'game': game}, to=f"leaderboard:{game}", namespace='/ws')


@leaderboard_api.route('/games', methods=['GET'])
def list_games():
    catalog = _service().catalog
    return jsonify({
        'games': [{'game': g, 'polarity': p.value} for g, p in catalog.as_mapping().items()]
    })


@leaderboard_api.route('', methods=['GET'])
def get_all_leaderboards():
    limit = _limit_arg('LEADERBOARD_ALL_LIMIT')
    if not isinstance(limit, int) or limit < 1:
        return _error_response(INVALID_INPUT, 'Limit must be a positive integer')
    boards = _service().query_all(limit)
    return jsonify({
        'leaderboards': {game: [e.to_dict() for e in entries] for game, entries in boards.items()}
    })


@leaderboard_api.route('/<string:game>', methods=['GET'])
def get_leaderboard(game):
    outcome = _service().query(game, _limit_arg('LEADERBOARD_DEFAULT_LIMIT'))
    if not outcome.ok:
        return _error_response(outcome.error, outcome.message)
    return jsonify({'game': game, 'entries': [e.to_dict() for e in outcome.entries]})


@leaderboard_api.route('/<string:game>/scores', methods=['POST'])
def submit_score(game):
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return _error_response(INVALID_INPUT, 'Body must be a JSON object')
    outcome = _service().submit(game, data.get('player'), data.get('score'))
    if not outcome.accepted:
        body = outcome.to_dict()
        return jsonify(body), _ERROR_STATUS.get(outcome.error, 500)
    if outcome.is_new_best:
        _notify(game)
        return jsonify(outcome.to_dict()), 201
    return jsonify(outcome.to_dict()), 200


@leaderboard_api.route('/<string:game>/players/<path:player>', methods=['GET'])
def get_player_best(game, player):
    outcome = _service().player_best(game, player)
    if not outcome.ok:
        return _error_response(outcome.error, outcome.message)
    if not outcome.entries:
        return jsonify({'error': 'Player not found'}), 404
    return jsonify(outcome.entries[0].to_dict())


@leaderboard_api.route('/<string:game>/players/<path:player>', methods=['DELETE'])
def delete_player(game, player):
    outcome = _service().delete_player(game, player)
    if not outcome.success:
        body = {'success': False, 'error': outcome.error, 'message': outcome.message}
        return jsonify(body), _ERROR_STATUS.get(outcome.error, 500)
    if outcome.deleted:
        _notify(game)
    return jsonify({'success': True, 'deleted': outcome.deleted})
