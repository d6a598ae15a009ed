from flask import Blueprint, jsonify, current_app

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the leaderboard server!'})

@main.route('/health')
def health():
    from leaderboard.services.errors import StoreUnavailable
    svc = current_app.extensions['leaderboard']
    try:
        svc.store.ping()
    except StoreUnavailable as exc:
        return jsonify({'ok': False, 'error': exc.kind}), 503
    return jsonify({'ok': True, 'games': len(svc.catalog)})
