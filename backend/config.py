import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///leaderboard.sqlite3'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Comma-separated list of browser origins allowed to call the API
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173').split(',') if o.strip()]
    # Largest integer a JavaScript client can hold without precision loss (2**53 - 1)
    MAX_SAFE_SCORE = int(os.environ.get('MAX_SAFE_SCORE', '9007199254740991'))
    # Timed games store INVERT_BASE - seconds so that higher is always better
    INVERT_BASE = int(os.environ.get('INVERT_BASE', '10000'))
    PLAYER_NAME_MAX_LENGTH = int(os.environ.get('PLAYER_NAME_MAX_LENGTH', '20'))
    LEADERBOARD_DEFAULT_LIMIT = int(os.environ.get('LEADERBOARD_DEFAULT_LIMIT', '10'))
    LEADERBOARD_ALL_LIMIT = int(os.environ.get('LEADERBOARD_ALL_LIMIT', '5'))
    LEADERBOARD_MAX_LIMIT = int(os.environ.get('LEADERBOARD_MAX_LIMIT', '100'))
    # Single conditional upsert per submission. Off falls back to read-compare-replace.
    LEADERBOARD_ATOMIC_UPSERT = os.environ.get('LEADERBOARD_ATOMIC_UPSERT', '1').lower() in ('1', 'true', 'yes', 'on')
    # game token -> polarity ('higher' or 'lower')
    GAME_CATALOG = {
        'pump-clicker': 'higher',
        'flappy-cock': 'higher',
        'plankton-heist': 'higher',
        'boating-school': 'higher',
        'bikini-adventure': 'higher',
        'jellyfish-fields': 'higher',
        'patrick-friendship': 'higher',
        'house-hoarder': 'higher',
        'krusty-krab-rush': 'higher',
        'krusty-tycoon': 'higher',
        'plankton-heist-level1': 'lower',
        'plankton-heist-level2': 'lower',
        'plankton-heist-level3': 'lower',
    }
