from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Build the catalog and service once; routes and CLI read them from app.extensions
    from leaderboard.catalog import GameCatalog
    from leaderboard.services.codec import ScoreCodec
    from leaderboard.services.store import ScoreStore
    from leaderboard.services.leaderboard import LeaderboardService

    catalog = GameCatalog.from_config(flask_app.config.get('GAME_CATALOG') or {})
    codec = ScoreCodec(
        catalog,
        max_safe_score=flask_app.config.get('MAX_SAFE_SCORE'),
        invert_base=flask_app.config.get('INVERT_BASE'),
        logger=flask_app.logger,
    )
    store = ScoreStore(db, logger=flask_app.logger)
    flask_app.extensions['leaderboard'] = LeaderboardService(
        store,
        codec,
        catalog,
        logger=flask_app.logger,
        atomic_upsert=flask_app.config.get('LEADERBOARD_ATOMIC_UPSERT', True),
        player_name_max_length=flask_app.config.get('PLAYER_NAME_MAX_LENGTH', 20),
    )

    # Import and register blueprints here
    from leaderboard.main import main
    flask_app.register_blueprint(main)

    from leaderboard.api.leaderboard import leaderboard_api
    flask_app.register_blueprint(leaderboard_api, url_prefix='/api/leaderboard')

    # Register Socket.IO event handlers
    from leaderboard.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the leaderboard tables."""
        import leaderboard.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            click.echo('Database has been reset!')

    @click.command('leaderboard-delete')
    @click.argument('game')
    @click.argument('player')
    def leaderboard_delete_command(game, player):
        """Removes every score for PLAYER on GAME."""
        with flask_app.app_context():
            outcome = flask_app.extensions['leaderboard'].delete_player(game, player)
        if not outcome.success:
            raise click.ClickException(f'Error deleting {player}: {outcome.error}')
        click.echo(f'Deleted {outcome.deleted} row(s) for {player} from {game}')

    @click.command('leaderboard-top')
    @click.argument('game')
    @click.option('--limit', default=10, show_default=True, type=int)
    def leaderboard_top_command(game, limit):
        """Prints the ranked top scores for GAME."""
        with flask_app.app_context():
            outcome = flask_app.extensions['leaderboard'].query(game, limit)
        if not outcome.ok:
            raise click.ClickException(f'Error fetching leaderboard: {outcome.error}')
        if not outcome.entries:
            click.echo('No scores yet.')
        for entry in outcome.entries:
            click.echo(f'{entry.rank}. {entry.player} {entry.display_score}')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(leaderboard_delete_command)
    flask_app.cli.add_command(leaderboard_top_command)

    return flask_app
