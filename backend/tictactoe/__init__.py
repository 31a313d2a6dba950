from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


class GameServices:
    """Long-lived services shared by HTTP routes and socket handlers."""

    def __init__(self, registry, hub):
        self.registry = registry
        self.hub = hub


def get_services() -> GameServices:
    return current_app.extensions['tictactoe']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Rooms are reloaded from the store on every call; build the services once
    from tictactoe.services.storage import build_room_store
    from tictactoe.services.registry import RoomRegistry
    from tictactoe.services.broadcast import BroadcastHub
    store = build_room_store(flask_app.config)
    registry = RoomRegistry(store, logger=flask_app.logger)
    hub = BroadcastHub(registry.find, logger=flask_app.logger)
    flask_app.extensions['tictactoe'] = GameServices(registry, hub)

    # Import and register blueprints here
    from tictactoe.main import main
    flask_app.register_blueprint(main)

    from tictactoe.api.games import games
    # Mount game routes under /api to match the frontend API client
    flask_app.register_blueprint(games, url_prefix='/api')

    # Register Socket.IO event handlers
    from tictactoe.socketio_events import register_socketio_handlers
    register_socketio_handlers(
        namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/ws'),
        testing=flask_app.config.get('TESTING', False),
    )

    @click.command('rooms-reset')
    def rooms_reset_command():
        """Recreates the room table and empties the room store."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            store.save({})
            print('Room store has been reset!')

    flask_app.cli.add_command(rooms_reset_command)

    return flask_app
