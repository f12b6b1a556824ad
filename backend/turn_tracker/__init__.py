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
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from turn_tracker.errors import register_error_handlers
    register_error_handlers(flask_app)

    from turn_tracker.main import main
    flask_app.register_blueprint(main)

    from turn_tracker.api.games import games
    from turn_tracker.api.players import players
    from turn_tracker.api.turns import turns
    from turn_tracker.api.rounds import rounds
    flask_app.register_blueprint(games, url_prefix='/api/games')
    flask_app.register_blueprint(players, url_prefix='/api/players')
    flask_app.register_blueprint(turns, url_prefix='/api/turns')
    flask_app.register_blueprint(rounds, url_prefix='/api/rounds')

    from turn_tracker.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('seed-demo')
    def seed_demo_command():
        """Drops, recreates, and seeds the database with a demo game."""
        from turn_tracker.models import Game, Player
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            game = Game()
            db.session.add(game)
            db.session.flush()
            seats = [('Alice', 'red'), ('Bob', 'blue'), ('Cara', 'green')]
            for order, (name, color) in enumerate(seats, start=1):
                db.session.add(Player(game_id=game.id, name=name, color=color, turn_order=order))

            db.session.commit()
            print(f'Database has been reset and seeded! Demo game id: {game.id}')

    flask_app.cli.add_command(seed_demo_command)

    return flask_app
