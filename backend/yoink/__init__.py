from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from yoink.config import Config

socketio = SocketIO(async_mode=None)


def get_registry():
    """The RoomRegistry bound to the running app."""
    return current_app.extensions['yoink_rooms']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # A missing word list is fatal: let DictionaryLoadError abort startup
    from yoink.services.games import (
        RateLimiter, RoomRegistry, RoundScheduler, SubmissionArbiter, load_words,
    )
    from yoink.models import Settings
    from yoink.socketio_events import SocketIOBroadcaster, register_socketio_handlers

    dictionary = load_words(flask_app.config.get('DICTIONARY_SOURCES'))
    flask_app.logger.info(f"[dictionary] {len(dictionary)} words available")

    run_driver = not flask_app.config.get('TESTING') or flask_app.config.get('ENABLE_SCHEDULER_IN_TESTS')
    scheduler = RoundScheduler(
        SubmissionArbiter(dictionary),
        SocketIOBroadcaster(socketio),
        start_task=socketio.start_background_task if run_driver else None,
        sleep=socketio.sleep,
        heartbeat_sec=int(flask_app.config.get('TIMER_HEARTBEAT_SEC', 0)),
    )
    registry = RoomRegistry(
        scheduler,
        RateLimiter(
            capacity=int(flask_app.config.get('RATE_LIMIT_CAPACITY', 10)),
            refill_per_sec=float(flask_app.config.get('RATE_LIMIT_PER_SEC', 5)),
        ),
        default_settings=Settings.from_config(flask_app.config),
        idle_grace_sec=int(flask_app.config.get('ROOM_IDLE_GRACE_SEC', 0)),
    )
    flask_app.extensions['yoink_rooms'] = registry
    flask_app.extensions['yoink_dictionary'] = dictionary
    if run_driver and registry.idle_grace_sec > 0:
        socketio.start_background_task(registry.run_sweeper, socketio.sleep)

    # Import and register blueprints here
    from yoink.main import main
    flask_app.register_blueprint(main)

    from yoink.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('check-dictionary')
    def check_dictionary_command():
        """Loads the configured word lists and reports their size."""
        words = load_words(flask_app.config.get('DICTIONARY_SOURCES'))
        click.echo(f'Dictionary loaded: {len(words)} words.')

    flask_app.cli.add_command(check_dictionary_command)

    return flask_app
