import random

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _cors_origins(value):
    if value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def build_session(flask_app):
    """Create the one game session this app serves."""
    from redlight.services.game import (
        DIFFICULTY, GameSession, ManualScheduler, SocketIOBroadcaster, SocketIOScheduler,
    )
    cfg = flask_app.config
    if cfg.get('SCHEDULER') == 'manual':
        scheduler = ManualScheduler()
    else:
        scheduler = SocketIOScheduler(socketio)
    seed = cfg.get('RANDOM_SEED')
    return GameSession(
        broadcaster=SocketIOBroadcaster(socketio, cfg['SOCKETIO_NAMESPACE']),
        scheduler=scheduler,
        difficulty=cfg.get('DIFFICULTY') or DIFFICULTY,
        progress_to_win=cfg['PROGRESS_TO_WIN'],
        tick_ms=cfg['PROGRESS_TICK_MS'],
        countdown_from=cfg['COUNTDOWN_FROM'],
        countdown_interval_ms=cfg['COUNTDOWN_INTERVAL_MS'],
        name_max_length=cfg['NAME_MAX_LENGTH'],
        display_room=cfg['DISPLAY_ROOM'],
        rng=random.Random(seed) if seed is not None else None,
        logger=flask_app.logger,
    )


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _cors_origins(flask_app.config['CORS_ORIGINS'])
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        ping_interval=flask_app.config['SOCKETIO_PING_INTERVAL'],
        ping_timeout=flask_app.config['SOCKETIO_PING_TIMEOUT'],
    )

    flask_app.extensions['redlight'] = build_session(flask_app)

    from redlight.routes import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers
    from redlight.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config['SOCKETIO_NAMESPACE'])

    @click.command('difficulty')
    def difficulty_command():
        """Prints the per-round difficulty table."""
        from redlight.services.game import DIFFICULTY, round_label
        for idx, profile in enumerate(DIFFICULTY, start=1):
            click.echo(
                f"round {idx} {round_label(idx):<15} grace={profile.grace_period_ms}ms "
                f"green={profile.green_duration.min}-{profile.green_duration.max}ms "
                f"red={profile.red_duration.min}-{profile.red_duration.max}ms "
                f"rate={profile.progress_rate}"
            )

    flask_app.cli.add_command(difficulty_command)

    return flask_app
