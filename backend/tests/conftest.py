import os
import random
import sys
import pytest

# Ensure the backend root (containing the `redlight` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from redlight import create_app, socketio
from redlight.services.game import DifficultyProfile, DurationRange, GameSession, ManualScheduler


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SCHEDULER = 'manual'
    RANDOM_SEED = 1234


# Fixed light durations keep engine timelines exact.
FIXED_PROFILE = DifficultyProfile(
    grace_period_ms=1000,
    green_duration=DurationRange(3000, 3000),
    red_duration=DurationRange(2000, 2000),
    progress_rate=1.2,
)

# Countdown finishes 3000ms after start_game().
PLAY_STARTS_AT = 3000


class RecordingBroadcaster:
    """Captures every message the session sends."""

    def __init__(self):
        self.sent = []

    def send(self, message, to):
        self.sent.append((message.event, message.payload(), to))

    def events(self, name, to=None):
        return [payload for event, payload, dest in self.sent
                if event == name and (to is None or dest == to)]

    def clear(self):
        self.sent = []


class Harness:
    def __init__(self, profile=FIXED_PROFILE, table=None):
        self.broadcaster = RecordingBroadcaster()
        self.clock = ManualScheduler()
        self.session = GameSession(
            self.broadcaster,
            self.clock,
            difficulty=table or [profile],
            rng=random.Random(0),
        )

    def join(self, *names):
        for name in names:
            self.session.join(name.lower(), name)
        return [name.lower() for name in names]

    def start_playing(self):
        """Start a round and run the countdown up to the first green light."""
        self.session.start_game()
        self.clock.advance(PLAY_STARTS_AT)

    def advance(self, ms):
        self.clock.advance(ms)

    def events(self, name, to=None):
        return self.broadcaster.events(name, to)


@pytest.fixture()
def harness():
    return Harness()


@pytest.fixture()
def make_harness():
    return Harness


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application
    # Stop any timers left armed by the test
    application.extensions['redlight'].reset_lobby()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def game_session(flask_app):
    return flask_app.extensions['redlight']


@pytest.fixture()
def sio_factory(flask_app):
    namespace = flask_app.config['SOCKETIO_NAMESPACE']
    clients = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace=namespace,
        )
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected(namespace):
                test_client.disconnect(namespace=namespace)
        except Exception:
            pass
