import os
import sys
import pytest

# Ensure the backend root (containing the `yoink` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from yoink import create_app, socketio
from yoink.models import Settings
from yoink.services.games import (
    RateLimiter, RoomRegistry, RoundScheduler, SubmissionArbiter, WordDictionary,
)


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    DICTIONARY_SOURCES = ''


class RecordingBroadcaster:
    """Collects outbound broadcasts instead of emitting them."""

    def __init__(self):
        self.events = []

    def state(self, room):
        self.events.append(('state', room.id, room.to_dict(now=0)))

    def accepted(self, room, acceptance):
        self.events.append(('accepted', room.id, acceptance.to_dict()))

    def ended(self, room, leaderboard):
        self.events.append(('ended', room.id, leaderboard))

    def named(self, name):
        return [payload for event, _, payload in self.events if event == name]


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


WORDS = ['TEAM', 'MEAT', 'TAME', 'MATE', 'TEA', 'EAT', 'ATE', 'STONE', 'NOTES', 'QUIZ', 'JAZZ', 'AT']


@pytest.fixture()
def dictionary():
    return WordDictionary(WORDS)


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def clock():
    return FakeClock(1000.0)


@pytest.fixture()
def settings():
    # No automatic reveals, so tests control the pool exactly
    return Settings(opening_tiles=0, drip_per_sec=0, surge_amount=0)


@pytest.fixture()
def arbiter(dictionary):
    return SubmissionArbiter(dictionary)


@pytest.fixture()
def scheduler(arbiter, broadcaster, clock):
    return RoundScheduler(arbiter, broadcaster, start_task=None, clock=clock)


@pytest.fixture()
def registry(scheduler, settings, clock):
    limiter = RateLimiter(capacity=10, refill_per_sec=5, clock=clock)
    return RoomRegistry(scheduler, limiter, default_settings=settings, idle_grace_sec=30, clock=clock)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
