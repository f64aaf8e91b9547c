import os
import sys
import pytest

# Ensure the backend root (containing the `buzzer` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from buzzer import create_app, socketio
from buzzer.services.session import BuzzerArbiter, PlayerDirectory, RoomReaper, RoomRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    CORS_ORIGINS = ['*']
    SOCKETIO_NAMESPACE = '/'
    ROOM_CODE_LENGTH = 6
    MAX_TEAM_COUNT = 0
    ROOM_TTL_SEC = 7200
    REAPER_INTERVAL_SEC = 3600
    PORT = 3001


class RecordingBroadcaster:
    """Stands in for SessionBroadcaster in unit tests; keeps what would be sent."""

    def __init__(self):
        self.sent = []

    def subscribe(self, connection_id, code):
        self.sent.append(('subscribe', code, connection_id))

    def unsubscribe(self, connection_id, code):
        self.sent.append(('unsubscribe', code, connection_id))

    def send_player(self, connection_id, player):
        self.sent.append(('player-joined', connection_id, player.to_dict()))

    def broadcast_state(self, room):
        self.sent.append(('room-state', room.code, room.to_dict()))

    def broadcast_event(self, room, event):
        self.sent.append(('buzzer-pressed', room.code, event.to_dict()))

    def notify_deleted(self, code):
        self.sent.append(('room-deleted', code, None))

    def names(self):
        return [entry[0] for entry in self.sent]


@pytest.fixture()
def registry():
    return RoomRegistry()


@pytest.fixture()
def directory(registry):
    return PlayerDirectory(registry)


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def arbiter(registry, broadcaster):
    return BuzzerArbiter(registry, broadcaster)


@pytest.fixture()
def reaper(registry):
    return RoomReaper(registry, ttl_sec=7200, interval_sec=3600)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def _connect(flask_app):
    return socketio.test_client(flask_app, flask_test_client=flask_app.test_client())


@pytest.fixture()
def sio_client(flask_app):
    test_client = _connect(flask_app)
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def make_sio_client(flask_app):
    """Factory for extra connections; all are disconnected on teardown."""
    made = []

    def _make():
        c = _connect(flask_app)
        made.append(c)
        return c

    yield _make
    for c in made:
        if c.is_connected():
            c.disconnect()
