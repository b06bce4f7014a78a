import os
import random
import sys
import pytest

# Ensure the backend root (containing the `tenpercent` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from tenpercent import create_app, socketio
from tenpercent.services.rooms import RoomController


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    STATIC_FOLDER = None
    SOCKETIO_NAMESPACE = '/'
    ALLOWED_TIMERS = (0.1, 1, 10, 60)
    DEFAULT_ROUND_TIMER_SEC = 1
    MIN_PLAYERS = 2
    TICK_INTERVAL_MS = 100
    TICK_EMIT_INTERVAL_MS = 100


class RecordingNotifier:
    """Collects outbound messages instead of sending them."""

    def __init__(self):
        self.messages = []

    def broadcast(self, room_id, event, payload):
        self.messages.append(('room', room_id, event, payload))

    def send(self, player_id, event, payload):
        self.messages.append(('player', player_id, event, payload))

    def events(self, event, target=None):
        return [m[3] for m in self.messages if m[2] == event and (target is None or m[1] == target)]

    def clear(self):
        self.messages.clear()


class FixedLoser(random.Random):
    """Random source whose loser pick is decided by the test."""

    def __init__(self, loser=None):
        super().__init__(0)
        self.loser = loser

    def choice(self, seq):
        if self.loser is not None and self.loser in seq:
            return self.loser
        return super().choice(seq)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def rng():
    return FixedLoser()


@pytest.fixture()
def controller(notifier, rng):
    return RoomController(notifier, rng=rng, default_timer=1)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        c = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(c)
        return c

    yield _make
    for c in clients:
        if c.is_connected():
            c.disconnect()


@pytest.fixture()
def finish_round():
    """Advance a room's countdown in 100ms steps until one round resolves."""

    def _finish(ctrl, room_id, max_steps=10000):
        room = ctrl.registry.get(room_id)
        start = room.round_counter
        for _ in range(max_steps):
            ctrl.advance(room_id, 0.1)
            if room.round_counter != start:
                return room
        raise AssertionError(f"room {room_id} did not resolve a round in {max_steps} steps")

    return _finish
