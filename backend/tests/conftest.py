import os
import sys

import pytest

# Ensure the backend root (containing the `stopgame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from stopgame.game.models import VotingBoard, VotingEntry
from stopgame.game.store import RoomStore
from stopgame.server import create_app


class TestConfig:
    TESTING = True
    SECRET_KEY = "test-secret"
    CORS_ORIGINS = "*"
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = "threading"
    MAX_PLAYERS = 8
    ROUND_DURATION_SEC = 60
    LETTERS = "ABCDEFGHIJLMNOPQRSTUVZ"


class FakeTimer:
    """Stand-in for RoundTimer that records start/cancel calls."""

    def __init__(self):
        self.started = False
        self.cancel_calls = 0

    def start(self):
        self.started = True

    def cancel(self):
        self.cancel_calls += 1
        return self.cancel_calls == 1


class StaticValidator:
    """Answer validator that sends every non-blank answer to voting."""

    def __init__(self):
        self.calls = []

    def prepare_voting_data(self, players, letter, categories):
        self.calls.append((list(players), letter, list(categories)))
        board = VotingBoard()
        for category in categories:
            for player in players:
                word = player.answers.get(category.id, "")
                if word:
                    board.add(category.id, player.id, VotingEntry(word=word))
        return board


@pytest.fixture()
def store():
    return RoomStore()


@pytest.fixture()
def fake_timer():
    return FakeTimer()


@pytest.fixture()
def static_validator():
    return StaticValidator()


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app, socketio):
    clients = []

    def _make():
        c = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(c)
        return c

    yield _make

    for c in clients:
        try:
            if c.is_connected():
                c.disconnect()
        except Exception:
            pass


@pytest.fixture()
def app_factory():
    def _factory(store=None):
        return create_app(TestConfig, store=store)

    return _factory
