import os
import random
import sys
import pytest

# Ensure the backend root (containing the `speedwurdz` package and `config`) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from speedwurdz import create_app, socketio
from speedwurdz.dictionary import Dictionary
from speedwurdz.schemas import Placement
from speedwurdz.services.games.session import GameSession

NAMESPACE = '/ws'

WORDS = ['cat', 'car', 'cart', 'at', 'tea', 'eat', 'house', 'houses', 'art', 'tar', 'rat', 'act']


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    COUNTDOWN_TICK_SEC = 0
    MAX_USERS = 5


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace=NAMESPACE,
        )
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected(NAMESPACE):
                test_client.disconnect(namespace=NAMESPACE)
        except Exception:
            pass


@pytest.fixture()
def sio_client(make_sio_client):
    return make_sio_client()


@pytest.fixture()
def dictionary():
    return Dictionary.from_words(WORDS)


@pytest.fixture()
def make_session(dictionary):
    def _make(players=('alice', 'bob'), starting_tiles=75, start=True, **kwargs):
        session = GameSession(
            'table-1',
            list(players),
            starting_tiles=starting_tiles,
            dictionary=dictionary,
            rng=random.Random(1234),
            **kwargs,
        )
        if start:
            session.begin_play()
        return session

    return _make


def placements(*cells):
    """Build placements from (letter, row, col) triples."""
    return [Placement(letter=letter, row=row, col=col) for letter, row, col in cells]


def word_across(word, row=0, col=0):
    return placements(*[(letter, row, col + i) for i, letter in enumerate(word)])


def drain(test_client):
    return test_client.get_received(NAMESPACE)


def payloads(packets, name):
    return [pkt['args'][0] if pkt['args'] else None for pkt in packets if pkt['name'] == name]
