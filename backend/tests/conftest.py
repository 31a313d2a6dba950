import copy
import os
import sys
import pytest

# Ensure the backend root (containing the `tictactoe` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from tictactoe import create_app, db, socketio
from tictactoe.services.storage import RoomStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ROOM_STORE = 'sql'
    ROOM_STORE_PATH = None
    CORS_ORIGINS = ['http://localhost:5173']
    SOCKETIO_NAMESPACE = '/ws'
    LOG_LEVEL = 'DEBUG'


class MemoryRoomStore(RoomStore):
    """Keeps a deep-ish copy so callers cannot share state with the store."""

    def __init__(self, rooms=None):
        self.rooms = copy.deepcopy(rooms or {})
        self.loads = 0
        self.saves = 0

    def load(self):
        self.loads += 1
        return copy.deepcopy(self.rooms)

    def save(self, rooms):
        self.saves += 1
        self.rooms = copy.deepcopy(rooms)


class FakeConnection:
    def __init__(self, name, open_=True, fail=False):
        self.name = name
        self.open = open_
        self.fail = fail
        self.sent = []

    def is_open(self):
        return self.open

    def send(self, event, payload):
        if self.fail:
            raise ConnectionError(f'{self.name} went away')
        self.sent.append((event, payload))

    def __repr__(self):
        return f'FakeConnection({self.name!r})'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import tictactoe.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def services(flask_app):
    return flask_app.extensions['tictactoe']


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


@pytest.fixture()
def memory_store():
    return MemoryRoomStore()
