import os
import sys
import pytest

# Ensure the backend root (containing the `scoreboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scoreboard import create_app, db
from scoreboard.schemas import MatchCreate
from helpers import match_payload


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DEFAULT_TOTAL_ROUNDS = 3
    DEFAULT_ROUND_DURATION_MINUTES = 2
    MATCH_LIST_LIMIT = 0


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import scoreboard.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def file_app(tmp_path):
    """App backed by a file database so worker threads get their own connections."""
    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'scoreboard.db'}"

    application = create_app(FileConfig)
    with application.app_context():
        import scoreboard.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture()
def make_match(flask_app):
    """Create a match through the state machine and return its id."""
    from scoreboard.services.matches import state_machine

    def _make(**overrides):
        return state_machine.create_match(MatchCreate(**match_payload(**overrides))).id
    return _make
