import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import database
from webapp.services.auth_service import register_user

PASSWORD = "Secret123"


@pytest.fixture
def db(tmp_path):
    """Fresh SQLite database for each test."""
    database.configure_database(f"sqlite:///{tmp_path / 'test.db'}")
    database.init_database()
    yield database
    database.engine.dispose()


@pytest.fixture
def make_user(db):
    def _make_user(username, private=False):
        register_user(username, PASSWORD)
        if private:
            db.set_favorites_privacy(username, True)
        return username
    return _make_user


@pytest.fixture
def app(tmp_path):
    from webapp.app import create_app
    app = create_app(database_url=f"sqlite:///{tmp_path / 'api.db'}", testing=True)
    yield app
    database.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()
