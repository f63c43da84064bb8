import mongomock
import pytest
from fastapi.testclient import TestClient

from database import MongoStore, StoreError
from main import app, get_store


class BrokenStore:
    """Store whose every primitive fails, like a lost database connection."""

    def _fail(self, *args, **kwargs):
        raise StoreError("store unavailable")

    insert = get = scan = patch = delete = tables = _fail

    def close(self):
        pass


@pytest.fixture
def store():
    """Fresh in-memory Mongo database behind the real MongoStore."""
    mongo = mongomock.MongoClient()
    yield MongoStore(mongo["portfolio_test"])
    mongo.drop_database("portfolio_test")


@pytest.fixture
def broken_store():
    return BrokenStore()


@pytest.fixture
def client(store):
    """Test client wired to the in-memory store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client(broken_store):
    app.dependency_overrides[get_store] = lambda: broken_store
    yield TestClient(app)
    app.dependency_overrides.clear()
