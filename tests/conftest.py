"""
Pytest configuration and fixtures for the MetalFrame API and sync client tests.
"""
import os

# Settings are read at import time; keep the app away from on-disk databases.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("POSTS_BACKEND", "database")
os.environ.setdefault("MEDIA_BACKEND", "local")

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from metalframe.database import Base, get_db
from metalframe.dependencies import get_media
from metalframe.limiter import limiter
from metalframe.main import app
from metalframe.media import LocalMediaStore
from metalframe.sync import LocalCache, PostsSync, SyncContext

# Disable rate limiting for tests
limiter.enabled = False

# Use in-memory SQLite for tests with shared connection
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Global session for sharing across requests
_test_session = None

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def get_test_db():
    """Get the shared test database session."""
    global _test_session
    try:
        yield _test_session
    finally:
        pass


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    global _test_session

    Base.metadata.create_all(bind=engine)
    _test_session = TestingSessionLocal()
    app.dependency_overrides[get_db] = get_test_db

    yield _test_session

    app.dependency_overrides.clear()
    _test_session.close()
    _test_session = None

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def media_store(tmp_path):
    """Local media store writing into a temporary directory."""
    store = LocalMediaStore(str(tmp_path / "uploads"), "/uploads")
    app.dependency_overrides[get_media] = lambda: store
    return store


@pytest.fixture(scope="function")
def client(db, media_store):
    """Create a test client."""
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def image_upload():
    """Multipart file tuple for a small PNG."""
    return {"image": ("photo.png", PNG_BYTES, "image/png")}


class FlakyHttp:
    """Routes sync client calls to the test app, or fails them like a dead network."""

    def __init__(self, client):
        self.client = client
        self.down = False
        self.calls = []

    def _call(self, method, url, **kwargs):
        self.calls.append((method, url))
        if self.down:
            raise requests.ConnectionError("connection refused")
        return getattr(self.client, method)(url, **kwargs)

    def get(self, url, **kwargs):
        return self._call("get", url, **kwargs)

    def post(self, url, **kwargs):
        return self._call("post", url, **kwargs)

    def put(self, url, **kwargs):
        return self._call("put", url, **kwargs)

    def delete(self, url, **kwargs):
        return self._call("delete", url, **kwargs)


@pytest.fixture(scope="function")
def http(client):
    return FlakyHttp(client)


@pytest.fixture(scope="function")
def local_cache(tmp_path):
    return LocalCache(str(tmp_path / "local_storage.json"))


@pytest.fixture(scope="function")
def sync(http, local_cache):
    """Sync client talking to the test app."""
    return PostsSync("http://testserver", local_cache, http=http)


@pytest.fixture(scope="function")
def ctx():
    return SyncContext()
