"""Root conftest: set env vars BEFORE any symptrack module is imported.

pydantic-settings reads the environment at import time, so these must be
set here — at the module level, before any `from symptrack.*` import.
"""
import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SEED_CATALOGS", "true")
os.environ.setdefault("API_BASE_URL", "http://testserver")

import httpx  # noqa: E402
import pytest  # noqa: E402

from symptrack.core.storage import MemStorage, get_storage  # noqa: E402
from symptrack.main import app  # noqa: E402


@pytest.fixture
def store():
    """A fresh seeded in-memory store wired into the app for one test."""
    storage = MemStorage(seed=True)
    app.dependency_overrides[get_storage] = lambda: storage
    yield storage
    app.dependency_overrides.clear()


@pytest.fixture
def asgi_client_factory(store):
    """Build httpx.AsyncClients that talk to the app in-process.

    Clients must be created inside the event loop that uses them, so tests
    receive a factory rather than a client.
    """

    def factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://testserver"
        )

    return factory
