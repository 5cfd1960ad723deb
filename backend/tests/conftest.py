"""
Test configuration and fixtures.
Uses an in-memory object store so no test talks to Google Drive.
"""
import os

# Set test environment before any imports
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("GOOGLE_SERVICE_ACCOUNT_KEY", None)
os.environ.pop("GOOGLE_DRIVE_FOLDER_ID", None)

import pytest
from typing import AsyncGenerator, List, Optional

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from photo_relay.config import Settings
from photo_relay.errors import StorageError
from photo_relay.main import create_app
from photo_relay.storage.base import ObjectStore


TEST_FOLDER_ID = "folder-123"
ALLOWED_ORIGIN = "http://localhost:5173"
FIXED_NOW = 1700000000.123  # seconds since epoch -> 1700000000123 ms


class FakeObjectStore(ObjectStore):
    """In-memory store recording every create call."""

    def __init__(self, error: Optional[Exception] = None):
        self.calls: List[dict] = []
        self.error = error

    def create_object(self, name: str, parent_id: str, mime_type: str, data: bytes) -> str:
        self.calls.append({
            "name": name,
            "parent_id": parent_id,
            "mime_type": mime_type,
            "size": len(data),
        })
        if self.error is not None:
            raise self.error
        return f"drive-file-{len(self.calls)}"

    @property
    def provider(self) -> str:
        return "fake"


def make_settings(**overrides) -> Settings:
    """Build settings that ignore any local .env file."""
    values = {
        "environment": "test",
        "google_service_account_key": '{"type": "service_account"}',
        "google_drive_folder_id": TEST_FOLDER_ID,
        "development_origins": ALLOWED_ORIGIN,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_app(store: Optional[ObjectStore], **overrides) -> FastAPI:
    """Create a relay app bound to the given store and a fixed clock."""
    app = create_app(make_settings(**overrides), store_factory=lambda settings: store)
    app.state.upload_service.clock = lambda: FIXED_NOW
    return app


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def app(store: FakeObjectStore) -> FastAPI:
    return make_app(store)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def failing_store_factory():
    """Return a factory for stores that fail with a given storage error code."""
    def factory(code: Optional[int], message: str = "upstream said no") -> FakeObjectStore:
        return FakeObjectStore(error=StorageError(message, code=code))
    return factory
