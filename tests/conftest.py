"""Shared fixtures."""

import httpx
import pytest

from factories import FakeBackend
from storefront.config import StoreConfig
from storefront.storage import MemoryStore
from storefront.transport import AuthSession, HttpxTransport, StoreApi


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def config() -> StoreConfig:
    return StoreConfig().with_api_base("http://shop.test")


@pytest.fixture
def auth() -> AuthSession:
    return AuthSession()


@pytest.fixture
async def api(backend, config, auth):
    client = httpx.AsyncClient(transport=httpx.MockTransport(backend.handle))
    yield StoreApi(HttpxTransport(client), config, auth)
    await client.aclose()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def notices() -> list:
    return []
