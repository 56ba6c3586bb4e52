"""
Shared pytest fixtures.

The Bencher API is faked with httpx.MockTransport, so no server is needed.
Routes are matched on (method, path); the host is ignored.
"""
import pytest
from fastapi.testclient import TestClient

from console.core.deps import get_api_client
from console.main import app
from console.services.api_client import BencherApiClient
from console.services.resources import build_default_registry
from tests.fakes import BASE_URL, FakeBencherApi


@pytest.fixture()
def registry():
    return build_default_registry(BASE_URL)


@pytest.fixture()
def fake_api():
    return FakeBencherApi()


@pytest.fixture()
def api_client(fake_api):
    return BencherApiClient(transport=fake_api.transport())


@pytest.fixture()
def client(fake_api):
    override = BencherApiClient(transport=fake_api.transport())
    app.dependency_overrides[get_api_client] = lambda: override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
