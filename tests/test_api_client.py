"""
Unit tests for the Bencher API client error translation.
"""
import json

import httpx
import pytest

from console.core.config import Settings
from console.core.errors import FetchFailedError, MalformedResponseError, SubmitFailedError
from console.services.api_client import BencherApiClient
from tests.fakes import BASE_URL


class TestGetJson:
    @pytest.mark.asyncio
    async def test_returns_json(self, fake_api, api_client):
        fake_api.add("GET", "/v0/projects", json=[{"slug": "p1"}])
        assert await api_client.get_json(f"{BASE_URL}/v0/projects") == [{"slug": "p1"}]

    @pytest.mark.asyncio
    async def test_non_2xx_is_fetch_failed(self, fake_api, api_client):
        fake_api.add("GET", "/v0/projects", status=503)
        with pytest.raises(FetchFailedError) as exc_info:
            await api_client.get_json(f"{BASE_URL}/v0/projects")
        assert exc_info.value.details["status_code"] == 503
        assert exc_info.value.code == "FETCH_FAILED"

    @pytest.mark.asyncio
    async def test_transport_error_is_fetch_failed(self, fake_api, api_client):
        fake_api.fail("GET", "/v0/projects", httpx.ConnectError("connection refused"))
        with pytest.raises(FetchFailedError) as exc_info:
            await api_client.get_json(f"{BASE_URL}/v0/projects")
        assert "connection refused" in exc_info.value.details["reason"]

    @pytest.mark.asyncio
    async def test_invalid_json_is_malformed(self, fake_api, api_client):
        fake_api.add("GET", "/v0/projects", content=b"not json")
        with pytest.raises(MalformedResponseError):
            await api_client.get_json(f"{BASE_URL}/v0/projects")

    @pytest.mark.asyncio
    async def test_sends_json_headers(self, fake_api, api_client):
        fake_api.add("GET", "/v0/projects", json=[])
        await api_client.get_json(f"{BASE_URL}/v0/projects")
        request = fake_api.requests[0]
        assert request.headers["Accept"] == "application/json"
        assert "Authorization" not in request.headers


class TestPostJson:
    @pytest.mark.asyncio
    async def test_posts_body(self, fake_api, api_client):
        fake_api.add("POST", "/v0/testbeds", status=201, json={"uuid": "u1"})
        created = await api_client.post_json(f"{BASE_URL}/v0/testbeds", {"name": "box"})
        assert created == {"uuid": "u1"}
        assert json.loads(fake_api.requests[0].content) == {"name": "box"}

    @pytest.mark.asyncio
    async def test_non_2xx_is_submit_failed(self, fake_api, api_client):
        fake_api.add("POST", "/v0/testbeds", status=400, json={"error": "bad"})
        with pytest.raises(SubmitFailedError) as exc_info:
            await api_client.post_json(f"{BASE_URL}/v0/testbeds", {})
        assert exc_info.value.details["status_code"] == 400

    @pytest.mark.asyncio
    async def test_transport_error_is_submit_failed(self, fake_api, api_client):
        fake_api.fail("POST", "/v0/testbeds", httpx.ReadTimeout("timed out"))
        with pytest.raises(SubmitFailedError):
            await api_client.post_json(f"{BASE_URL}/v0/testbeds", {})

    @pytest.mark.asyncio
    async def test_empty_or_unreadable_echo_is_none(self, fake_api, api_client):
        fake_api.add("POST", "/v0/testbeds", status=201, content=b"")
        assert await api_client.post_json(f"{BASE_URL}/v0/testbeds", {}) is None
        fake_api.add("POST", "/v0/testbeds", status=201, content=b"created")
        assert await api_client.post_json(f"{BASE_URL}/v0/testbeds", {}) is None


class TestAuthHeader:
    @pytest.mark.asyncio
    async def test_attached_only_when_enabled(self, fake_api):
        fake_api.add("GET", "/v0/projects", json=[])
        settings = Settings(ATTACH_AUTH_HEADER=True, API_TOKEN="secret")
        client = BencherApiClient.from_settings(settings, transport=fake_api.transport())
        await client.get_json(f"{BASE_URL}/v0/projects")
        await client.aclose()
        assert fake_api.requests[0].headers["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_token_without_flag_not_sent(self, fake_api):
        fake_api.add("GET", "/v0/projects", json=[])
        client = BencherApiClient(token="secret", transport=fake_api.transport())
        await client.get_json(f"{BASE_URL}/v0/projects")
        await client.aclose()
        assert "Authorization" not in fake_api.requests[0].headers
