"""
Tests for the map API and profile clients.
"""

import httpx
import pytest

from aeros.client import AerosClient, ApiError, ProfileClient, error_message
from aeros.tags import PreferenceTag
from tests.conftest import API_URL

AUTH_URL = "http://auth.test"


def _client(handler, cls=AerosClient, base_url=API_URL):
    return cls(httpx.AsyncClient(transport=httpx.MockTransport(handler)), base_url)


class TestAerosClient:

    @pytest.mark.asyncio
    async def test_fetch_states_builds_records(self, by_state):
        def handler(request):
            assert request.url.path == "/map/api/states"
            return httpx.Response(200, json={"byState": by_state})

        records = await _client(handler).fetch_states()
        assert records["06"].ai == 45.0
        assert records["32"].name == "Nevada"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("by_state", [["bad"], {"06": "California"}, "06"])
    async def test_malformed_by_state_raises(self, by_state):
        client = _client(lambda request: httpx.Response(200, json={"byState": by_state}))
        with pytest.raises(ApiError, match="Malformed byState"):
            await client.fetch_states()

    @pytest.mark.asyncio
    async def test_error_field_raises(self):
        client = _client(lambda request: httpx.Response(200, json={"error": "No JSON found"}))
        with pytest.raises(ApiError, match="No JSON found"):
            await client.fetch_states()

    @pytest.mark.asyncio
    async def test_http_error_uses_detail(self):
        client = _client(lambda request: httpx.Response(404, json={"detail": "No JSON found"}))
        with pytest.raises(ApiError) as excinfo:
            await client.fetch_states()
        assert excinfo.value.status == 404
        assert str(excinfo.value) == "No JSON found"

    @pytest.mark.asyncio
    async def test_fetch_tag_catalog(self, tags_catalog):
        client = _client(lambda request: httpx.Response(200, json=tags_catalog))
        catalog = await client.fetch_tag_catalog()
        assert len(catalog) == 4

    def test_error_message_without_body(self):
        assert error_message(httpx.Response(502, text="bad gateway")) == "HTTP 502"


class TestProfileClient:

    @pytest.mark.asyncio
    async def test_profile_uses_bearer_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["path"] = request.url.path
            return httpx.Response(200, json={"data": {"user": {
                "uuid": "u-1", "email": "a@b.c", "name": "Ana", "surname": "Lee", "zipCode": "94105",
                "tags": [{"tagId": 1, "tagName": "Running", "tagType": "Activity"}],
            }}})

        profile = await _client(handler, ProfileClient, AUTH_URL).fetch_profile("tok")
        assert seen == {"auth": "Bearer tok", "path": "/auth/profile"}
        assert profile.zip_code == "94105"
        assert PreferenceTag.from_dict(profile.tags[0].model_dump()).tag_type == "Outdoor Activities"

    @pytest.mark.asyncio
    async def test_unauthorized_profile_raises(self):
        client = _client(lambda request: httpx.Response(401, json={"error": "Unauthorized"}), ProfileClient, AUTH_URL)
        with pytest.raises(ApiError) as excinfo:
            await client.fetch_profile("expired")
        assert excinfo.value.status == 401
