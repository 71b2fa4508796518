"""Async HTTP clients for the map API and the profile service."""

from __future__ import annotations

import logging
import os

import httpx

from aeros.models import UserProfile
from aeros.render import StateRecord, records_from_by_state
from aeros.tags import TagCatalog

logger = logging.getLogger(__name__)

AEROS_API_URL = os.environ.get("AEROS_API_URL", "http://localhost:8000")
AEROS_AUTH_API_URL = os.environ.get("AEROS_AUTH_API_URL", "http://localhost:3001")
API_PREFIX = "/map/api"


class ApiError(Exception):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


def error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("error") or body.get("detail")
        if detail:
            return str(detail)
    return f"HTTP {resp.status_code}"


class AerosClient:
    def __init__(self, http: httpx.AsyncClient, base_url: str = AEROS_API_URL):
        self.http = http
        self.base_url = base_url.rstrip("/")

    def url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}{path}"

    async def get_json(self, path: str) -> dict:
        resp = await self.http.get(self.url(path))
        if resp.is_error:
            raise ApiError(error_message(resp), resp.status_code)
        try:
            body = resp.json()
        except ValueError as exc:
            raise ApiError(f"Invalid JSON from {path}", resp.status_code) from exc
        if not isinstance(body, dict):
            raise ApiError(f"Unexpected payload from {path}", resp.status_code)
        if body.get("error"):
            raise ApiError(str(body["error"]), resp.status_code)
        return body

    async def fetch_states(self) -> dict[str, StateRecord]:
        body = await self.get_json("/states")
        by_state = body.get("byState") or {}
        if not isinstance(by_state, dict) or not all(isinstance(v, dict) for v in by_state.values()):
            raise ApiError("Malformed byState in /states response")
        records = records_from_by_state(by_state)
        logger.debug("Fetched %d state records from %s", len(records), body.get("json"))
        return records

    async def fetch_tag_catalog(self) -> TagCatalog:
        return TagCatalog.from_payload(await self.get_json("/tags-catalog"))

    async def post_state_recommendation(self, payload: dict, timeout: float) -> httpx.Response:
        return await self.http.post(self.url("/state-recommendations"), json=payload, timeout=timeout)


class ProfileClient:
    """Read-only access to the signed-in user's profile."""

    def __init__(self, http: httpx.AsyncClient, base_url: str = AEROS_AUTH_API_URL):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def fetch_profile(self, token: str) -> UserProfile:
        resp = await self.http.get(
            f"{self.base_url}/auth/profile",
            headers={"Authorization": f"Bearer {token}"},
        )
        if resp.is_error:
            raise ApiError(error_message(resp), resp.status_code)
        body = resp.json()
        user = (body.get("data") or {}).get("user") if isinstance(body, dict) else None
        if user is None:
            raise ApiError("Profile response has no user", resp.status_code)
        return UserProfile.model_validate(user)
