"""Recommendation panel: tag selection plus one outbound request per ask.

A response is either a :class:`StructuredRecommendation` or, when the model
reply could not be parsed, a :class:`RawTextRecommendation`. Only the newest
request's response is ever applied.
"""

from __future__ import annotations

import enum
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Union

import httpx
from pydantic import ValidationError

from aeros.client import AerosClient, error_message
from aeros.models import ProfileTag, RecommendationModel, UserProfile
from aeros.render import StateRecord
from aeros.tags import PreferenceTag, TagSelection

logger = logging.getLogger(__name__)

RECOMMENDATION_TIMEOUT = float(os.environ.get("AEROS_RECOMMENDATION_TIMEOUT", "30"))
SELECTION_REQUIRED_MESSAGE = "Select a state to get recommendations"


class SelectionRequired(Exception):
    pass


@dataclass(frozen=True)
class SelectionContext:
    fips: str | None
    state_name: str | None = None
    date: str | None = None
    user_text: str | None = None
    country: str = "United States"
    record: StateRecord | None = None


@dataclass(frozen=True)
class StructuredRecommendation:
    model: RecommendationModel
    pollutants: dict = field(default_factory=dict)


@dataclass(frozen=True)
class RawTextRecommendation:
    text: str


RecommendationResult = Union[StructuredRecommendation, RawTextRecommendation]


def parse_recommendation(body) -> RecommendationResult:
    if not isinstance(body, dict):
        return RawTextRecommendation(body if isinstance(body, str) else json.dumps(body))

    summary = body.get("summary")
    model = body.get("model")
    if isinstance(model, dict):
        try:
            return StructuredRecommendation(RecommendationModel.model_validate(model), body.get("pollutants") or {})
        except ValidationError:
            logger.info("Recommendation model did not match the expected shape")
            if not summary or summary == "OK":
                summary = json.dumps(model)
    return RawTextRecommendation(str(summary or ""))


class PanelStatus(enum.Enum):
    IDLE = "idle"
    SELECTION_REQUIRED = "selection_required"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class RecommendationPanel:
    def __init__(self, client: AerosClient, selection: TagSelection,
                 timeout: float = RECOMMENDATION_TIMEOUT):
        self.client = client
        self.selection = selection
        self.timeout = timeout
        self.status = PanelStatus.IDLE
        self.result: RecommendationResult | None = None
        self.error: str | None = None
        self._generation = 0

    def toggle_tag(self, tag_id: int) -> bool:
        return self.selection.toggle(tag_id)

    def seed_from_profile(self, profile: UserProfile | list[PreferenceTag | ProfileTag] | None) -> list[int]:
        tags = profile.tags if isinstance(profile, UserProfile) else profile
        return self.selection.seed_from_profile(tags)

    def validate(self, context: SelectionContext) -> None:
        if not context.fips:
            raise SelectionRequired(SELECTION_REQUIRED_MESSAGE)

    def build_payload(self, context: SelectionContext) -> dict:
        payload = {
            "fips": context.fips,
            "state_name": context.state_name,
            "date": context.date,
            "tags": self.selection.selected_names(),
            "tag_ids": self.selection.selected_ids,
            "user_text": context.user_text,
            "country": context.country,
        }
        if context.record is not None:
            payload["pollutants"] = context.record.pollutants()
        return payload

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def request_recommendation(self, context: SelectionContext) -> RecommendationResult | None:
        try:
            self.validate(context)
        except SelectionRequired as exc:
            # invalidates any response still in flight
            self._generation += 1
            self.status, self.error, self.result = PanelStatus.SELECTION_REQUIRED, str(exc), None
            return None

        self._generation += 1
        generation = self._generation
        self.status, self.error, self.result = PanelStatus.LOADING, None, None

        try:
            resp = await self.client.post_state_recommendation(self.build_payload(context), self.timeout)
        except httpx.TimeoutException:
            return self._fail(generation, "Recommendation request timed out")
        except httpx.HTTPError as exc:
            return self._fail(generation, f"Recommendation request failed: {exc}")

        if not self._is_current(generation):
            logger.debug("Dropping stale recommendation response %d", generation)
            return None
        if resp.is_error:
            return self._fail(generation, error_message(resp))

        try:
            body = resp.json()
        except ValueError:
            body = resp.text
        self.result = parse_recommendation(body)
        self.status = PanelStatus.READY
        return self.result

    def _fail(self, generation: int, message: str) -> None:
        if self._is_current(generation):
            logger.warning(message)
            self.status, self.error = PanelStatus.ERROR, message
        return None

    def close(self) -> None:
        """Discard the result and ignore any response still in flight."""
        self._generation += 1
        self.status, self.result, self.error = PanelStatus.IDLE, None, None
