"""Shared building blocks for Heroku API records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

# Heroku answers unknown names with {"id": "not_found", "message": "..."}
NOT_FOUND_ID = "not_found"


class HerokuRecord(BaseModel):
    """Base for every record returned by the API.

    Unknown fields are kept as-is so payloads round-trip unchanged.
    """

    model_config = ConfigDict(extra="allow")


class Common(HerokuRecord):
    """Nested `{id, name}` reference (region, stack, team, app, ...)."""

    id: str = ""
    name: str | None = None


def is_not_found(payload: Any) -> bool:
    """True when a decoded response body is the API's not-found sentinel."""
    return isinstance(payload, dict) and payload.get("id") == NOT_FOUND_ID


def compact(body: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None before a request body is encoded."""
    return {k: v for k, v in body.items() if v is not None}
