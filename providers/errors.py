"""Errors raised by Heroku providers."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from schemas.common import NOT_FOUND_ID


class HerokuConfigError(Exception):
    """The client cannot be built from the given settings (e.g. no API key)."""


@dataclass(eq=False)
class HerokuAPIError(Exception):
    """Non-success HTTP status returned by the Heroku API."""

    status_code: int
    reason: str
    method: str = "GET"
    route: str = ""
    error_id: str = ""
    message: str = ""

    def __str__(self) -> str:
        text = f"{self.method} {self.route} -> {self.status_code} {self.reason}"
        if self.error_id:
            text += f" [{self.error_id}]"
        if self.message:
            text += f": {self.message}"
        return text

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404 or self.error_id == NOT_FOUND_ID

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @classmethod
    def from_response(
        cls, response: httpx.Response, *, method: str, route: str,
    ) -> HerokuAPIError:
        error_id = ""
        message = ""
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error_id = str(payload.get("id") or "")
            message = str(payload.get("message") or "")
        return cls(
            status_code=response.status_code,
            reason=response.reason_phrase,
            method=method,
            route=route,
            error_id=error_id,
            message=message,
        )
