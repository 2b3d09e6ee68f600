"""Custom and default domain records attached to an app."""

from __future__ import annotations

from typing import Literal

from schemas.common import Common, HerokuRecord


class Domain(HerokuRecord):
    id: str
    hostname: str
    kind: Literal["heroku", "custom"] = "custom"
    status: str = ""
    cname: str | None = None
    acm_status: str | None = None  # automated certificate management
    acm_status_reason: str | None = None
    app: Common | None = None
    sni_endpoint: Common | None = None
    created_at: str | None = None
    updated_at: str | None = None
