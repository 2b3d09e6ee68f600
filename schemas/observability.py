"""Observability schemas for Heroku API calls."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class APICallRecord(BaseModel):
    """Record of a single Heroku API request for latency and rate-limit tracking."""

    call_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    method: str = "GET"
    route: str = ""
    status_code: int = 0  # 0 when no response was received
    latency_ms: float = 0.0
    attempts: int = 1
    success: bool = True
    rate_limit_remaining: int | None = None
    request_id: str = ""
    error_message: str = ""
