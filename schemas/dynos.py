"""Dyno (running process) records."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from schemas.common import Common, HerokuRecord


class DynoState(str, Enum):
    CRASHED = "crashed"
    DOWN = "down"
    IDLE = "idle"
    STARTING = "starting"
    UP = "up"


class DynoSize(str, Enum):
    FREE = "free"
    HOBBY = "hobby"
    STANDARD_1X = "standard-1x"
    STANDARD_2X = "standard-2x"
    PERFORMANCE_M = "performance-m"
    PERFORMANCE_L = "performance-l"


class DynoApp(HerokuRecord):
    id: str
    name: str = ""


class DynoRelease(HerokuRecord):
    id: str
    version: int = 0


class Dyno(Common):
    """A process running on the platform, e.g. `web.1`."""

    attach_url: str | None = None
    command: str = ""
    app: DynoApp | None = None
    release: DynoRelease | None = None
    # Newer plans (basic, eco, private-*) are not enumerated and stay plain strings
    size: DynoSize | str = Field(default="", union_mode="left_to_right")
    state: DynoState
    type: str = ""
    created_at: str | None = None
    updated_at: str | None = None
