"""App records."""

from __future__ import annotations

from pydantic import Field

from schemas.common import Common, HerokuRecord


class AppOwner(HerokuRecord):
    email: str = ""
    id: str = ""


class Space(Common):
    shield: bool = False


class App(HerokuRecord):
    """A Heroku application as returned by `/apps`."""

    id: str
    name: str
    acm: bool = False
    archived_at: str | None = None
    build_stack: Common | None = None
    buildpack_provided_description: str | None = None
    created_at: str | None = None
    git_url: str = ""
    internal_routing: bool | None = None
    maintenance: bool = False
    organization: Common | None = None
    owner: AppOwner = Field(default_factory=AppOwner)
    region: Common | None = None
    released_at: str | None = None
    repo_size: int | None = None
    slug_size: int | None = None
    space: Space | None = None
    stack: Common | None = None
    team: Common | None = None
    updated_at: str | None = None
    web_url: str = ""
