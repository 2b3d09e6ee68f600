"""Search filter schema for composite app search."""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

FilterKind = Literal["none", "app", "env_vars", "combined"]


class SearchFilters(BaseModel):
    """Criteria for `search_apps`.

    Either member may be omitted. `app` holds exact-match criteria against app
    fields; `env_vars` maps config var names to patterns their values must match
    (strings are compiled on validation).
    """

    model_config = ConfigDict(frozen=True)

    app: dict[str, Any] | None = Field(
        default=None,
        description="Partial app record; every key must equal the app's field.",
    )
    env_vars: dict[str, re.Pattern] | None = Field(
        default=None,
        description="Config var name -> pattern searched in the var's value.",
    )

    @field_validator("app", "env_vars")
    @classmethod
    def _empty_as_missing(cls, value: dict | None) -> dict | None:
        return value or None

    @property
    def kind(self) -> FilterKind:
        if self.app and self.env_vars:
            return "combined"
        if self.app:
            return "app"
        if self.env_vars:
            return "env_vars"
        return "none"

    @property
    def needs_env_lookup(self) -> bool:
        return self.kind in ("env_vars", "combined")
