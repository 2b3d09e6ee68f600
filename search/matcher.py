"""Exact-match and pattern checks applied to search candidates."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from schemas.apps import App


def _normalize(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_unset=True)
    return value


def matches_app_fields(app: App, criteria: Mapping[str, Any] | None) -> bool:
    """Every criterion must equal the app's field; no fuzzy or partial matching.

    Only fields the API actually sent take part: a criterion naming a field
    missing from the payload rejects, even when the model has a default for it.
    Nested records (region, stack, team, ...) compare as plain dicts, so a
    criterion for them must carry the whole `{id, name}` reference.
    """
    if not criteria:
        return True
    record = app.model_dump(mode="json", exclude_unset=True)
    for key, expected in criteria.items():
        if key not in record:
            return False
        if record[key] != _normalize(expected):
            return False
    return True


def matches_env_vars(
    env_vars: Mapping[str, Any],
    patterns: Mapping[str, re.Pattern] | None,
) -> bool:
    """Every pattern must be found in its variable's value.

    A missing (or non-string) variable is a non-match, never an error.
    """
    if not patterns:
        return True
    for name, pattern in patterns.items():
        value = env_vars.get(name)
        if not isinstance(value, str):
            return False
        if pattern.search(value) is None:
            return False
    return True
