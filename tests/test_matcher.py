"""Tests for search filter schema and matching rules."""

from __future__ import annotations

import re

import pytest
from pydantic import ValidationError

from schemas.apps import App
from schemas.common import Common, compact, is_not_found
from schemas.filters import SearchFilters
from search.matcher import matches_app_fields, matches_env_vars


@pytest.fixture
def app() -> App:
    return App(id="a-1", name="api", region=Common(id="r-us", name="us"), maintenance=False)


@pytest.mark.parametrize(
    ("filters", "kind"),
    [
        (SearchFilters(), "none"),
        (SearchFilters(app={"name": "api"}), "app"),
        (SearchFilters(env_vars={"FOO": "bar"}), "env_vars"),
        (SearchFilters(app={"name": "api"}, env_vars={"FOO": "bar"}), "combined"),
    ],
)
def test_filter_kind(filters, kind):
    assert filters.kind == kind
    assert filters.needs_env_lookup == (kind in ("env_vars", "combined"))


def test_env_patterns_are_compiled():
    filters = SearchFilters(env_vars={"FOO": "^ba[rz]$", "BAR": re.compile("x", re.I)})

    assert filters.env_vars["FOO"].search("baz")
    assert filters.env_vars["BAR"].search("X")


def test_invalid_pattern_is_rejected():
    with pytest.raises(ValidationError):
        SearchFilters(env_vars={"FOO": "("})


def test_filters_are_immutable():
    filters = SearchFilters(app={"name": "api"})

    with pytest.raises(ValidationError):
        filters.app = None


def test_matches_scalar_fields(app):
    assert matches_app_fields(app, {"name": "api", "maintenance": False})
    assert not matches_app_fields(app, {"name": "ap"})
    assert not matches_app_fields(app, {"maintenance": True})


def test_nested_field_needs_whole_reference(app):
    assert matches_app_fields(app, {"region": {"id": "r-us", "name": "us"}})
    assert matches_app_fields(app, {"region": Common(id="r-us", name="us")})
    assert not matches_app_fields(app, {"region": "us"})


def test_empty_criteria_match_everything(app):
    assert matches_app_fields(app, None)
    assert matches_app_fields(app, {})
    assert matches_env_vars({}, None)


def test_env_vars_absent_or_non_string_never_match():
    patterns = {"FOO": re.compile("")}

    assert matches_env_vars({"FOO": ""}, patterns)
    assert not matches_env_vars({}, patterns)
    assert not matches_env_vars({"FOO": None}, patterns)


def test_env_vars_every_pattern_must_match():
    patterns = {"FOO": re.compile("^bar$"), "ENV": re.compile("prod")}

    assert matches_env_vars({"FOO": "bar", "ENV": "production"}, patterns)
    assert not matches_env_vars({"FOO": "bar", "ENV": "staging"}, patterns)


def test_not_found_sentinel_helper():
    assert is_not_found({"id": "not_found", "message": "Couldn't find that app."})
    assert not is_not_found({"id": "a-1"})
    assert not is_not_found([{"id": "not_found"}])
    assert not is_not_found(None)


def test_compact_drops_none_values():
    assert compact({"name": "x", "region": None, "team": ""}) == {"name": "x", "team": ""}
