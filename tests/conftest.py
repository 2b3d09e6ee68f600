"""Shared fixtures for tests: fake HTTP transport and in-memory providers."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from config.settings import Settings
from providers.dummy_heroku import DummyHeroku
from providers.heroku_client import HerokuClient
from schemas.apps import App
from schemas.common import Common
from schemas.pipelines import Coupling, CouplingStage, Pipeline, ResourceRef

Responder = Callable[[httpx.Request], httpx.Response]

US = {"id": "r-us", "name": "us"}
EU = {"id": "r-eu", "name": "eu"}


def app_payload(app_id: str, name: str, region: dict = US, **extra: Any) -> dict:
    return {
        "id": app_id,
        "name": name,
        "region": region,
        "stack": {"id": "s-22", "name": "heroku-22"},
        "owner": {"email": "ops@example.com", "id": "u-1"},
        "maintenance": False,
        "created_at": "2024-01-10T12:00:00Z",
        **extra,
    }


class FakeHerokuServer:
    """Routes (method, path) to canned JSON answers and records every request.

    Unknown routes answer like the real API: 404 with the not-found sentinel.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Responder] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        payload: Any = None,
        *,
        status: int = 200,
        headers: dict[str, str] | None = None,
    ) -> None:
        def responder(_request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, json=payload, headers=headers)

        self.routes[(method, path)] = responder

    def add_handler(self, method: str, path: str, responder: Responder) -> None:
        self.routes[(method, path)] = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(
                404,
                json={"id": "not_found", "message": f"Couldn't find {request.url.path}"},
            )
        return responder(request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


@pytest.fixture
def settings() -> Settings:
    return Settings(heroku_api_key="test-key", _env_file=None)


@pytest.fixture
def server() -> FakeHerokuServer:
    return FakeHerokuServer()


@pytest.fixture
def client(settings, server) -> HerokuClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(server.handler))
    return HerokuClient(settings=settings, http_client=http)


@pytest.fixture
def sample_apps() -> list[App]:
    return [
        App(id="a-1", name="api", region=Common(**US), maintenance=False),
        App(id="a-2", name="web", region=Common(**EU), maintenance=False),
        App(id="a-3", name="worker", region=Common(**US), maintenance=True),
        App(id="a-4", name="api-staging", region=Common(**US), maintenance=False),
        App(id="a-5", name="reports", region=Common(**EU), maintenance=False),
    ]


@pytest.fixture
def dummy_heroku(sample_apps) -> DummyHeroku:
    pipeline = Pipeline(id="p-1", name="main")
    couplings = [
        # coupling order deliberately differs from app order
        Coupling(id="c-1", app=ResourceRef(id="a-3"), pipeline=ResourceRef(id="p-1"), stage=CouplingStage.PRODUCTION),
        Coupling(id="c-2", app=ResourceRef(id="a-4"), pipeline=ResourceRef(id="p-1"), stage=CouplingStage.STAGING),
        Coupling(id="c-3", app=ResourceRef(id="a-1"), pipeline=ResourceRef(id="p-1"), stage=CouplingStage.PRODUCTION),
        Coupling(id="c-4", app=ResourceRef(id="gone"), pipeline=ResourceRef(id="p-1"), stage=CouplingStage.PRODUCTION),
    ]
    env_vars = {
        "api": {"FOO": "bar", "NODE_ENV": "production"},
        "web": {"FOO": "barbecue", "NODE_ENV": "production"},
        "worker": {"FOO": "bar"},
        "api-staging": {"NODE_ENV": "staging"},
        "reports": {"FOO": "bar", "NODE_ENV": "production"},
    }
    return DummyHeroku(sample_apps, pipelines=[pipeline], couplings=couplings, env_vars=env_vars)
