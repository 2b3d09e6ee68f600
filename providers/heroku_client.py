"""Heroku Platform API client over httpx. Implements HerokuAPI protocol."""

from __future__ import annotations

import json
import time
from typing import Any
from urllib.parse import quote

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from config.settings import Settings, get_settings
from observability.logger import get_logger
from observability.metrics import RequestMetrics, parse_rate_limit
from providers.errors import HerokuAPIError, HerokuConfigError
from schemas.apps import App
from schemas.common import compact, is_not_found
from schemas.domains import Domain
from schemas.dynos import Dyno
from schemas.filters import SearchFilters
from schemas.observability import APICallRecord
from schemas.pipelines import Coupling, CouplingStage, Pipeline
from schemas.results import Result
from search.engine import AppSearchEngine

log = get_logger(__name__)

_BODY_METHODS = frozenset({"PATCH", "POST", "PUT"})


def _segment(name: str) -> str:
    return quote(name, safe="")


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class HerokuClient:
    """Async client for https://api.heroku.com.

    Every non-success status raises `HerokuAPIError`, except name lookups whose
    body is the `not_found` sentinel: those resolve to `None`.
    """

    provider_name: str = "heroku"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
        metrics: RequestMetrics | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._api_key = (api_key or self._settings.heroku_api_key).strip()
        if not self._api_key:
            raise HerokuConfigError("Heroku API key is required (set HEROKU_API_KEY)")

        self._base_url = self._settings.heroku_api_url.rstrip("/")
        self._accept = self._settings.heroku_accept
        self._max_retries = max(0, self._settings.http_max_retries)
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.http_timeout_seconds),
        )
        self.metrics = metrics or RequestMetrics()
        self._search = AppSearchEngine(self)

    async def __aenter__(self) -> HerokuClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Request builder
    # ------------------------------------------------------------------

    def _headers(self, method: str) -> dict[str, str]:
        headers = {
            "Accept": self._accept,
            "Authorization": f"Bearer {self._api_key}",
        }
        if method in _BODY_METHODS:
            headers["Content-Type"] = "application/json"
        return headers

    async def _request(
        self,
        route: str,
        method: str = "GET",
        body: Any = None,
        *,
        allow_not_found: bool = False,
    ) -> httpx.Response:
        """Send one API request; raise on any non-success status.

        With `allow_not_found`, a response carrying the not-found sentinel is
        returned instead of raising.
        """
        method = method.upper()
        content = json.dumps(body).encode("utf-8") if body is not None else None
        record = APICallRecord(method=method, route=route)
        start = time.perf_counter()

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_retries + 1),
                wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            ):
                with attempt:
                    record.attempts = attempt.retry_state.attempt_number
                    response = await self._http.request(
                        method,
                        f"{self._base_url}{route}",
                        content=content,
                        headers=self._headers(method),
                    )
        except httpx.RequestError as e:
            record.latency_ms = round((time.perf_counter() - start) * 1000, 2)
            record.success = False
            record.error_message = str(e) or type(e).__name__
            self.metrics.record(record)
            log.error(
                "heroku.request.error",
                method=method,
                route=route,
                attempts=record.attempts,
                error_type=type(e).__name__,
                error=record.error_message,
            )
            raise

        record.latency_ms = round((time.perf_counter() - start) * 1000, 2)
        record.status_code = response.status_code
        record.rate_limit_remaining = parse_rate_limit(response.headers.get("ratelimit-remaining"))
        record.request_id = response.headers.get("request-id", "")

        if response.is_success:
            self.metrics.record(record)
            log.info(
                "heroku.request.success",
                method=method,
                route=route,
                status=response.status_code,
                latency_ms=record.latency_ms,
                rate_limit_remaining=record.rate_limit_remaining,
            )
            return response

        if allow_not_found and is_not_found(_decode(response)):
            self.metrics.record(record)
            log.info("heroku.request.not_found", method=method, route=route)
            return response

        error = HerokuAPIError.from_response(response, method=method, route=route)
        record.success = False
        record.error_message = str(error)
        self.metrics.record(record)
        log.warning(
            "heroku.request.failed",
            method=method,
            route=route,
            status=error.status_code,
            error_id=error.error_id,
            latency_ms=record.latency_ms,
        )
        raise error

    async def _fetch_json(
        self,
        route: str,
        method: str = "GET",
        body: Any = None,
        *,
        allow_not_found: bool = False,
    ) -> tuple[Any, dict[str, str]]:
        response = await self._request(route, method, body, allow_not_found=allow_not_found)
        return response.json(), dict(response.headers)

    async def _fetch_bool(
        self, route: str, method: str = "GET", body: Any = None,
    ) -> Result[bool]:
        response = await self._request(route, method, body)
        return Result(data=response.is_success, headers=dict(response.headers))

    async def _lookup(self, route: str) -> tuple[Any, dict[str, str]]:
        """GET a record by name; the not-found sentinel becomes None."""
        payload, headers = await self._fetch_json(route, allow_not_found=True)
        if is_not_found(payload):
            return None, headers
        return payload, headers

    # ------------------------------------------------------------------
    # Apps
    # ------------------------------------------------------------------

    async def get_apps(self) -> Result[list[App]]:
        payload, headers = await self._fetch_json("/apps")
        return Result(data=[App.model_validate(item) for item in payload], headers=headers)

    async def get_app(self, app_name: str) -> Result[App | None]:
        payload, headers = await self._lookup(f"/apps/{_segment(app_name)}")
        app = App.model_validate(payload) if payload is not None else None
        return Result(data=app, headers=headers)

    async def create_app(
        self,
        app_name: str,
        *,
        region: str | None = None,
        team: str | None = None,
    ) -> Result[App]:
        """Create an app, under `team` when given (`/teams/apps`)."""
        if team:
            route = "/teams/apps"
            body = compact({"name": app_name, "region": region, "team": team})
        else:
            route = "/apps"
            body = compact({"name": app_name, "region": region})
        payload, headers = await self._fetch_json(route, "POST", body)
        log.info("heroku.app.created", app=app_name, team=team)
        return Result(data=App.model_validate(payload), headers=headers)

    async def update_app_buildpacks(
        self, app_name: str, buildpacks: list[str],
    ) -> Result[bool]:
        """Replace the app's buildpack list, in the given order."""
        return await self._fetch_bool(
            f"/apps/{_segment(app_name)}/buildpack-installations",
            "PUT",
            {"updates": [{"buildpack": buildpack} for buildpack in buildpacks]},
        )

    # ------------------------------------------------------------------
    # Pipelines
    # ------------------------------------------------------------------

    async def get_pipeline(self, pipeline_name: str) -> Result[Pipeline | None]:
        payload, headers = await self._lookup(f"/pipelines/{_segment(pipeline_name)}")
        pipeline = Pipeline.model_validate(payload) if payload is not None else None
        return Result(data=pipeline, headers=headers)

    async def get_pipeline_couplings(self, pipeline_id: str) -> Result[list[Coupling]]:
        payload, headers = await self._fetch_json(
            f"/pipelines/{_segment(pipeline_id)}/pipeline-couplings",
        )
        return Result(data=[Coupling.model_validate(item) for item in payload], headers=headers)

    async def get_pipeline_apps(
        self,
        pipeline_name: str,
        stage: CouplingStage | None = None,
    ) -> Result[list[App]]:
        return await self._search.pipeline_apps(pipeline_name, stage=stage)

    async def add_app_to_pipeline(
        self,
        app_name: str,
        pipeline_name: str,
        stage: CouplingStage | str,
    ) -> Result[bool]:
        """Couple an app to a pipeline stage; False when the pipeline is unknown."""
        stage = CouplingStage(stage)
        found = await self.get_pipeline(pipeline_name)
        if found.data is None:
            log.warning("heroku.pipeline.not_found", pipeline=pipeline_name, app=app_name)
            return Result(data=False, headers=found.headers)
        return await self._fetch_bool(
            "/pipeline-couplings",
            "POST",
            {"app": app_name, "pipeline": found.data.id, "stage": stage.value},
        )

    # ------------------------------------------------------------------
    # Config vars
    # ------------------------------------------------------------------

    async def get_app_env_vars(self, app_name: str) -> Result[dict[str, str]]:
        payload, headers = await self._fetch_json(f"/apps/{_segment(app_name)}/config-vars")
        return Result(data=dict(payload or {}), headers=headers)

    async def update_app_env_vars(
        self, app_name: str, env_vars: dict[str, str | None],
    ) -> Result[bool]:
        """Set config vars; a None value unsets that variable."""
        return await self._fetch_bool(
            f"/apps/{_segment(app_name)}/config-vars", "PATCH", dict(env_vars),
        )

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    async def add_app_domain(
        self,
        app_name: str,
        hostname: str,
        *,
        sni_endpoint: str | None = None,
    ) -> Result[Domain]:
        payload, headers = await self._fetch_json(
            f"/apps/{_segment(app_name)}/domains",
            "POST",
            compact({"hostname": hostname, "sni_endpoint": sni_endpoint}),
        )
        return Result(data=Domain.model_validate(payload), headers=headers)

    async def get_app_domains(self, app_name: str) -> Result[list[Domain]]:
        payload, headers = await self._fetch_json(f"/apps/{_segment(app_name)}/domains")
        return Result(data=[Domain.model_validate(item) for item in payload], headers=headers)

    async def enable_app_auto_certs(self, app_name: str) -> Result[bool]:
        return await self._fetch_bool(f"/apps/{_segment(app_name)}/acm", "POST")

    # ------------------------------------------------------------------
    # Dynos
    # ------------------------------------------------------------------

    async def get_app_dynos(self, app_name: str) -> Result[list[Dyno]]:
        payload, headers = await self._fetch_json(f"/apps/{_segment(app_name)}/dynos")
        return Result(data=[Dyno.model_validate(item) for item in payload], headers=headers)

    async def restart_app_dynos(
        self, app_name: str, dyno_name: str | None = None,
    ) -> Result[bool]:
        """Restart every dyno of the app, or only `dyno_name`."""
        route = f"/apps/{_segment(app_name)}/dynos"
        if dyno_name:
            route += f"/{_segment(dyno_name)}"
        return await self._fetch_bool(route, "DELETE")

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_apps(
        self,
        filters: SearchFilters | None = None,
        pipeline_name: str | None = None,
    ) -> Result[list[App]]:
        """Apps (optionally only a pipeline's production apps) matching `filters`."""
        return await self._search.search(filters, pipeline_name)
