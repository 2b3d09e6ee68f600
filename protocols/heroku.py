"""Heroku API protocol: structural subtyping, no ABC needed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from schemas.apps import App
    from schemas.domains import Domain
    from schemas.dynos import Dyno
    from schemas.filters import SearchFilters
    from schemas.pipelines import Coupling, CouplingStage, Pipeline
    from schemas.results import Result


@runtime_checkable
class HerokuAPI(Protocol):
    """Any class exposing the Heroku platform operations.

    Implemented by the live `HerokuClient` and the in-memory `DummyHeroku`.
    """

    async def get_apps(self) -> Result[list[App]]: ...

    async def get_app(self, app_name: str) -> Result[App | None]: ...

    async def create_app(
        self, app_name: str, *, region: str | None = None, team: str | None = None,
    ) -> Result[App]: ...

    async def update_app_buildpacks(
        self, app_name: str, buildpacks: list[str],
    ) -> Result[bool]: ...

    async def get_pipeline(self, pipeline_name: str) -> Result[Pipeline | None]: ...

    async def get_pipeline_couplings(self, pipeline_id: str) -> Result[list[Coupling]]: ...

    async def get_pipeline_apps(
        self, pipeline_name: str, stage: CouplingStage | None = None,
    ) -> Result[list[App]]: ...

    async def add_app_to_pipeline(
        self, app_name: str, pipeline_name: str, stage: CouplingStage,
    ) -> Result[bool]: ...

    async def get_app_env_vars(self, app_name: str) -> Result[dict[str, str]]: ...

    async def update_app_env_vars(
        self, app_name: str, env_vars: dict[str, str | None],
    ) -> Result[bool]: ...

    async def add_app_domain(
        self, app_name: str, hostname: str, *, sni_endpoint: str | None = None,
    ) -> Result[Domain]: ...

    async def get_app_domains(self, app_name: str) -> Result[list[Domain]]: ...

    async def enable_app_auto_certs(self, app_name: str) -> Result[bool]: ...

    async def get_app_dynos(self, app_name: str) -> Result[list[Dyno]]: ...

    async def restart_app_dynos(
        self, app_name: str, dyno_name: str | None = None,
    ) -> Result[bool]: ...

    async def search_apps(
        self, filters: SearchFilters | None = None, pipeline_name: str | None = None,
    ) -> Result[list[App]]: ...

    async def aclose(self) -> None: ...
