"""In-memory Heroku for tests and offline demos. Implements HerokuAPI protocol."""

from __future__ import annotations

from uuid import uuid4

from observability.logger import get_logger
from providers.errors import HerokuAPIError
from schemas.apps import App
from schemas.common import NOT_FOUND_ID, Common
from schemas.domains import Domain
from schemas.dynos import Dyno, DynoState
from schemas.filters import SearchFilters
from schemas.pipelines import Coupling, CouplingStage, Pipeline, ResourceRef
from schemas.results import Result
from search.engine import AppSearchEngine

log = get_logger(__name__)

_REGIONS = {
    "us": Common(id="59accabd-516d-4f0e-83e6-6e3757701145", name="us"),
    "eu": Common(id="ed30241c-ed8c-4bb6-9714-61953675d0b4", name="eu"),
}

_SAMPLE_APPS: list[dict] = [
    {"name": "shop-api", "region": "us", "env": {"NODE_ENV": "production", "DB_POOL": "20"}},
    {"name": "shop-web", "region": "us", "env": {"NODE_ENV": "production"}},
    {"name": "shop-api-staging", "region": "us", "env": {"NODE_ENV": "staging", "DB_POOL": "5"}},
    {"name": "billing-eu", "region": "eu", "env": {"NODE_ENV": "production", "VAT": "on"}},
    {"name": "sandbox", "region": "eu", "env": {}},
]


def _missing(resource: str, name: str, method: str, route: str) -> HerokuAPIError:
    return HerokuAPIError(
        status_code=404,
        reason="Not Found",
        method=method,
        route=route,
        error_id=NOT_FOUND_ID,
        message=f"Couldn't find that {resource}: {name}",
    )


class DummyHeroku:
    """Deterministic stand-in for `HerokuClient` backed by plain dicts.

    `calls` records every operation as (operation, argument) so tests can
    assert on how many remote lookups a composite operation would make.
    """

    provider_name: str = "dummy"

    def __init__(
        self,
        apps: list[App] | None = None,
        *,
        pipelines: list[Pipeline] | None = None,
        couplings: list[Coupling] | None = None,
        env_vars: dict[str, dict[str, str]] | None = None,
        domains: dict[str, list[Domain]] | None = None,
        dynos: dict[str, list[Dyno]] | None = None,
    ) -> None:
        self.apps: list[App] = list(apps or [])
        self.pipelines: list[Pipeline] = list(pipelines or [])
        self.couplings: list[Coupling] = list(couplings or [])
        self.env_vars: dict[str, dict[str, str]] = {k: dict(v) for k, v in (env_vars or {}).items()}
        self.domains: dict[str, list[Domain]] = {k: list(v) for k, v in (domains or {}).items()}
        self.dynos: dict[str, list[Dyno]] = {k: list(v) for k, v in (dynos or {}).items()}
        self.buildpacks: dict[str, list[str]] = {}
        self.calls: list[tuple[str, str]] = []
        self._search = AppSearchEngine(self)

    @classmethod
    def with_sample_data(cls) -> DummyHeroku:
        """A small shop: two production apps and one staging app in `shop` pipeline."""
        apps: list[App] = []
        env_vars: dict[str, dict[str, str]] = {}
        dynos: dict[str, list[Dyno]] = {}
        for sample in _SAMPLE_APPS:
            app = App(
                id=str(uuid4()),
                name=sample["name"],
                region=_REGIONS[sample["region"]],
                stack=Common(id="heroku-22", name="heroku-22"),
                web_url=f"https://{sample['name']}.herokuapp.com/",
                maintenance=False,
            )
            apps.append(app)
            env_vars[app.name] = dict(sample["env"])
            dynos[app.name] = [
                Dyno(id=str(uuid4()), name="web.1", type="web", command="npm start",
                     size="standard-1x", state=DynoState.UP),
            ]

        pipeline = Pipeline(id=str(uuid4()), name="shop")
        by_name = {app.name: app for app in apps}
        stages = {
            "shop-api": CouplingStage.PRODUCTION,
            "shop-web": CouplingStage.PRODUCTION,
            "shop-api-staging": CouplingStage.STAGING,
        }
        couplings = [
            Coupling(
                id=str(uuid4()),
                app=ResourceRef(id=by_name[name].id),
                pipeline=ResourceRef(id=pipeline.id),
                stage=stage,
            )
            for name, stage in stages.items()
        ]
        return cls(apps, pipelines=[pipeline], couplings=couplings, env_vars=env_vars, dynos=dynos)

    async def __aenter__(self) -> DummyHeroku:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        return None

    def _find_app(self, app_name: str) -> App | None:
        return next((a for a in self.apps if a.name == app_name or a.id == app_name), None)

    def _require_app(self, app_name: str, method: str, route: str) -> App:
        app = self._find_app(app_name)
        if app is None:
            raise _missing("app", app_name, method, route)
        return app

    def _find_pipeline(self, pipeline_name: str) -> Pipeline | None:
        return next(
            (p for p in self.pipelines if p.name == pipeline_name or p.id == pipeline_name), None,
        )

    # --- Apps ---

    async def get_apps(self) -> Result[list[App]]:
        self.calls.append(("get_apps", ""))
        return Result(data=list(self.apps))

    async def get_app(self, app_name: str) -> Result[App | None]:
        self.calls.append(("get_app", app_name))
        return Result(data=self._find_app(app_name))

    async def create_app(
        self, app_name: str, *, region: str | None = None, team: str | None = None,
    ) -> Result[App]:
        self.calls.append(("create_app", app_name))
        if self._find_app(app_name) is not None:
            raise HerokuAPIError(
                status_code=422,
                reason="Unprocessable Entity",
                method="POST",
                route="/teams/apps" if team else "/apps",
                error_id="invalid_params",
                message="Name is already taken",
            )
        app = App(
            id=str(uuid4()),
            name=app_name,
            region=_REGIONS.get(region or "us", Common(id=region or "", name=region)),
            team=Common(id=team, name=team) if team else None,
        )
        self.apps.append(app)
        self.env_vars[app.name] = {}
        return Result(data=app)

    async def update_app_buildpacks(self, app_name: str, buildpacks: list[str]) -> Result[bool]:
        self.calls.append(("update_app_buildpacks", app_name))
        app = self._require_app(app_name, "PUT", f"/apps/{app_name}/buildpack-installations")
        self.buildpacks[app.name] = list(buildpacks)
        return Result(data=True)

    # --- Pipelines ---

    async def get_pipeline(self, pipeline_name: str) -> Result[Pipeline | None]:
        self.calls.append(("get_pipeline", pipeline_name))
        return Result(data=self._find_pipeline(pipeline_name))

    async def get_pipeline_couplings(self, pipeline_id: str) -> Result[list[Coupling]]:
        self.calls.append(("get_pipeline_couplings", pipeline_id))
        return Result(data=[c for c in self.couplings if c.pipeline.id == pipeline_id])

    async def get_pipeline_apps(
        self, pipeline_name: str, stage: CouplingStage | None = None,
    ) -> Result[list[App]]:
        return await self._search.pipeline_apps(pipeline_name, stage=stage)

    async def add_app_to_pipeline(
        self, app_name: str, pipeline_name: str, stage: CouplingStage | str,
    ) -> Result[bool]:
        stage = CouplingStage(stage)
        found = await self.get_pipeline(pipeline_name)
        if found.data is None:
            return Result(data=False)
        self.calls.append(("add_app_to_pipeline", app_name))
        app = self._require_app(app_name, "POST", "/pipeline-couplings")
        self.couplings.append(
            Coupling(
                id=str(uuid4()),
                app=ResourceRef(id=app.id),
                pipeline=ResourceRef(id=found.data.id),
                stage=stage,
            )
        )
        return Result(data=True)

    # --- Config vars ---

    async def get_app_env_vars(self, app_name: str) -> Result[dict[str, str]]:
        self.calls.append(("get_app_env_vars", app_name))
        app = self._require_app(app_name, "GET", f"/apps/{app_name}/config-vars")
        return Result(data=dict(self.env_vars.get(app.name, {})))

    async def update_app_env_vars(
        self, app_name: str, env_vars: dict[str, str | None],
    ) -> Result[bool]:
        self.calls.append(("update_app_env_vars", app_name))
        app = self._require_app(app_name, "PATCH", f"/apps/{app_name}/config-vars")
        current = self.env_vars.setdefault(app.name, {})
        for key, value in env_vars.items():
            if value is None:
                current.pop(key, None)
            else:
                current[key] = value
        return Result(data=True)

    # --- Domains ---

    async def add_app_domain(
        self, app_name: str, hostname: str, *, sni_endpoint: str | None = None,
    ) -> Result[Domain]:
        self.calls.append(("add_app_domain", app_name))
        app = self._require_app(app_name, "POST", f"/apps/{app_name}/domains")
        domain = Domain(
            id=str(uuid4()),
            hostname=hostname,
            kind="custom",
            status="pending",
            cname=f"{hostname}.herokudns.com",
            app=Common(id=app.id, name=app.name),
            sni_endpoint=Common(id=sni_endpoint, name=sni_endpoint) if sni_endpoint else None,
        )
        self.domains.setdefault(app.name, []).append(domain)
        return Result(data=domain)

    async def get_app_domains(self, app_name: str) -> Result[list[Domain]]:
        self.calls.append(("get_app_domains", app_name))
        app = self._require_app(app_name, "GET", f"/apps/{app_name}/domains")
        return Result(data=list(self.domains.get(app.name, [])))

    async def enable_app_auto_certs(self, app_name: str) -> Result[bool]:
        self.calls.append(("enable_app_auto_certs", app_name))
        app = self._require_app(app_name, "POST", f"/apps/{app_name}/acm")
        index = self.apps.index(app)
        self.apps[index] = app.model_copy(update={"acm": True})
        return Result(data=True)

    # --- Dynos ---

    async def get_app_dynos(self, app_name: str) -> Result[list[Dyno]]:
        self.calls.append(("get_app_dynos", app_name))
        app = self._require_app(app_name, "GET", f"/apps/{app_name}/dynos")
        return Result(data=list(self.dynos.get(app.name, [])))

    async def restart_app_dynos(self, app_name: str, dyno_name: str | None = None) -> Result[bool]:
        self.calls.append(("restart_app_dynos", app_name))
        route = f"/apps/{app_name}/dynos" + (f"/{dyno_name}" if dyno_name else "")
        app = self._require_app(app_name, "DELETE", route)
        dynos = self.dynos.get(app.name, [])
        if dyno_name and not any(d.name == dyno_name for d in dynos):
            raise _missing("dyno", dyno_name, "DELETE", route)
        self.dynos[app.name] = [
            d.model_copy(update={"state": DynoState.STARTING})
            if not dyno_name or d.name == dyno_name else d
            for d in dynos
        ]
        log.info("dummy.dynos.restarted", app=app.name, dyno=dyno_name)
        return Result(data=True)

    # --- Search ---

    async def search_apps(
        self, filters: SearchFilters | None = None, pipeline_name: str | None = None,
    ) -> Result[list[App]]:
        return await self._search.search(filters, pipeline_name)

    def count_calls(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)
