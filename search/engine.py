"""Composite app search: candidate listing, pipeline scoping and filtering."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from observability.logger import get_logger
from schemas.pipelines import CouplingStage
from schemas.results import Result
from search.matcher import matches_app_fields, matches_env_vars

if TYPE_CHECKING:
    from protocols.heroku import HerokuAPI
    from schemas.apps import App
    from schemas.filters import SearchFilters

log = get_logger(__name__)


class AppSearchEngine:
    """Builds search results out of the primitive `HerokuAPI` calls.

    Steps:
    1. Candidates: every app, or the apps coupled to a pipeline at one stage
    2. Exact-match filter on app fields
    3. Pattern filter on config vars (one lookup per surviving candidate)
    """

    def __init__(self, api: HerokuAPI) -> None:
        self.api = api

    async def pipeline_apps(
        self,
        pipeline_name: str,
        stage: CouplingStage | str | None = None,
    ) -> Result[list[App]]:
        """Apps coupled to `pipeline_name`, in coupling order.

        An unknown pipeline yields an empty list. `stage=None` keeps every stage.
        """
        stage = CouplingStage(stage) if stage is not None else None
        found = await self.api.get_pipeline(pipeline_name)
        pipeline = found.data
        if pipeline is None:
            log.info("search.pipeline.not_found", pipeline=pipeline_name)
            return Result(data=[], headers=found.headers)

        couplings, apps = await asyncio.gather(
            self.api.get_pipeline_couplings(pipeline.id),
            self.api.get_apps(),
        )

        apps_by_id: dict[str, App] = {}
        for app in apps.data:
            apps_by_id.setdefault(app.id, app)

        matched: list[App] = []
        for coupling in couplings.data:
            if stage is not None and coupling.stage != stage:
                continue
            app = apps_by_id.get(coupling.app.id)
            if app is not None:
                matched.append(app)

        log.info(
            "search.pipeline.apps",
            pipeline=pipeline_name,
            stage=stage.value if stage else None,
            couplings=len(couplings.data),
            matched=len(matched),
        )
        return Result(data=matched, headers=apps.headers)

    async def search(
        self,
        filters: SearchFilters | None = None,
        pipeline_name: str | None = None,
        *,
        stage: CouplingStage = CouplingStage.PRODUCTION,
    ) -> Result[list[App]]:
        """Ordered subsequence of candidates satisfying every filter.

        Config var lookups run one at a time in candidate order; a failed
        lookup aborts the whole search.
        """
        if pipeline_name:
            candidates = await self.pipeline_apps(pipeline_name, stage=stage)
        else:
            candidates = await self.api.get_apps()

        headers = candidates.headers
        app_criteria = filters.app if filters else None
        env_patterns = filters.env_vars if filters else None
        env_lookups = 0
        matched: list[App] = []

        for app in candidates.data:
            if not matches_app_fields(app, app_criteria):
                continue

            if env_patterns:
                env = await self.api.get_app_env_vars(app.name)
                env_lookups += 1
                headers = env.headers
                if not matches_env_vars(env.data, env_patterns):
                    continue

            matched.append(app)

        log.info(
            "search.done",
            kind=filters.kind if filters else "none",
            pipeline=pipeline_name,
            candidates=len(candidates.data),
            env_lookups=env_lookups,
            matched=len(matched),
        )
        return Result(data=matched, headers=headers)
