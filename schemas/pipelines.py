"""Pipeline and pipeline-coupling records."""

from __future__ import annotations

from enum import Enum

from schemas.common import Common, HerokuRecord


class CouplingStage(str, Enum):
    """Stages an app can occupy inside a pipeline."""

    TEST = "test"
    REVIEW = "review"
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class PipelineOwner(HerokuRecord):
    id: str = ""
    type: str = ""


class Pipeline(Common):
    created_at: str | None = None
    owner: PipelineOwner | None = None
    updated_at: str | None = None


class ResourceRef(HerokuRecord):
    id: str


class Coupling(HerokuRecord):
    """Join record between an app and a pipeline."""

    id: str = ""
    app: ResourceRef
    pipeline: ResourceRef
    stage: CouplingStage
    created_at: str | None = None
    updated_at: str | None = None
