"""Picks the live or the in-memory Heroku provider from settings."""

from __future__ import annotations

from config.settings import Settings, get_settings
from observability.logger import get_logger
from protocols.heroku import HerokuAPI
from providers.dummy_heroku import DummyHeroku
from providers.heroku_client import HerokuClient

log = get_logger(__name__)


def build_heroku_api(settings: Settings | None = None, *, dry: bool | None = None) -> HerokuAPI:
    """Return `DummyHeroku` sample data in dry mode, otherwise a live `HerokuClient`.

    Raises:
        HerokuConfigError: live mode without an API key.
    """
    settings = settings or get_settings()
    use_dummy = settings.is_dry_run if dry is None else dry
    if use_dummy:
        log.info("heroku.provider.selected", provider="dummy")
        return DummyHeroku.with_sample_data()
    log.info("heroku.provider.selected", provider="heroku", base_url=settings.heroku_api_url)
    return HerokuClient(settings=settings)
