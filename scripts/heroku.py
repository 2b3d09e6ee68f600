"""Command line front-end for the Heroku client.

Usage:
    python -m scripts.heroku apps
    python -m scripts.heroku search --pipeline shop --env NODE_ENV='^production$'
    python -m scripts.heroku --dry search --field maintenance=false
    python -m scripts.heroku restart shop-api --dyno web.1
"""

from __future__ import annotations

import asyncio
import json
import re
import sys
from collections.abc import Awaitable, Callable
from typing import Any

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from config.settings import get_settings
from observability.logger import setup_logging
from protocols.heroku import HerokuAPI
from providers.errors import HerokuAPIError, HerokuConfigError
from providers.factory import build_heroku_api
from providers.terminal_printer import TerminalPrinter
from schemas.filters import SearchFilters


def _split_pairs(pairs: tuple[str, ...], option: str) -> list[tuple[str, str]]:
    out: list[tuple[str, str]] = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint=option)
        out.append((key, value))
    return out


def _json_or_text(value: str) -> Any:
    """`false` -> False, `123` -> 123, `"123"` -> "123", `{"id": ...}` -> dict.

    Text that is not valid JSON stays a string.
    """
    try:
        return json.loads(value)
    except ValueError:
        return value


def _run(ctx: click.Context, action: Callable[[HerokuAPI, TerminalPrinter], Awaitable[None]]) -> None:
    settings = get_settings()
    console = Console()

    async def _main() -> None:
        api = build_heroku_api(settings, dry=ctx.obj["dry"] or None)
        try:
            await action(api, TerminalPrinter(console))
        finally:
            await api.aclose()

    try:
        asyncio.run(_main())
    except (HerokuAPIError, HerokuConfigError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)


@click.group("heroku")
@click.option("--dry", is_flag=True, help="Use the in-memory sample platform (no API calls).")
@click.option("--log-format", type=click.Choice(["json", "console"]), default=None)
@click.pass_context
def cli(ctx: click.Context, dry: bool, log_format: str | None) -> None:
    """Inspect and operate Heroku apps, pipelines and dynos."""
    settings = get_settings()
    setup_logging(level=settings.log_level, fmt=log_format or settings.log_format)
    ctx.ensure_object(dict)
    ctx.obj["dry"] = dry


@cli.command("apps")
@click.pass_context
def list_apps(ctx: click.Context) -> None:
    """List every app visible to the API key."""

    async def action(api: HerokuAPI, printer: TerminalPrinter) -> None:
        result = await api.get_apps()
        printer.print_apps(result.data)

    _run(ctx, action)


@cli.command("search")
@click.option("--pipeline", "-p", default=None, help="Only production apps of this pipeline.")
@click.option(
    "--field", "-f", "fields", multiple=True,
    help='Exact app field match, KEY=VALUE. VALUE is JSON-decoded, so quote it to force a string: name=\'"123"\'.',
)
@click.option("--env", "-e", "envs", multiple=True, help="Config var pattern, KEY=REGEX.")
@click.pass_context
def search(ctx: click.Context, pipeline: str | None, fields: tuple[str, ...], envs: tuple[str, ...]) -> None:
    """Search apps by field values and config var patterns."""
    try:
        filters = SearchFilters(
            app={k: _json_or_text(v) for k, v in _split_pairs(fields, "--field")},
            env_vars={k: re.compile(v) for k, v in _split_pairs(envs, "--env")},
        )
    except (re.error, ValidationError) as e:
        raise click.BadParameter(str(e)) from e

    async def action(api: HerokuAPI, printer: TerminalPrinter) -> None:
        result = await api.search_apps(filters, pipeline_name=pipeline)
        title = f"Apps in {pipeline} (production)" if pipeline else "Apps"
        printer.print_apps(result.data, title=title)

    _run(ctx, action)


@cli.command("env")
@click.argument("app_name")
@click.pass_context
def show_env(ctx: click.Context, app_name: str) -> None:
    """Show an app's config vars."""

    async def action(api: HerokuAPI, printer: TerminalPrinter) -> None:
        result = await api.get_app_env_vars(app_name)
        printer.print_env_vars(app_name, result.data)

    _run(ctx, action)


@cli.command("set-env")
@click.argument("app_name")
@click.argument("pairs", nargs=-1, required=True)
@click.pass_context
def set_env(ctx: click.Context, app_name: str, pairs: tuple[str, ...]) -> None:
    """Set config vars (KEY=VALUE); an empty value (KEY=) unsets the var."""
    updates = {k: (v if v != "" else None) for k, v in _split_pairs(pairs, "PAIRS")}

    async def action(api: HerokuAPI, printer: TerminalPrinter) -> None:
        result = await api.update_app_env_vars(app_name, updates)
        if result.data:
            printer.console.print(f"[green]Updated {len(updates)} var(s) on {app_name}.[/green]")

    _run(ctx, action)


@cli.command("domains")
@click.argument("app_name")
@click.pass_context
def list_domains(ctx: click.Context, app_name: str) -> None:
    """List an app's domains."""

    async def action(api: HerokuAPI, printer: TerminalPrinter) -> None:
        result = await api.get_app_domains(app_name)
        printer.print_domains(app_name, result.data)

    _run(ctx, action)


@cli.command("dynos")
@click.argument("app_name")
@click.pass_context
def list_dynos(ctx: click.Context, app_name: str) -> None:
    """List an app's dynos."""

    async def action(api: HerokuAPI, printer: TerminalPrinter) -> None:
        result = await api.get_app_dynos(app_name)
        printer.print_dynos(app_name, result.data)

    _run(ctx, action)


@cli.command("restart")
@click.argument("app_name")
@click.option("--dyno", "-d", default=None, help="Restart a single dyno, e.g. web.1.")
@click.pass_context
def restart(ctx: click.Context, app_name: str, dyno: str | None) -> None:
    """Restart all dynos of an app, or one dyno."""

    async def action(api: HerokuAPI, printer: TerminalPrinter) -> None:
        result = await api.restart_app_dynos(app_name, dyno_name=dyno)
        target = dyno or "all dynos"
        if result.data:
            printer.console.print(f"[green]Restarting {target} on {app_name}.[/green]")

    _run(ctx, action)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
