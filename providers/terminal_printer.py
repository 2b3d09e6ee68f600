from __future__ import annotations

from rich.console import Console
from rich.table import Table

from schemas.apps import App
from schemas.domains import Domain
from schemas.dynos import Dyno

_STATE_COLORS = {
    "up": "bold green",
    "starting": "bold yellow",
    "idle": "dim",
    "down": "bold red",
    "crashed": "bold white on dark_red",
}


def _ref_name(ref) -> str:
    if ref is None:
        return "-"
    return ref.name or ref.id or "-"


class TerminalPrinter:
    """Renders API records as Rich tables."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def print_apps(self, apps: list[App], title: str = "Apps") -> None:
        if not apps:
            self.console.print("[dim]No apps matched.[/dim]")
            return

        table = Table(title=title)
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Region")
        table.add_column("Stack")
        table.add_column("Team")
        table.add_column("Maintenance", justify="center")

        for app in apps:
            table.add_row(
                app.name,
                _ref_name(app.region),
                _ref_name(app.stack),
                _ref_name(app.team),
                "yes" if app.maintenance else "no",
            )

        self.console.print(table)

    def print_env_vars(self, app_name: str, env_vars: dict[str, str]) -> None:
        table = Table(title=f"Config vars: {app_name}")
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Value")
        for key in sorted(env_vars):
            table.add_row(key, env_vars[key])
        self.console.print(table)

    def print_domains(self, app_name: str, domains: list[Domain]) -> None:
        table = Table(title=f"Domains: {app_name}")
        table.add_column("Hostname", style="cyan", no_wrap=True)
        table.add_column("Kind")
        table.add_column("Status")
        table.add_column("ACM")
        for d in domains:
            table.add_row(d.hostname, d.kind, d.status or "-", d.acm_status or "-")
        self.console.print(table)

    def print_dynos(self, app_name: str, dynos: list[Dyno]) -> None:
        table = Table(title=f"Dynos: {app_name}")
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Size")
        table.add_column("State")
        table.add_column("Command")
        for d in dynos:
            state = d.state.value
            color = _STATE_COLORS.get(state, "white")
            size = d.size.value if hasattr(d.size, "value") else str(d.size)
            table.add_row(d.name or d.id, size, f"[{color}]{state}[/{color}]", d.command)
        self.console.print(table)
