"""zonehunt CLI -- powered by Typer."""

from __future__ import annotations

import os
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from zonehunt.compute import ComputeManager
from zonehunt.config import Settings, load_settings, settings_rows
from zonehunt.exceptions import ZonehuntError
from zonehunt.reporter import Reporter
from zonehunt.scheduler import Scheduler

app = typer.Typer(
    name="zonehunt",
    help="Keep trying to launch an OCI instance across availability domains until one has capacity.",
    add_completion=False,
)
console = Console()


def _load(env_file: Optional[str], overrides: dict[str, str] | None = None) -> Settings:
    environ = dict(os.environ)
    environ.update({k: v for k, v in (overrides or {}).items() if v})
    return load_settings(environ, env_file=env_file)


@app.command()
def run(
    env_file: Optional[str] = typer.Option(None, "--env-file", "-e", help="Read unset variables from this .env file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="debug, info, warning or error (overrides LOG_LEVEL)"),
    create_interval: Optional[int] = typer.Option(None, "--create-interval", min=1, help="Seconds between passes (overrides CREATE_INTERVAL_SECONDS)"),
    zone_interval: Optional[int] = typer.Option(None, "--zone-interval", min=1, help="Initial seconds between zones (overrides CREATE_ZONE_SECONDS)"),
) -> None:
    """Retry launching the configured instance until it succeeds."""
    try:
        settings = _load(env_file, {
            "LOG_LEVEL": log_level,
            "CREATE_INTERVAL_SECONDS": str(create_interval) if create_interval else None,
            "CREATE_ZONE_SECONDS": str(zone_interval) if zone_interval else None,
        })
        reporter = Reporter(settings.log_level, console=console)
        manager = ComputeManager.from_settings(settings)
        zones = manager.list_zones()
    except ZonehuntError as e:
        console.print(f"[red bold]Error:[/red bold] {e}")
        raise typer.Exit(code=1)

    reporter.debug(f"Found {len(zones)} availability domains: {', '.join(z.name for z in zones)}")
    scheduler = Scheduler(settings, zones, manager, reporter)
    result = scheduler.run()

    launched = result.success
    console.print(
        f"[green bold]Generated instance in availability zone {launched.zone.id}, "
        f"took {scheduler.elapsed()}[/green bold]"
    )
    if launched.instance_id:
        console.print(f"Instance: [bold]{launched.instance_id}[/bold] ({launched.lifecycle_state})")


@app.command()
def zones(env_file: Optional[str] = typer.Option(None, "--env-file", "-e", help="Read unset variables from this .env file")) -> None:
    """List the availability domains instances would be tried in."""
    try:
        settings = _load(env_file)
        found = ComputeManager.from_settings(settings).list_zones()
    except ZonehuntError as e:
        console.print(f"[red bold]Error:[/red bold] {e}")
        raise typer.Exit(code=1)

    table = Table(title=f"Availability domains ({settings.region})", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("OCID")
    for i, zone in enumerate(found, 1):
        table.add_row(str(i), zone.name, zone.id)
    console.print(table)


@app.command()
def config(env_file: Optional[str] = typer.Option(None, "--env-file", "-e", help="Read unset variables from this .env file")) -> None:
    """Validate the environment and show the resolved settings."""
    try:
        settings = _load(env_file)
    except ZonehuntError as e:
        console.print(f"[red bold]Error:[/red bold] {e}")
        raise typer.Exit(code=1)

    table = Table(title="Settings", show_header=True)
    table.add_column("Variable", style="cyan")
    table.add_column("Value")
    for env_var, value in settings_rows(settings):
        table.add_row(env_var, value)
    console.print(table)
    console.print("[green]Configuration is valid.[/green]")


if __name__ == "__main__":
    app()
