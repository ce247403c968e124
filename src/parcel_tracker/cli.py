"""Command-line interface for Parcel Tracker."""

from __future__ import annotations

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from parcel_tracker import __version__
from parcel_tracker.models.output import TrackingResult
from parcel_tracker.utils.config import get_settings
from parcel_tracker.utils.logging import setup_logging


app = typer.Typer(
    name="parcel-tracker",
    help="Shipment tracking scraper driven by headless Chrome",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Helper Functions
# =============================================================================


def run_async(coro):
    """Run async coroutine in sync context."""
    return asyncio.run(coro)


def display_result(result: TrackingResult) -> None:
    """Display a tracking result as a table."""
    console.print(f"[bold]Courier:[/bold] {result.courier}")
    console.print(f"[bold]Status:[/bold] {result.status}\n")

    table = Table(title=f"Events: {len(result.events)}")
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Location", style="yellow", max_width=30)
    table.add_column("Description", style="white")

    for event in result.events:
        table.add_row(event.date, event.location, event.description)

    console.print(table)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold blue]parcel-tracker[/bold blue] v{__version__}")


@app.command()
def track(
    tracking_number: str = typer.Argument(..., help="Tracking number"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
    headless: bool = typer.Option(
        True, "--headless/--no-headless", help="Run headless"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Scrape tracking data for a single tracking number."""

    async def _track() -> TrackingResult:
        from parcel_tracker.services.tracker_service import TrackerService

        settings = get_settings()
        settings.browser.headless = headless
        service = TrackerService.from_settings(settings)

        await service.start()
        try:
            return await service.track(tracking_number)
        finally:
            await service.close()

    setup_logging(level="DEBUG" if verbose else "WARNING")

    if not tracking_number.strip():
        console.print("[red]Valid tracking number is required[/red]")
        raise typer.Exit(code=2)

    try:
        result = run_async(_track())
    except Exception as e:
        console.print(f"[red]Tracking failed:[/red] {e}")
        raise typer.Exit(code=1) from e

    if as_json:
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        display_result(result)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Listen address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Listen port"),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level"),
) -> None:
    """Run the HTTP API server."""
    import uvicorn

    settings = get_settings()
    level = log_level or settings.log_level
    settings.log_level = level
    setup_logging(level=level, json_format=settings.log_json)

    uvicorn.run(
        "parcel_tracker.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=level.lower(),
    )


if __name__ == "__main__":
    app()
