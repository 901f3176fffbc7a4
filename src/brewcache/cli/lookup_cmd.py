"""CLI command for looking coffees up through the cache.

Repeated lookups show the cache-aside flow: the first one reads the
primary store and fills the cache, the following ones are cache hits.

Usage:
    brewcache lookup mocha
    brewcache lookup mocha --repeat 5 --backend memory --metrics
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from brewcache.bootstrap import open_service
from brewcache.cli._options import BackendOption, DatabaseUrlOption, resolve_settings
from brewcache.errors import BrewCacheError
from brewcache.observability.logging import LogContext
from brewcache.observability.metrics import get_metrics
from brewcache.service.coordinator import LookupResult


def lookup(
    name: str = typer.Argument(..., help="Coffee name"),
    repeat: int = typer.Option(
        1,
        "--repeat",
        "-n",
        min=1,
        help="Number of lookups to run",
    ),
    database_url: str | None = DatabaseUrlOption,
    backend: str | None = BackendOption,
    show_metrics: bool = typer.Option(
        False,
        "--metrics",
        help="Print the Prometheus exposition after the lookups",
    ),
) -> None:
    """Look a coffee up and report where each result came from."""
    console = Console()
    config = resolve_settings(database_url, backend)

    async def run() -> list[LookupResult | None]:
        async with open_service(config) as service:
            return [await service.lookup(name) for _ in range(repeat)]

    try:
        with LogContext() as ctx:
            results = asyncio.run(run())
    except BrewCacheError as exc:
        console.print(f"[red]Lookup failed:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    if results[0] is None:
        console.print(f"[yellow]No coffee named[/yellow] {name}")
        raise typer.Exit(code=1)

    table = Table(title=f"Lookups for {name!r}", caption=f"correlation id {ctx.correlation_id}")
    table.add_column("#", justify="right")
    table.add_column("Source")
    table.add_column("Id", justify="right")
    table.add_column("Price")
    table.add_column("Updated")
    for i, result in enumerate(results, start=1):
        if result is None:
            table.add_row(str(i), "-", "-", "-", "-")
            continue
        coffee = result.coffee
        table.add_row(
            str(i),
            result.source,
            str(coffee.id),
            str(coffee.price) if coffee.price is not None else "-",
            coffee.update_time.isoformat() if coffee.update_time else "-",
        )
    console.print(table)

    if show_metrics:
        console.print(get_metrics().generate_latest().decode("utf-8"), markup=False)
