"""CLI command for dropping a coffee from the cache.

Usage:
    brewcache invalidate mocha
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from brewcache.bootstrap import open_service
from brewcache.cli._options import BackendOption, resolve_settings
from brewcache.errors import BrewCacheError
from brewcache.observability.logging import LogContext


def invalidate(
    name: str = typer.Argument(..., help="Coffee name"),
    backend: str | None = BackendOption,
) -> None:
    """Invalidate every cached coffee indexed under a name."""
    console = Console()
    config = resolve_settings(None, backend)

    async def run() -> int:
        async with open_service(config) as service:
            return await service.invalidate_by_name(name)

    try:
        with LogContext():
            removed = asyncio.run(run())
    except BrewCacheError as exc:
        console.print(f"[red]Invalidation failed:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    console.print(f"[green]Removed {removed} cached coffee(s)[/green] for {name}")
