"""CLI command for listing the coffees in the primary store.

Usage:
    brewcache menu
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from brewcache.cli._options import DatabaseUrlOption, resolve_settings
from brewcache.core.model import Coffee
from brewcache.errors import BrewCacheError
from brewcache.observability.logging import LogContext
from brewcache.persistence.db import create_engine, create_session_factory, session_context
from brewcache.persistence.repositories import CoffeeRepository
from brewcache.persistence.tables import check_currency


def menu(database_url: str | None = DatabaseUrlOption) -> None:
    """List every coffee, bypassing the cache."""
    console = Console()
    config = resolve_settings(database_url, None)

    async def run() -> list[Coffee]:
        check_currency(config.currency)
        engine = create_engine(config.database_url, config=config)
        try:
            async with session_context(create_session_factory(engine)) as session:
                return await CoffeeRepository(session).list_all()
        finally:
            await engine.dispose()

    try:
        with LogContext():
            coffees = asyncio.run(run())
    except BrewCacheError as exc:
        console.print(f"[red]Menu failed:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    table = Table(title="Menu")
    table.add_column("Id", justify="right")
    table.add_column("Name")
    table.add_column("Price")
    for coffee in coffees:
        table.add_row(
            str(coffee.id),
            coffee.name,
            str(coffee.price) if coffee.price is not None else "-",
        )
    console.print(table)
