"""CLI command for creating the coffee table and seeding the menu.

Usage:
    brewcache init-db
    brewcache init-db --database-url sqlite+aiosqlite:///springbucks.db
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from brewcache.cli._options import DatabaseUrlOption, resolve_settings
from brewcache.errors import BrewCacheError
from brewcache.observability.logging import LogContext
from brewcache.persistence.db import (
    create_engine,
    create_session_factory,
    init_db,
    session_context,
)
from brewcache.persistence.repositories import seed_menu
from brewcache.persistence.tables import check_currency


def init_database(
    database_url: str | None = DatabaseUrlOption,
    seed: bool = typer.Option(
        True,
        "--seed/--no-seed",
        help="Insert the sample menu",
    ),
) -> None:
    """Create the coffee table and optionally seed the sample menu."""
    console = Console()
    config = resolve_settings(database_url, None)

    async def run() -> int:
        check_currency(config.currency)
        engine = create_engine(config.database_url, config=config)
        try:
            await init_db(engine)
            if not seed:
                return 0
            async with session_context(create_session_factory(engine)) as session:
                return await seed_menu(session, config.currency)
        finally:
            await engine.dispose()

    try:
        with LogContext():
            inserted = asyncio.run(run())
    except BrewCacheError as exc:
        console.print(f"[red]Initialization failed:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    console.print("[green]Tables ready[/green]")
    if seed:
        console.print(f"[blue]Seeded {inserted} coffee(s)[/blue]")
