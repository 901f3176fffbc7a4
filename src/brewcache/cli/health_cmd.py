"""CLI command for checking backend connectivity.

Usage:
    brewcache health
    brewcache health --backend memory
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from brewcache.bootstrap import create_cache_store
from brewcache.cache.redis import close_redis
from brewcache.cli._options import BackendOption, DatabaseUrlOption, resolve_settings
from brewcache.observability.logging import LogContext
from brewcache.persistence.db import create_engine, create_session_factory, health_check


def health(
    database_url: str | None = DatabaseUrlOption,
    backend: str | None = BackendOption,
) -> None:
    """Report whether the primary store and the cache answer."""
    console = Console()
    config = resolve_settings(database_url, backend)

    async def run() -> dict[str, bool]:
        engine = create_engine(config.database_url, config=config)
        store = await create_cache_store(config)
        try:
            return {
                "primary": await health_check(create_session_factory(engine)),
                "cache": await store.ping(),
            }
        finally:
            await store.close()
            if config.cache_backend == "redis":
                await close_redis()
            await engine.dispose()

    with LogContext():
        status = asyncio.run(run())

    for component, ok in status.items():
        marker = "[green]ok[/green]" if ok else "[red]unreachable[/red]"
        console.print(f"{component}: {marker}")

    if not all(status.values()):
        raise typer.Exit(code=1)
