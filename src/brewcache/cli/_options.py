"""Options shared by the commands that talk to the backends."""

from __future__ import annotations

from typing import Any

import typer

from brewcache.config import Settings, settings

DatabaseUrlOption = typer.Option(
    None,
    "--database-url",
    "-d",
    help="Database URL (defaults to DATABASE_URL)",
)

BackendOption = typer.Option(
    None,
    "--backend",
    "-b",
    help="Cache backend: redis, memory",
)


def resolve_settings(database_url: str | None, backend: str | None) -> Settings:
    """Apply command-line overrides to the process settings."""
    update: dict[str, Any] = {}
    if database_url:
        update["database_url"] = database_url
    if backend:
        if backend not in ("redis", "memory"):
            raise typer.BadParameter(f"unknown cache backend: {backend}", param_hint="--backend")
        update["cache_backend"] = backend
    return settings.model_copy(update=update)
