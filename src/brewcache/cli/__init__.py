"""CLI commands for brewcache.

Provides command-line interface using Typer:
- brewcache init-db: Create tables and seed the sample menu
- brewcache menu: List the coffees in the primary store
- brewcache lookup: Look a coffee up through the cache
- brewcache invalidate: Drop a coffee from the cache
- brewcache health: Check both backends

Usage:
    brewcache --help
    brewcache init-db
    brewcache lookup mocha --repeat 5
    brewcache invalidate mocha
"""

import typer

from brewcache.cli.health_cmd import health
from brewcache.cli.init_db_cmd import init_database
from brewcache.cli.invalidate_cmd import invalidate
from brewcache.cli.lookup_cmd import lookup
from brewcache.cli.menu_cmd import menu
from brewcache.config import settings
from brewcache.observability.logging import configure_logging

# Main CLI application
app = typer.Typer(
    name="brewcache",
    help="brewcache: read-through cache-aside lookups for the coffee menu",
    no_args_is_help=True,
)

# Add subcommands
app.command("init-db")(init_database)
app.command("menu")(menu)
app.command("lookup")(lookup)
app.command("invalidate")(invalidate)
app.command("health")(health)


@app.callback()
def callback() -> None:
    """brewcache: read-through cache-aside lookups for the coffee menu."""
    configure_logging(json_format=settings.log_json, level=settings.log_level)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
