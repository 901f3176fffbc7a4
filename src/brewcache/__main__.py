"""Main entry point for the brewcache CLI.

Usage:
    python -m brewcache --help
    brewcache --help  # If installed via pip/uv
"""

from brewcache.cli import main

if __name__ == "__main__":
    main()
