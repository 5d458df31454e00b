"""Main CLI entry point for bases-bridge."""  # pragma: no cover

from bases_bridge.cli.app import app  # pragma: no cover

# Register commands
from bases_bridge.cli.commands import bases, engine, search  # noqa: F401  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
