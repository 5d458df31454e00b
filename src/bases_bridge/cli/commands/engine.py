"""CLI commands for the live evaluation engine setting."""

import typer

from bases_bridge.bases.snapshot import EngineState
from bases_bridge.cli.app import app
from bases_bridge.cli.commands.command_utils import print_json
from bases_bridge.config import ConfigManager
from bases_bridge.schemas import EngineStatusResponse

engine_app = typer.Typer(help="Show or toggle the live evaluation engine")
app.add_typer(engine_app, name="engine")


def _print_status(enabled: bool) -> None:
    # Snapshots only live inside a running API process, so the CLI reports an empty cache.
    print_json(EngineStatusResponse.model_validate(EngineState(enabled=enabled).describe()))


@engine_app.command()
def status():
    """Show whether queries with evaluate=true are served from snapshots."""
    _print_status(ConfigManager().config.engine_enabled)


@engine_app.command()
def on():
    """Enable the live evaluation engine."""
    _print_status(ConfigManager().set_engine_enabled(True).engine_enabled)


@engine_app.command()
def off():
    """Disable the live evaluation engine."""
    _print_status(ConfigManager().set_engine_enabled(False).engine_enabled)
