import os
from typing import Optional

import typer

from bases_bridge.config import ConfigManager, init_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import bases_bridge

        typer.echo(f"bases-bridge version: {bases_bridge.__version__}")
        raise typer.Exit()


app = typer.Typer(name="bases-bridge")


@app.callback()
def app_callback(
    ctx: typer.Context,
    vault: Optional[str] = typer.Option(
        None,
        "--vault",
        help="Vault root folder (overrides vault_path from the config file)",
        envvar="OBSIDIAN_VAULT",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """bases-bridge - query and search Obsidian Bases from the command line."""

    # The config layer picks the vault up from the environment
    if vault:
        os.environ["BASES_BRIDGE_VAULT_PATH"] = vault

    if not version and ctx.invoked_subcommand is not None:
        init_logging(ConfigManager().config)
