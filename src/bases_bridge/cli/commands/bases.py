"""CLI commands for listing, inspecting and querying bases."""

import json
from typing import Annotated, Any, List, Optional

import typer

from bases_bridge.api.routers.bases_router import schema_to_response
from bases_bridge.bases.planner import QueryPlanner
from bases_bridge.bases.snapshot import EngineState
from bases_bridge.bases.store import BaseSpecStore
from bases_bridge.cli.app import app
from bases_bridge.cli.commands.command_utils import print_json, run_command
from bases_bridge.config import BasesBridgeConfig, ConfigManager
from bases_bridge.schemas import BasesListResponse, QueryRequest, SortSpec
from bases_bridge.vault import FileVault


def _store(config: BasesBridgeConfig) -> BaseSpecStore:
    return BaseSpecStore(FileVault(config.vault_root), config_dir=config.config_dir)


def parse_filter_option(raw: Optional[str]) -> Any:
    """A filter given on the command line: a JSON object or list, else a statement."""
    if raw is None:
        return None
    text = raw.strip()
    if text.startswith(("{", "[")):
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise typer.BadParameter(f"Invalid JSON filter: {e}")
    return text


def parse_sort_option(values: Optional[List[str]]) -> Optional[List[SortSpec]]:
    """`prop` sorts ascending, `-prop` descending."""
    if not values:
        return None
    return [
        SortSpec(prop=v[1:], dir="desc") if v.startswith("-") else SortSpec(prop=v, dir="asc")
        for v in values
        if v.strip("-")
    ]


@app.command("list")
def list_bases():
    """List the .base files of the vault."""
    config = ConfigManager().config
    bases = run_command(_store(config).list_bases(), "list")
    print_json(BasesListResponse(bases=bases))


@app.command()
def schema(base: Annotated[str, typer.Argument(help="Base path, e.g. Projects/Tasks.base")]):
    """Show the properties, formulas and views of a base."""
    config = ConfigManager().config
    parsed = run_command(_store(config).load_schema(base), "schema")
    print_json(schema_to_response(parsed))


@app.command()
def query(
    base: Annotated[str, typer.Argument(help="Base path, e.g. Projects/Tasks.base")],
    view: Annotated[Optional[str], typer.Option(help="View name (defaults to the first view)")] = None,
    filter: Annotated[
        Optional[str], typer.Option("--filter", help="Extra filter: a statement or a JSON filter object")
    ] = None,
    sort: Annotated[
        Optional[List[str]], typer.Option("--sort", help="Sort key, prefix with '-' for descending")
    ] = None,
    limit: Annotated[Optional[int], typer.Option(help="Rows per page")] = None,
    page: Annotated[Optional[int], typer.Option(help="1-based page number")] = None,
    evaluate: Annotated[bool, typer.Option("--evaluate", help="Include formula values")] = False,
):
    """Query a base and print a page of rows.

    Examples:

    bases-bridge query Projects/Tasks.base --view Open --sort -priority

    bases-bridge query Tasks --filter 'status == "done"' --limit 5
    """
    config = ConfigManager().config
    request = QueryRequest(
        view=view,
        filter=parse_filter_option(filter),
        sort=parse_sort_option(sort),
        limit=limit,
        page=page,
        evaluate=evaluate,
    )
    store = _store(config)
    planner = QueryPlanner(store.notes, store, EngineState(), config)
    print_json(run_command(planner.query(base, request), "query"))
