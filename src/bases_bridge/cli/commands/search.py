"""CLI command for semantic search."""

from typing import Annotated, List, Optional

import typer

from bases_bridge.cli.app import app
from bases_bridge.cli.commands.command_utils import print_json, run_command
from bases_bridge.config import ConfigManager
from bases_bridge.schemas import SearchRequest
from bases_bridge.semantic.search import SemanticSearchService


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Natural language query")],
    top_k: Annotated[int, typer.Option("--top-k", min=1, max=100, help="Maximum number of results")] = 20,
    folder: Annotated[
        Optional[List[str]], typer.Option("--folder", help="Only notes under this folder")
    ] = None,
    tag: Annotated[Optional[List[str]], typer.Option("--tag", help="Only notes with this tag")] = None,
    snippets: Annotated[bool, typer.Option("--snippets/--no-snippets", help="Include note snippets")] = True,
):
    """Rank notes by similarity to QUERY using the vault's precomputed embeddings."""
    if len(query.strip()) < 2:
        typer.echo("Query must have at least 2 characters.", err=True)
        raise typer.Exit(1)

    config = ConfigManager().config
    request = SearchRequest(query=query, top_k=top_k, folders=folder, tags=tag, with_snippets=snippets)
    response = run_command(SemanticSearchService(config).search(request), "search")
    print_json(response.model_dump(exclude_none=True))
