"""utility functions for commands"""

import asyncio
import json
from typing import Any, Coroutine, TypeVar

import typer
from loguru import logger
from pydantic import BaseModel
from rich.console import Console

from bases_bridge.bases.errors import BasesError
from bases_bridge.semantic.semantic_errors import SemanticSearchError

console = Console(stderr=True)

T = TypeVar("T")


def print_json(payload: Any) -> None:
    """Print a model or plain value as indented JSON on stdout."""
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True)
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def run_command(coro: Coroutine[Any, Any, T], action: str) -> T:
    """Run an async service call, turning domain errors into exit code 1."""
    try:
        return asyncio.run(coro)
    except (BasesError, SemanticSearchError) as e:
        logger.error(f"Error during {action}: {e}")
        console.print(f"[red]Error during {action}: {e}[/red]")
        raise typer.Exit(1)
