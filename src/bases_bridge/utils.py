"""Utility functions for bases-bridge."""

import re
import sys
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote

from loguru import logger

FilePath = Union[Path, str]


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[FilePath] = None,
    console: bool = True,
) -> None:  # pragma: no cover
    """
    Configure loguru sinks for the application.

    Args:
        log_level: Minimum level for every sink
        log_file: Optional path of a rotating log file
        console: Whether to log to stderr
    """
    logger.remove()

    if console:
        logger.add(sys.stderr, level=log_level, backtrace=True, diagnose=False, colorize=True)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level=log_level,
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

    logger.debug(f"Logging initialized level={log_level} file={log_file} console={console}")


def normalize_path_separators(path: str) -> str:
    """
    Normalize path separators to single forward slashes.

    Examples:
        >>> normalize_path_separators("folder//file.md")
        'folder/file.md'
        >>> normalize_path_separators("path\\\\to\\\\file.md")
        'path/to/file.md'
        >>> normalize_path_separators("./folder/./file.md")
        'folder/./file.md'
    """
    if not path:
        return ""

    normalized = path.replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    normalized = re.sub(r"/+", "/", normalized)
    return normalized.rstrip("/")


def normalize_base_id(base_id: Optional[str]) -> str:
    """Decode a base identifier coming from a URL and normalize its separators."""
    if not base_id:
        return ""
    return unquote(base_id).replace("\\", "/")


def ensure_base_ext(path: str) -> str:
    """Return the canonical `.base`-suffixed key for a base path."""
    normalized = normalize_base_id(path)
    return normalized if normalized.endswith(".base") else f"{normalized}.base"


def dirname(path: str) -> str:
    """Folder part of a vault-relative path, '' for root-level files."""
    normalized = path.replace("\\", "/")
    idx = normalized.rfind("/")
    return "" if idx == -1 else normalized[:idx]


def clamp_int(value: object, fallback: int, minimum: int, maximum: int) -> int:
    """Coerce value to an int within [minimum, maximum], or fallback if not numeric."""
    if isinstance(value, bool) or value is None:
        return fallback
    try:
        number = float(value)  # pyright: ignore[reportArgumentType]
    except (TypeError, ValueError):
        return fallback
    if number != number or number in (float("inf"), float("-inf")):
        return fallback
    return max(minimum, min(maximum, int(number)))
