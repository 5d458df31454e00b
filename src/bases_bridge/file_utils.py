"""Utilities for file operations."""

from pathlib import Path
from typing import Any, Dict, Tuple

import aiofiles
import frontmatter
import yaml
from loguru import logger

from bases_bridge.utils import FilePath


class FileError(Exception):
    """Base exception for file operations."""

    pass


class FileWriteError(FileError):
    """Raised when file operations fail."""

    pass


class ParseError(FileError):
    """Raised when parsing file content fails."""

    pass


async def read_file(path: FilePath) -> str:
    """Read a UTF-8 text file without blocking the event loop."""
    async with aiofiles.open(Path(path), mode="r", encoding="utf-8") as f:
        return await f.read()


async def write_file_atomic(path: FilePath, content: str) -> None:
    """
    Write file with atomic operation using temporary file.

    Args:
        path: Target file path (Path or string)
        content: Content to write

    Raises:
        FileWriteError: If write operation fails
    """
    path_obj = Path(path) if isinstance(path, str) else path
    temp_path = path_obj.with_name(f".{path_obj.name}.tmp")

    try:
        async with aiofiles.open(temp_path, mode="w", encoding="utf-8") as f:
            await f.write(content)

        temp_path.replace(path_obj)
        logger.debug(f"Wrote file atomically path={path_obj} content_length={len(content)}")
    except Exception as e:
        temp_path.unlink(missing_ok=True)
        logger.error(f"Failed to write file path={path_obj} error={e}")
        raise FileWriteError(f"Failed to write file {path}: {e}") from e


def has_frontmatter(content: str) -> bool:
    """
    Check if content contains YAML frontmatter markers.

    Args:
        content: Content to check

    Returns:
        True if content starts with --- and has a closing marker
    """
    if not content:
        return False

    content = content.lstrip("\ufeff")
    if not content.startswith("---"):
        return False

    return "---" in content[3:]


def parse_frontmatter(content: str) -> Tuple[Dict[str, Any], str]:
    """
    Split markdown content into its frontmatter mapping and body.

    Args:
        content: Markdown text

    Returns:
        (frontmatter dict, body). Notes without frontmatter yield an empty dict.

    Raises:
        ParseError: If the frontmatter block is not valid YAML or not a mapping
    """
    if not has_frontmatter(content):
        return {}, content

    try:
        post = frontmatter.loads(content)
    except (yaml.YAMLError, ValueError, TypeError) as e:
        raise ParseError(f"Invalid YAML in frontmatter: {e}") from e

    if not isinstance(post.metadata, dict):
        raise ParseError("Frontmatter must be a YAML dictionary")
    return dict(post.metadata), post.content


def dump_frontmatter(metadata: Dict[str, Any], body: str) -> str:
    """
    Serialize frontmatter + body with block-style YAML lists.

    Args:
        metadata: Frontmatter mapping
        body: Markdown body

    Returns:
        Markdown text with a --- delimited YAML header (omitted when metadata is empty)
    """
    if not metadata:
        return body

    yaml_str = yaml.dump(
        metadata,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        Dumper=yaml.SafeDumper,
    )

    if body:
        return f"---\n{yaml_str}---\n\n{body.lstrip()}"
    return f"---\n{yaml_str}---\n"
