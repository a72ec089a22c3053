"""
GraphQL schema loading.

Relative schema paths are resolved against the workspace root when the
project belongs to a uv workspace, else against the project root:

- project root: nearest ancestor of the start directory (inclusive) that
  contains a ``pyproject.toml``
- workspace root: nearest ancestor of the project root (inclusive) whose
  ``pyproject.toml`` declares a ``[tool.uv.workspace]`` table

When no ``pyproject.toml`` is found at all, the start directory is used.
"""

import os
import tomllib
from pathlib import Path
from typing import Optional, Union

from graphql import DocumentNode, GraphQLSyntaxError, parse

from ..utils.logging import get_logger
from .errors import SchemaIOError, SchemaParseError, SourceLocation

logger = get_logger(__name__)

PROJECT_MARKER = "pyproject.toml"


def _declares_workspace(manifest: Path) -> bool:
    try:
        with manifest.open("rb") as fh:
            data = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return "workspace" in data.get("tool", {}).get("uv", {})


def find_project_root(start_dir: Path) -> Optional[Path]:
    """Return the nearest directory at or above start_dir holding a pyproject.toml."""
    for directory in (start_dir, *start_dir.parents):
        if (directory / PROJECT_MARKER).is_file():
            return directory
    return None


def find_workspace_root(project_root: Path) -> Optional[Path]:
    """Return the nearest directory at or above project_root declaring a uv workspace."""
    for directory in (project_root, *project_root.parents):
        manifest = directory / PROJECT_MARKER
        if manifest.is_file() and _declares_workspace(manifest):
            return directory
    return None


def resolve_schema_path(
    path: Union[str, os.PathLike], start_dir: Optional[Union[str, os.PathLike]] = None
) -> Path:
    """
    Resolve a schema path to an absolute path.

    Args:
        path: Absolute path, or path relative to the project/workspace root
        start_dir: Directory the lookup starts from (default: current directory)

    Returns:
        Absolute schema path (not checked for existence)
    """
    schema_path = Path(path)
    if schema_path.is_absolute():
        return schema_path

    start = Path(start_dir).resolve() if start_dir is not None else Path.cwd()
    base = start
    project_root = find_project_root(start)
    if project_root is not None:
        base = find_workspace_root(project_root) or project_root
    return base / schema_path


def load_schema(
    path: Union[str, os.PathLike],
    location: Optional[SourceLocation] = None,
    start_dir: Optional[Union[str, os.PathLike]] = None,
) -> DocumentNode:
    """
    Read and parse a GraphQL schema file.

    Args:
        path: Schema path as given by the caller
        location: Location of the schema path argument, attached to errors
        start_dir: Directory relative paths are resolved from

    Returns:
        Parsed schema document

    Raises:
        SchemaIOError: If the file cannot be read
        SchemaParseError: If the GraphQL parser rejects the content
    """
    full_path = resolve_schema_path(path, start_dir)
    try:
        schema_text = full_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaIOError(str(full_path), exc, location) from exc

    try:
        document = parse(schema_text, no_location=True)
    except GraphQLSyntaxError as exc:
        raise SchemaParseError(exc.message, location) from exc

    logger.debug("Loaded GraphQL schema", path=str(full_path), definitions=len(document.definitions))
    return document
