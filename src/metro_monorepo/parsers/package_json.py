"""Read the fields of package.json this package cares about."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..models.workspaces import Workspaces, parse_workspaces
from .json_file import read_json_object

FILENAME = "package.json"


def read_workspaces(directory: Path) -> Workspaces | None:
    """Return the ``workspaces`` declaration of ``directory/package.json``."""
    data = read_json_object(directory / FILENAME)
    if data is None:
        return None
    return parse_workspaces(data.get("workspaces"))


def read_manifest(directory: Path | str) -> dict[str, Any] | None:
    """Return the whole package.json of a package directory, if present."""
    return read_json_object(Path(directory) / FILENAME)
