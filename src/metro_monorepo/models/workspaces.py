"""Workspace declarations as found in package.json-style manifests.

The ``workspaces`` field comes in two shapes::

    "workspaces": ["packages/*"]
    "workspaces": {"packages": ["packages/*"], "nohoist": ["**/react-native"]}

Each shape gets its own type instead of sniffing the raw value at every call
site.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class WorkspaceList:
    """Plain list of package-location patterns."""

    patterns: tuple[Any, ...]


@dataclass(frozen=True)
class WorkspaceConfig:
    """Object form carrying its patterns under ``packages``."""

    patterns: tuple[Any, ...]
    nohoist: tuple[str, ...] = ()


Workspaces = WorkspaceList | WorkspaceConfig


def parse_workspaces(value: Any) -> Workspaces | None:
    """Return the workspace declaration for a raw field value, if any.

    Pattern entries are kept as-is; non-string entries are dropped later during
    glob expansion.
    """
    if isinstance(value, list):
        return WorkspaceList(patterns=tuple(value))

    if isinstance(value, dict):
        packages = value.get("packages")
        if not isinstance(packages, list):
            return None
        nohoist = value.get("nohoist")
        if not isinstance(nohoist, list):
            nohoist = []
        return WorkspaceConfig(
            patterns=tuple(packages),
            nohoist=tuple(str(entry) for entry in nohoist if isinstance(entry, str)),
        )

    return None
