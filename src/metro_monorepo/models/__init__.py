"""Data models for monorepo discovery and module resolution."""

from __future__ import annotations

from .monorepo_info import NODE_MODULES, MonorepoInfo, PackageLocation
from .resolution import Resolution, ResolutionType, ResolverContext
from .workspaces import WorkspaceConfig, WorkspaceList, Workspaces, parse_workspaces

__all__ = [
    "NODE_MODULES",
    "MonorepoInfo",
    "PackageLocation",
    "Resolution",
    "ResolutionType",
    "ResolverContext",
    "WorkspaceConfig",
    "WorkspaceList",
    "Workspaces",
    "parse_workspaces",
]
