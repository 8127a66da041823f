"""Monorepo description produced by the locator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from collections.abc import Iterable
from pathlib import Path

NODE_MODULES = "node_modules"


@dataclass(frozen=True)
class PackageLocation:
    """A package root and its installed-dependency directory."""

    root: Path
    node_modules_root: Path

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            raise ValueError(f"Package root must be absolute: {self.root}")

    def to_dict(self) -> dict[str, str]:
        return {
            "root": str(self.root),
            "nodeModulesRoot": str(self.node_modules_root),
        }

    @classmethod
    def at(cls, root: Path | str) -> PackageLocation:
        normalized = Path(os.path.normpath(os.path.abspath(root)))
        return cls(root=normalized, node_modules_root=normalized / NODE_MODULES)


@dataclass(frozen=True)
class MonorepoInfo:
    """Immutable result of monorepo discovery.

    ``packages`` follows manifest declaration order and is not deduplicated.
    """

    root: Path
    node_modules_root: Path
    project: PackageLocation
    packages: tuple[PackageLocation, ...]

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            raise ValueError(f"Monorepo root must be absolute: {self.root}")

    @property
    def package_roots(self) -> list[Path]:
        return [package.root for package in self.packages]

    def to_dict(self) -> dict[str, object]:
        return {
            "root": str(self.root),
            "nodeModulesRoot": str(self.node_modules_root),
            "project": self.project.to_dict(),
            "packages": [package.to_dict() for package in self.packages],
        }

    @classmethod
    def from_package_roots(
        cls,
        *,
        monorepo_root: Path | str,
        package_roots: Iterable[str],
        project_root: Path | str,
    ) -> MonorepoInfo:
        """Build the value from package paths relative to ``monorepo_root``."""
        root = Path(os.path.normpath(os.path.abspath(monorepo_root)))
        packages = tuple(PackageLocation.at(root / package) for package in package_roots)
        return cls(
            root=root,
            node_modules_root=root / NODE_MODULES,
            project=PackageLocation.at(project_root),
            packages=packages,
        )
