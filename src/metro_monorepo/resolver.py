"""Layered module resolver.

Resolution order (first match wins):
1. Project root, source-file extensions
2. Project root, asset extensions
3. Monorepo root, source-file extensions
4. Monorepo root, asset extensions

Within each attempt, relative specifiers are looked up next to the importing
file first; anything left over goes through the Node-style resolver.
"""

from __future__ import annotations

import json
import logging
import os
import stat
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from .logging_setup import trace
from .models.monorepo_info import MonorepoInfo
from .models.resolution import Resolution, ResolutionType, ResolverContext
from .node_resolve import ModuleResolutionError, resolve_sync

module_logger = logging.getLogger(__name__)

REACT_NATIVE_FIELD = "react-native"


def complementary_extensions(platform: str, extensions: Iterable[str]) -> list[str]:
    """Pair every extension with its platform-qualified variant.

    ``("js", "json")`` on ``ios`` gives ``["js", "ios.js", "json", "ios.json"]``.
    """
    result: list[str] = []
    for extension in extensions:
        result.append(extension)
        result.append(f"{platform}.{extension}")
    return result


def react_native_package_filter(pkg: dict[str, Any]) -> dict[str, Any]:
    """Prefer a package's ``react-native`` entry point over ``main``."""
    entry = pkg.get(REACT_NATIVE_FIELD)
    if isinstance(entry, str):
        pkg = dict(pkg)
        pkg["main"] = entry
    return pkg


def file_module_exists(pathname: str) -> bool:
    """True for an existing regular file or FIFO; symlinks are not followed."""
    try:
        mode = os.lstat(pathname).st_mode
    except OSError:
        return False
    return stat.S_ISREG(mode) or stat.S_ISFIFO(mode)


def is_directory(pathname: str) -> bool:
    try:
        return stat.S_ISDIR(os.lstat(pathname).st_mode)
    except OSError:
        return False


class LayeredResolver:
    """Resolve import requests against a project and then its monorepo.

    Instances are callable with the bundler's ``resolveRequest`` signature
    ``(metro, module_name, platform)`` and return a ``Resolution`` or None.
    """

    def __init__(
        self,
        monorepo: MonorepoInfo,
        *,
        project_root: Path | str | None = None,
        logger: logging.Logger | None = None,
        search_package_roots: bool = True,
    ) -> None:
        self.monorepo = monorepo
        self.project_root = Path(project_root) if project_root else monorepo.project.root
        self.logger = logger or module_logger
        self.search_paths: tuple[str, ...] = ()
        if search_package_roots:
            self.search_paths = tuple(str(p.node_modules_root) for p in monorepo.packages)

    def __call__(
        self, metro: Mapping[str, Any], module_name: str, platform: str
    ) -> Resolution | None:
        return self.resolve(ResolverContext.from_metro(metro, module_name, platform))

    def resolve(self, context: ResolverContext) -> Resolution | None:
        attempts = (
            (self.project_root, ResolutionType.SOURCE_FILE, context.source_exts),
            (self.project_root, ResolutionType.ASSET, context.asset_exts),
            (self.monorepo.root, ResolutionType.SOURCE_FILE, context.source_exts),
            (self.monorepo.root, ResolutionType.ASSET, context.asset_exts),
        )
        for root, kind, extensions in attempts:
            resolution = self.resolve_in_root(context, root, kind, extensions)
            if resolution is not None:
                return resolution
        return None

    def resolve_in_root(
        self,
        context: ResolverContext,
        root: Path | str,
        kind: ResolutionType,
        extensions: Iterable[str],
    ) -> Resolution | None:
        """Run a single attempt of the cascade."""
        origin = context.origin_module_path
        module_name = context.module_name
        candidates = complementary_extensions(context.platform, extensions)

        origin_dir = origin if is_directory(origin) else os.path.dirname(origin)
        resolved: str | None = None

        if context.is_relative:
            resolved = self._resolve_relative(module_name, origin_dir, candidates)
            if resolved is None:
                trace(
                    self.logger,
                    "Could not resolve local-path module '%s'! includedIn='%s', basedir='%s', "
                    "fileExtensions=%s!",
                    module_name,
                    origin,
                    origin_dir,
                    json.dumps(candidates),
                )

        # Relative specifiers that missed next to the importing file are
        # retried from the project root only, never from the monorepo root.
        if resolved is None:
            basedir = str(self.project_root if context.is_relative else root)
            try:
                resolved = resolve_sync(
                    module_name,
                    basedir=basedir,
                    extensions=candidates,
                    package_filter=react_native_package_filter,
                    paths=self.search_paths,
                )
            except ModuleResolutionError:
                trace(
                    self.logger,
                    "Could not resolve module '%s'! includedIn='%s', basedir='%s', "
                    "fileExtensions=%s!",
                    module_name,
                    origin,
                    basedir,
                    json.dumps(candidates),
                )

        if resolved is None:
            return None
        return Resolution(type=kind, file_path=resolved)

    @staticmethod
    def _resolve_relative(
        module_name: str, origin_dir: str, extensions: list[str]
    ) -> str | None:
        basename = os.path.normpath(os.path.join(origin_dir, module_name))
        if file_module_exists(basename):
            return basename
        if is_directory(basename):
            basename = os.path.join(basename, "index")

        for extension in extensions:
            pathname = f"{basename}.{extension}"
            if file_module_exists(pathname):
                return pathname
        return None
