"""Node-style package resolution.

This is the "standard" algorithm the layered resolver falls back to for bare
specifiers: walk ``node_modules`` directories upward from a base directory,
read package.json ``main`` fields and try file extensions and ``index`` files.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from .models.monorepo_info import NODE_MODULES
from .models.resolution import RELATIVE_PREFIXES
from .parsers.package_json import read_manifest

PackageFilter = Callable[[dict[str, Any]], dict[str, Any]]


class ModuleResolutionError(LookupError):
    """Raised when a specifier cannot be resolved to a file."""

    def __init__(self, specifier: str, basedir: str, reason: str | None = None) -> None:
        message = f"Cannot find module '{specifier}' from '{basedir}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.specifier = specifier
        self.basedir = basedir


def _is_file(path: str) -> bool:
    return os.path.isfile(path)


def _load_as_file(path: str, extensions: tuple[str, ...]) -> str | None:
    if _is_file(path):
        return path
    for extension in extensions:
        candidate = f"{path}.{extension}"
        if _is_file(candidate):
            return candidate
    return None


def _load_index(directory: str, extensions: tuple[str, ...]) -> str | None:
    return _load_as_file(os.path.join(directory, "index"), extensions)


def _load_as_directory(
    directory: str,
    extensions: tuple[str, ...],
    package_filter: PackageFilter | None,
    visited: frozenset[str] = frozenset(),
) -> str | None:
    if not os.path.isdir(directory):
        return None

    real = os.path.realpath(directory)
    if real in visited:
        raise ModuleResolutionError(
            directory, directory, reason="package main fields form a loop"
        )
    visited = visited | {real}

    manifest = read_manifest(directory)
    if manifest is not None:
        if package_filter is not None:
            manifest = package_filter(manifest)
        main = manifest.get("main")
        if isinstance(main, str) and main:
            target = os.path.normpath(os.path.join(directory, main))
            found = _load_as_file(target, extensions)
            if found is None and target != directory:
                found = _load_as_directory(target, extensions, package_filter, visited)
            if found is not None:
                return found

    return _load_index(directory, extensions)


def _node_modules_paths(basedir: str) -> Iterator[str]:
    current = os.path.abspath(basedir)
    while True:
        if os.path.basename(current) != NODE_MODULES:
            yield os.path.join(current, NODE_MODULES)
        parent = os.path.dirname(current)
        if parent == current:
            return
        current = parent


def _load(
    target: str,
    extensions: tuple[str, ...],
    package_filter: PackageFilter | None,
) -> str | None:
    return _load_as_file(target, extensions) or _load_as_directory(
        target, extensions, package_filter
    )


def resolve_sync(
    specifier: str,
    *,
    basedir: str | os.PathLike[str],
    extensions: Iterable[str] = ("js",),
    package_filter: PackageFilter | None = None,
    paths: Iterable[str | os.PathLike[str]] = (),
) -> str:
    """Resolve ``specifier`` the way Node's ``require.resolve`` would.

    Args:
        specifier: module name, relative path or absolute path.
        basedir: directory the lookup starts from.
        extensions: extensions to try, without the leading dot, in order.
        package_filter: hook applied to each package.json before ``main`` is read.
        paths: extra directories searched after the ``node_modules`` walk.

    Returns:
        The real absolute path of the resolved file.

    Raises:
        ModuleResolutionError: if nothing matches.
    """
    basedir = os.path.abspath(basedir)
    extensions = tuple(extensions)

    if specifier.startswith(RELATIVE_PREFIXES) or specifier in (".", "..") or os.path.isabs(specifier):
        found = _load(os.path.normpath(os.path.join(basedir, specifier)), extensions, package_filter)
        if found is not None:
            return os.path.realpath(found)
        raise ModuleResolutionError(specifier, basedir)

    search_dirs = list(_node_modules_paths(basedir))
    search_dirs.extend(os.fspath(path) for path in paths)
    for directory in search_dirs:
        found = _load(os.path.join(directory, specifier), extensions, package_filter)
        if found is not None:
            return os.path.realpath(found)

    raise ModuleResolutionError(specifier, basedir)
