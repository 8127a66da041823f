"""Watch-folder list computation."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path
from typing import TypeVar

from .models.monorepo_info import MonorepoInfo

T = TypeVar("T")


def unique(items: Iterable[T]) -> list[T]:
    """Drop repeated items, keeping the first occurrence."""
    seen: set[T] = set()
    result: list[T] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def follow_symlink_folder(pathname: str | os.PathLike[str]) -> str | None:
    """Return the directory ``pathname`` names, following a symlink.

    Anything that is not (or does not point at) an existing directory yields
    None.
    """
    pathname = os.fspath(pathname)
    if os.path.islink(pathname):
        pathname = os.path.realpath(pathname)
    if os.path.isdir(pathname):
        return pathname
    return None


def compute_watch_folders(
    monorepo: MonorepoInfo,
    extra_folders: Iterable[str | Path] = (),
) -> list[str]:
    """Monorepo root, package roots, then extra folders; only real directories."""
    candidates: list[str | Path] = [monorepo.root, *monorepo.package_roots, *extra_folders]
    folders = (follow_symlink_folder(candidate) for candidate in candidates)
    return unique(folder for folder in folders if folder)
