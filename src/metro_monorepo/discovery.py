"""Expansion of workspace package patterns into package directories."""

from __future__ import annotations

import fnmatch
import glob
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any


DEFAULT_IGNORED_FOLDERS = ("**/node_modules",)
PACKAGE_MANIFEST = "package.json"


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _list_dir(directory: str) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as entries:
            return list(entries)
    except OSError:
        return []


def _match(base: str, rel: str, segments: tuple[str, ...]) -> Iterator[str]:
    """Yield paths relative to ``base`` matching ``segments``.

    ``**`` matches zero or more directories but never descends into a
    symlinked directory, so cross-linked packages cannot loop. Single-segment
    wildcards still follow links. Dot entries need an explicit leading dot.
    """
    if not segments:
        yield rel
        return

    head, rest = segments[0], segments[1:]
    current = os.path.join(base, rel) if rel else base

    if head == "**":
        yield from _match(base, rel, rest)
        for entry in _list_dir(current):
            if _is_hidden(entry.name) or not entry.is_dir(follow_symlinks=False):
                continue
            yield from _match(base, os.path.join(rel, entry.name), segments)
        return

    if not glob.has_magic(head):
        child = os.path.join(rel, head) if rel else head
        target = os.path.join(base, child)
        if rest:
            if os.path.isdir(target):
                yield from _match(base, child, rest)
        elif os.path.lexists(target):
            yield child
        return

    for entry in _list_dir(current):
        if _is_hidden(entry.name) and not head.startswith("."):
            continue
        if not fnmatch.fnmatchcase(entry.name, head):
            continue
        child = os.path.join(rel, entry.name)
        if not rest:
            yield child
        elif entry.is_dir():
            yield from _match(base, child, rest)


def _glob(pattern: str, cwd: Path, *, files_only: bool = False) -> list[str]:
    base = os.fspath(cwd)
    if os.path.isabs(pattern):
        base, pattern = os.sep, pattern.lstrip("/")
    segments = tuple(s for s in pattern.split("/") if s and s != ".")

    matches = {os.path.normpath(m) for m in _match(base, "", segments) if m}
    if files_only:
        matches = {m for m in matches if os.path.isfile(os.path.join(base, m))}
    if base != os.fspath(cwd):
        matches = {os.path.join(base, m) for m in matches}
    return sorted(matches)


def _is_within(path: str, folder: str) -> bool:
    return path == folder or path.startswith(folder.rstrip(os.sep) + os.sep)


def expand_ignored_folders(cwd: Path, ignored_folders: Iterable[str] | None = None) -> list[str]:
    """Glob every ignore pattern relative to ``cwd``."""
    if ignored_folders is None:
        ignored_folders = DEFAULT_IGNORED_FOLDERS
    found: list[str] = []
    for pattern in ignored_folders:
        found.extend(_glob(pattern, cwd))
    return found


def expand_package_globs(
    patterns: Iterable[Any],
    cwd: Path,
    ignored_folders: Iterable[str] | None = None,
) -> list[str]:
    """Expand workspace patterns into package directories relative to ``cwd``.

    A directory counts as a package only when it holds a package.json. Entries
    that are not strings are skipped. Packages at or below any expanded ignored
    folder (by default every ``node_modules``) are dropped.
    """
    cwd = Path(cwd)
    ignored = expand_ignored_folders(cwd, ignored_folders)

    results: list[str] = []
    for pattern in patterns:
        if not isinstance(pattern, str):
            continue

        manifests = _glob(f"{pattern.rstrip('/')}/{PACKAGE_MANIFEST}", cwd, files_only=True)
        for manifest in manifests:
            root = os.path.dirname(manifest) or os.curdir
            if any(_is_within(root, folder) for folder in ignored):
                continue
            results.append(root)

    return results
