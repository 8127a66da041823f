"""Monorepo locator strategies.

Each finder walks upward from a project directory looking for one flavour of
workspace manifest and returns a ``MonorepoInfo`` or None. ``locate`` tries a
sequence of finders and keeps the first hit.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator, Sequence
from pathlib import Path
from typing import Protocol

from .discovery import DEFAULT_IGNORED_FOLDERS, expand_package_globs
from .models.monorepo_info import MonorepoInfo
from .parsers import lerna_json, package_json, pnpm_workspace

module_logger = logging.getLogger(__name__)


class MonorepoFinder(Protocol):
    def __call__(
        self,
        project_root: Path,
        *,
        logger: logging.Logger | None = None,
        ignored_folders: Sequence[str] | None = None,
    ) -> MonorepoInfo | None: ...


class UnknownFinderError(ValueError):
    """Raised when a finder name is not found in the registry."""


def walk_up(start: Path) -> Iterator[Path]:
    """Yield ``start`` and each of its parents, ending at the filesystem root."""
    current = Path(os.path.abspath(start))
    while True:
        yield current
        parent = current.parent
        if parent == current:
            return
        current = parent


def _build_info(
    kind: str,
    monorepo_root: Path,
    package_roots: list[str],
    project_root: Path,
    logger: logging.Logger,
) -> MonorepoInfo:
    info = MonorepoInfo.from_package_roots(
        monorepo_root=monorepo_root,
        package_roots=package_roots,
        project_root=project_root,
    )
    logger.debug("Found %s monorepo. %s", kind, info.to_dict())
    return info


def find_lerna_monorepo(
    project_root: Path,
    *,
    logger: logging.Logger | None = None,
    ignored_folders: Sequence[str] | None = None,
) -> MonorepoInfo | None:
    """Locate a monorepo declared by lerna.json.

    The first directory with a lerna.json ends the search, even if its patterns
    match nothing. With ``useWorkspaces`` and the yarn client, patterns come
    from the sibling package.json ``workspaces`` field.
    """
    logger = logger or module_logger
    project_root = Path(project_root)

    for directory in walk_up(project_root):
        logger.debug("Searching for lerna monorepo at '%s'...", directory)
        manifest = lerna_json.parse(directory)
        if manifest is None:
            continue

        patterns: tuple = ()
        if manifest.delegates_to_workspaces:
            workspaces = package_json.read_workspaces(directory)
            if workspaces is not None:
                patterns = workspaces.patterns
        elif manifest.packages is not None:
            patterns = manifest.packages

        package_roots = expand_package_globs(patterns, directory, ignored_folders)
        return _build_info("lerna", directory, package_roots, project_root, logger)

    logger.debug("Could not find lerna monorepo starting at project root '%s'.", project_root)
    return None


def find_yarn_monorepo(
    project_root: Path,
    *,
    logger: logging.Logger | None = None,
    ignored_folders: Sequence[str] | None = None,
) -> MonorepoInfo | None:
    """Locate a monorepo declared by a package.json ``workspaces`` field.

    A directory only wins when its patterns expand to at least one package.
    """
    logger = logger or module_logger
    project_root = Path(project_root)

    for directory in walk_up(project_root):
        logger.debug("Searching for yarn monorepo at '%s'...", directory)
        workspaces = package_json.read_workspaces(directory)
        if workspaces is None:
            continue

        package_roots = expand_package_globs(workspaces.patterns, directory, ignored_folders)
        if package_roots:
            return _build_info("yarn", directory, package_roots, project_root, logger)

    logger.debug("Could not find yarn monorepo starting at project root '%s'.", project_root)
    return None


def find_pnpm_monorepo(
    project_root: Path,
    *,
    logger: logging.Logger | None = None,
    ignored_folders: Sequence[str] | None = None,
) -> MonorepoInfo | None:
    """Locate a monorepo declared by pnpm-workspace.yaml.

    Negated patterns in the workspace file are added to the ignored folders.
    """
    logger = logger or module_logger
    project_root = Path(project_root)
    base_ignored = list(DEFAULT_IGNORED_FOLDERS if ignored_folders is None else ignored_folders)

    for directory in walk_up(project_root):
        logger.debug("Searching for pnpm monorepo at '%s'...", directory)
        parsed = pnpm_workspace.parse(directory / pnpm_workspace.FILENAME)
        if parsed is None:
            continue

        patterns, negated = parsed
        package_roots = expand_package_globs(patterns, directory, base_ignored + negated)
        if package_roots:
            return _build_info("pnpm", directory, package_roots, project_root, logger)

    logger.debug("Could not find pnpm monorepo starting at project root '%s'.", project_root)
    return None


# Registry of known finders, keyed by the name used in settings files.
MONOREPO_FINDERS: dict[str, MonorepoFinder] = {
    "lerna": find_lerna_monorepo,
    "yarn": find_yarn_monorepo,
    "pnpm": find_pnpm_monorepo,
}

DEFAULT_FINDERS: tuple[MonorepoFinder, ...] = (
    find_lerna_monorepo,
    find_yarn_monorepo,
    find_pnpm_monorepo,
)


def get_monorepo_finder(name: str) -> MonorepoFinder:
    """Return the finder registered under ``name``, or raise UnknownFinderError."""
    finder = MONOREPO_FINDERS.get(name)
    if finder is None:
        known = ", ".join(get_known_finder_names())
        raise UnknownFinderError(f"Unknown monorepo finder '{name}'. Known finders: {known}")
    return finder


def get_known_finder_names() -> list[str]:
    """Return a sorted list of all registered finder names."""
    return sorted(MONOREPO_FINDERS.keys())


def locate(
    start_directory: Path | str,
    finders: Iterable[Callable[..., MonorepoInfo | None]] = DEFAULT_FINDERS,
    *,
    logger: logging.Logger | None = None,
    ignored_folders: Sequence[str] | None = None,
) -> MonorepoInfo | None:
    """Run ``finders`` in order and return the first monorepo found."""
    start = Path(start_directory)
    for finder in finders:
        info = finder(start, logger=logger, ignored_folders=ignored_folders)
        if info is not None:
            return info
    return None
