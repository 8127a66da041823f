"""Tests for the monorepo locator strategies."""

import json
from pathlib import Path

import pytest

from metro_monorepo.finders import (
    DEFAULT_FINDERS,
    UnknownFinderError,
    find_lerna_monorepo,
    find_pnpm_monorepo,
    find_yarn_monorepo,
    get_known_finder_names,
    get_monorepo_finder,
    locate,
    walk_up,
)

from conftest import touch, write_json


def test_walk_up_ends_at_filesystem_root(tmp_path: Path):
    steps = list(walk_up(tmp_path / "a" / "b"))

    assert steps[0] == tmp_path / "a" / "b"
    assert steps[1] == tmp_path / "a"
    assert steps[-1] == Path(steps[-1].anchor)
    assert steps[-1].parent == steps[-1]


def test_lerna_end_to_end(lerna_repo: Path, quiet_logger):
    info = find_lerna_monorepo(lerna_repo / "packages" / "app", logger=quiet_logger)

    assert info is not None
    assert info.root == lerna_repo
    assert info.node_modules_root == lerna_repo / "node_modules"
    assert [p.root for p in info.packages] == [
        lerna_repo / "packages" / "app",
        lerna_repo / "packages" / "lib",
    ]
    assert info.packages[0].node_modules_root == lerna_repo / "packages" / "app" / "node_modules"
    assert info.project.root == lerna_repo / "packages" / "app"
    assert info.project.node_modules_root == lerna_repo / "packages" / "app" / "node_modules"


@pytest.mark.parametrize("depth", [0, 1, 3])
def test_upward_walk_converges_on_the_same_root(lerna_repo: Path, quiet_logger, depth):
    start = lerna_repo / "packages" / "app"
    for i in range(depth):
        start = start / f"nested{i}"
    start.mkdir(parents=True, exist_ok=True)

    info = locate(start, logger=quiet_logger)

    assert info.root == lerna_repo


def test_locate_is_idempotent(lerna_repo: Path, quiet_logger):
    first = locate(lerna_repo / "packages" / "lib", logger=quiet_logger)
    second = locate(lerna_repo / "packages" / "lib", logger=quiet_logger)

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_lerna_with_yarn_workspaces_reads_package_json(tmp_path: Path, quiet_logger):
    write_json(tmp_path / "lerna.json", {"useWorkspaces": True, "npmClient": "yarn"})
    write_json(tmp_path / "package.json", {"workspaces": ["modules/*"]})
    write_json(tmp_path / "modules" / "ui" / "package.json", {"name": "ui"})
    write_json(tmp_path / "packages" / "ignored" / "package.json", {"name": "ignored"})

    info = find_lerna_monorepo(tmp_path, logger=quiet_logger)

    assert [p.root for p in info.packages] == [tmp_path / "modules" / "ui"]


def test_lerna_workspaces_flag_needs_yarn_client(tmp_path: Path, quiet_logger):
    write_json(
        tmp_path / "lerna.json",
        {"useWorkspaces": True, "npmClient": "npm", "packages": ["packages/*"]},
    )
    write_json(tmp_path / "package.json", {"workspaces": ["modules/*"]})
    write_json(tmp_path / "modules" / "ui" / "package.json", {})
    write_json(tmp_path / "packages" / "core" / "package.json", {})

    info = find_lerna_monorepo(tmp_path, logger=quiet_logger)

    assert [p.root for p in info.packages] == [tmp_path / "packages" / "core"]


def test_lerna_manifest_stops_the_walk_even_without_packages(tmp_path: Path, quiet_logger):
    write_json(tmp_path / "lerna.json", {"packages": ["packages/*"]})
    write_json(tmp_path / "packages" / "core" / "package.json", {})
    inner = tmp_path / "packages" / "core"
    write_json(inner / "lerna.json", {"packages": ["nothing/*"]})

    info = find_lerna_monorepo(inner, logger=quiet_logger)

    assert info.root == inner
    assert info.packages == ()


def test_yarn_object_shape(yarn_repo: Path, quiet_logger):
    info = find_yarn_monorepo(yarn_repo / "apps" / "mobile", logger=quiet_logger)

    assert info.root == yarn_repo
    assert [p.root for p in info.packages] == [
        yarn_repo / "packages" / "core",
        yarn_repo / "apps" / "mobile",
    ]
    assert info.project.root == yarn_repo / "apps" / "mobile"


def test_yarn_skips_manifests_that_expand_to_nothing(yarn_repo: Path, quiet_logger):
    project = yarn_repo / "apps" / "mobile"
    write_json(project / "package.json", {"name": "mobile", "workspaces": ["nope/*"]})

    info = find_yarn_monorepo(project, logger=quiet_logger)

    assert info.root == yarn_repo


def test_yarn_ignores_workspaces_inside_node_modules(tmp_path: Path, quiet_logger):
    write_json(tmp_path / "package.json", {"workspaces": ["**/widgets"]})
    write_json(tmp_path / "src" / "widgets" / "package.json", {})
    write_json(tmp_path / "node_modules" / "x" / "widgets" / "package.json", {})

    info = find_yarn_monorepo(tmp_path, logger=quiet_logger)

    assert [p.root for p in info.packages] == [tmp_path / "src" / "widgets"]


def test_pnpm_workspace(tmp_path: Path, quiet_logger):
    touch(
        tmp_path / "pnpm-workspace.yaml",
        "packages:\n  - 'packages/*'\n  - '!packages/private-*'\n",
    )
    write_json(tmp_path / "packages" / "web" / "package.json", {})
    write_json(tmp_path / "packages" / "private-tools" / "package.json", {})

    info = find_pnpm_monorepo(tmp_path / "packages" / "web", logger=quiet_logger)

    assert info.root == tmp_path
    assert [p.root for p in info.packages] == [tmp_path / "packages" / "web"]


def test_lerna_is_preferred_over_yarn_by_default(tmp_path: Path, quiet_logger):
    write_json(tmp_path / "lerna.json", {"packages": ["packages/*"]})
    write_json(tmp_path / "package.json", {"workspaces": ["apps/*"]})
    write_json(tmp_path / "packages" / "a" / "package.json", {})
    write_json(tmp_path / "apps" / "b" / "package.json", {})

    default = locate(tmp_path, logger=quiet_logger)
    yarn_first = locate(tmp_path, [find_yarn_monorepo, find_lerna_monorepo], logger=quiet_logger)

    assert [p.root for p in default.packages] == [tmp_path / "packages" / "a"]
    assert [p.root for p in yarn_first.packages] == [tmp_path / "apps" / "b"]


def test_not_found_is_none(tmp_path: Path, quiet_logger):
    project = tmp_path / "lonely"
    project.mkdir()

    assert locate(project, logger=quiet_logger) is None


def test_malformed_manifest_json_propagates(tmp_path: Path, quiet_logger):
    touch(tmp_path / "lerna.json", "{not json")

    with pytest.raises(json.JSONDecodeError):
        find_lerna_monorepo(tmp_path, logger=quiet_logger)


def test_finder_registry():
    assert get_known_finder_names() == ["lerna", "pnpm", "yarn"]
    assert get_monorepo_finder("yarn") is find_yarn_monorepo
    assert DEFAULT_FINDERS[0] is find_lerna_monorepo

    with pytest.raises(UnknownFinderError, match="Known finders: lerna, pnpm, yarn"):
        get_monorepo_finder("rush")


def test_cross_linked_workspace_packages(tmp_path: Path, quiet_logger):
    write_json(tmp_path / "lerna.json", {"packages": ["packages/*"]})
    names = ["a", "b", "c"]
    for name in names:
        write_json(tmp_path / "packages" / name / "package.json", {"name": name})
    for name in names:
        node_modules = tmp_path / "packages" / name / "node_modules"
        node_modules.mkdir()
        for sibling in names:
            if sibling != name:
                (node_modules / sibling).symlink_to(Path("..") / ".." / sibling)

    info = locate(tmp_path / "packages" / "a", logger=quiet_logger)

    assert info.root == tmp_path
    assert [p.root for p in info.packages] == [tmp_path / "packages" / n for n in names]


@pytest.mark.parametrize("packages", ["'packages/*'", "3"])
def test_pnpm_scalar_packages_expand_to_nothing(tmp_path: Path, quiet_logger, packages):
    touch(tmp_path / "pnpm-workspace.yaml", f"packages: {packages}\n")
    write_json(tmp_path / "packages" / "web" / "package.json", {})

    info = find_pnpm_monorepo(tmp_path / "packages" / "web", logger=quiet_logger)

    assert info is None
