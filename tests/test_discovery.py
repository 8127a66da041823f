"""Tests for workspace glob expansion."""

from pathlib import Path

from metro_monorepo.discovery import expand_ignored_folders, expand_package_globs

from conftest import touch, write_json


def test_expands_patterns_to_directories_with_package_json(tmp_path: Path):
    write_json(tmp_path / "packages" / "b" / "package.json", {})
    write_json(tmp_path / "packages" / "a" / "package.json", {})
    (tmp_path / "packages" / "no-manifest").mkdir()

    assert expand_package_globs(["packages/*"], tmp_path) == ["packages/a", "packages/b"]


def test_declaration_order_is_kept_across_patterns(tmp_path: Path):
    write_json(tmp_path / "packages" / "a" / "package.json", {})
    write_json(tmp_path / "apps" / "z" / "package.json", {})

    roots = expand_package_globs(["apps/*", "packages/*"], tmp_path)

    assert roots == ["apps/z", "packages/a"]


def test_non_string_patterns_are_skipped(tmp_path: Path):
    write_json(tmp_path / "packages" / "a" / "package.json", {})

    assert expand_package_globs([None, 12, {"x": 1}, "packages/*"], tmp_path) == ["packages/a"]


def test_node_modules_are_excluded_by_default(tmp_path: Path):
    write_json(tmp_path / "packages" / "a" / "package.json", {})
    write_json(tmp_path / "packages" / "a" / "node_modules" / "dep" / "package.json", {})
    write_json(tmp_path / "node_modules" / "left-pad" / "package.json", {})

    roots = expand_package_globs(["packages/**", "node_modules/*"], tmp_path)

    assert roots == ["packages/a"]


def test_custom_ignored_folders_replace_the_default(tmp_path: Path):
    write_json(tmp_path / "packages" / "a" / "package.json", {})
    write_json(tmp_path / "packages" / "legacy" / "package.json", {})
    write_json(tmp_path / "node_modules" / "dep" / "package.json", {})

    roots = expand_package_globs(
        ["packages/*", "node_modules/*"], tmp_path, ignored_folders=["packages/legacy"]
    )

    assert roots == ["packages/a", "node_modules/dep"]


def test_ignore_prefix_matches_whole_path_segments(tmp_path: Path):
    write_json(tmp_path / "packages" / "app" / "package.json", {})
    write_json(tmp_path / "packages" / "app-extra" / "package.json", {})

    roots = expand_package_globs(["packages/*"], tmp_path, ignored_folders=["packages/app"])

    assert roots == ["packages/app-extra"]


def test_files_named_like_packages_are_not_directories(tmp_path: Path):
    touch(tmp_path / "packages" / "package.json" / "oops")

    assert expand_package_globs(["packages"], tmp_path) == []


def test_expand_ignored_folders_finds_nested_node_modules(tmp_path: Path):
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "packages" / "a" / "node_modules").mkdir(parents=True)

    found = expand_ignored_folders(tmp_path)

    assert "node_modules" in found
    assert "packages/a/node_modules" in found


def _cross_link(packages: Path, names):
    for name in names:
        write_json(packages / name / "package.json", {"name": name})
    for name in names:
        node_modules = packages / name / "node_modules"
        node_modules.mkdir()
        for sibling in names:
            if sibling != name:
                (node_modules / sibling).symlink_to(Path("..") / ".." / sibling)


def test_recursive_patterns_do_not_descend_into_symlinked_folders(tmp_path: Path):
    _cross_link(tmp_path / "packages", ["a", "b", "c"])

    found = expand_ignored_folders(tmp_path)

    assert found == [
        "packages/a/node_modules",
        "packages/b/node_modules",
        "packages/c/node_modules",
    ]


def test_cross_linked_packages_expand_once(tmp_path: Path):
    _cross_link(tmp_path / "packages", ["a", "b", "c", "d"])

    roots = expand_package_globs(["packages/*"], tmp_path)

    assert roots == ["packages/a", "packages/b", "packages/c", "packages/d"]


def test_single_level_wildcard_still_follows_links(tmp_path: Path):
    write_json(tmp_path / "vendor" / "shared" / "package.json", {})
    (tmp_path / "packages").mkdir()
    (tmp_path / "packages" / "shared").symlink_to(tmp_path / "vendor" / "shared")

    assert expand_package_globs(["packages/*"], tmp_path) == ["packages/shared"]


def test_dot_folders_need_an_explicit_dot(tmp_path: Path):
    write_json(tmp_path / "packages" / ".cache" / "package.json", {})
    write_json(tmp_path / "packages" / "a" / "package.json", {})

    assert expand_package_globs(["packages/*"], tmp_path) == ["packages/a"]
    assert expand_package_globs(["packages/.*"], tmp_path) == ["packages/.cache"]
