"""Pytest configuration and filesystem fixtures for metro-monorepo tests."""

import json
import logging
from pathlib import Path

import pytest

from metro_monorepo.logging_setup import null_logger


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def touch(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def quiet_logger() -> logging.Logger:
    return null_logger("metro_monorepo.tests")


@pytest.fixture
def lerna_repo(tmp_path: Path) -> Path:
    """``/m`` with lerna.json listing ``packages/*`` and two packages."""
    root = tmp_path / "m"
    write_json(root / "lerna.json", {"packages": ["packages/*"], "version": "1.0.0"})
    write_json(root / "package.json", {"name": "root", "private": True})
    write_json(root / "packages" / "app" / "package.json", {"name": "app"})
    write_json(root / "packages" / "lib" / "package.json", {"name": "lib"})
    return root


@pytest.fixture
def yarn_repo(tmp_path: Path) -> Path:
    """Yarn workspaces declared with the object shape."""
    root = tmp_path / "y"
    write_json(
        root / "package.json",
        {
            "name": "root",
            "private": True,
            "workspaces": {"packages": ["packages/*", "apps/*"], "nohoist": ["**/react-native"]},
        },
    )
    write_json(root / "packages" / "core" / "package.json", {"name": "core"})
    write_json(root / "apps" / "mobile" / "package.json", {"name": "mobile"})
    return root


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by configure_logging between tests."""
    yield
    logger = logging.getLogger("metro_monorepo")
    for handler in list(logger.handlers):
        if getattr(handler, "_metro_monorepo", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
