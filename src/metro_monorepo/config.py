"""Settings loader for the monorepo helper.

Settings live in an optional JSON file (default: ``metro-monorepo.json`` in the
project root). The document is validated against ``SETTINGS_SCHEMA`` with
jsonschema before it is turned into a ``Settings`` value.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jsonschema import Draft202012Validator

from .finders import DEFAULT_FINDERS, UnknownFinderError, get_monorepo_finder

if TYPE_CHECKING:
    from .helper import MetroConfigHelper


DEFAULT_CONFIG_FILENAME = "metro-monorepo.json"
CONFIG_PATH_ENV_VAR = "METRO_MONOREPO_CONFIG"

SETTINGS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "finders": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
            "uniqueItems": True,
        },
        "ignoredFolders": {"type": "array", "items": {"type": "string"}},
        "watchFolders": {"type": "array", "items": {"type": "string", "minLength": 1}},
        "typescript": {
            "oneOf": [
                {"type": "boolean"},
                {"type": "string", "minLength": 1},
                {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "transformerModuleName": {"type": "string", "minLength": 1},
                        "fileExtensions": {"type": "array", "items": {"type": "string"}},
                    },
                },
            ]
        },
        "logLevel": {"type": "string", "minLength": 1},
    },
}


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_settings_document(document: Any) -> None:
    """Raise ConfigError listing every schema violation in ``document``."""
    validator = Draft202012Validator(SETTINGS_SCHEMA)
    errors = sorted(
        validator.iter_errors(document), key=lambda e: "/".join(str(p) for p in e.path)
    )
    if errors:
        raise ConfigError("Invalid settings:\n" + _format_errors(errors))


@dataclass(slots=True, frozen=True)
class Settings:
    """Validated settings for a helper run."""

    finders: tuple[str, ...] | None = None
    ignored_folders: tuple[str, ...] | None = None
    watch_folders: tuple[str, ...] = ()
    typescript: bool | str | dict[str, Any] = False
    log_level: str | None = None
    source: Path | None = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> Settings:
        validate_settings_document(data)

        finders = data.get("finders")
        if finders is not None:
            for name in finders:
                try:
                    get_monorepo_finder(name)
                except UnknownFinderError as exc:
                    raise ConfigError(str(exc)) from exc

        ignored = data.get("ignoredFolders")
        return cls(
            finders=tuple(finders) if finders is not None else None,
            ignored_folders=tuple(ignored) if ignored is not None else None,
            watch_folders=tuple(data.get("watchFolders", [])),
            typescript=data.get("typescript", False),
            log_level=data.get("logLevel"),
            source=source,
        )

    def build_helper(self, project_root: Path | str) -> MetroConfigHelper:
        """Create a helper for ``project_root`` configured by these settings.

        Relative watch folders are taken relative to the project root.
        """
        from .helper import HelperOptions, MetroConfigHelper, coerce_typescript

        root = Path(project_root).resolve()
        if self.finders is None:
            finders = DEFAULT_FINDERS
        else:
            finders = tuple(get_monorepo_finder(name) for name in self.finders)

        options = HelperOptions(
            project_root=root,
            monorepo_finders=finders,
            ignored_folders=self.ignored_folders,
            watch_folders=tuple(str(root / folder) for folder in self.watch_folders),
            typescript=coerce_typescript(self.typescript),
        )
        return MetroConfigHelper(options)


def _resolve_config_path(
    path: Path | str | None, project_root: Path | str | None
) -> tuple[Path, bool]:
    """Return the settings path and whether it was explicitly requested.

    Priority:
    1. Explicit path argument
    2. METRO_MONOREPO_CONFIG environment variable
    3. metro-monorepo.json in the project root (or the working directory)
    """
    if path is not None:
        return Path(path), True

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path), True

    base = Path(project_root) if project_root is not None else Path.cwd()
    return base / DEFAULT_CONFIG_FILENAME, False


def load_settings(
    path: Path | str | None = None, project_root: Path | str | None = None
) -> Settings:
    """Load and validate settings.

    A missing default settings file yields ``Settings()``; a missing file that
    was asked for explicitly is an error.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path, explicit = _resolve_config_path(path, project_root)

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return Settings()

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    return Settings.from_dict(data, source=config_path)
