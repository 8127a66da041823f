"""Bundler configuration helper.

``MetroConfigHelper`` holds the long-lived settings (project root, finders,
extra watch folders, TypeScript support) and lazily derives the monorepo
description, the layered resolver and the final configuration record from
them. ``with_*`` methods never mutate the receiver; they return a new helper.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import ConfigError
from .finders import DEFAULT_FINDERS, locate
from .models.monorepo_info import MonorepoInfo
from .node_resolve import resolve_sync
from .resolver import LayeredResolver
from .watch_folders import compute_watch_folders, unique

CustomResolver = Callable[[Mapping[str, Any], str, str], Any]
MonorepoFinderFn = Callable[..., MonorepoInfo | None]


@dataclass(frozen=True)
class TypeScriptConfig:
    transformer_module_name: str = "react-native-typescript-transformer"
    file_extensions: tuple[str, ...] = ("ts", "tsx")

    def __post_init__(self) -> None:
        if not self.transformer_module_name:
            raise ConfigError("Transformer module name cannot be empty.")


DEFAULT_TYPESCRIPT_CONFIG = TypeScriptConfig()


def _default_logger() -> logging.Logger:
    return logging.getLogger("metro_monorepo")


@dataclass(frozen=True)
class HelperOptions:
    """Explicit inputs of a helper. Every derived value comes from these."""

    project_root: Path | None = None
    logger: logging.Logger | None = field(default_factory=_default_logger)
    default_config: Mapping[str, Any] | None = field(default_factory=dict)
    monorepo_finders: tuple[MonorepoFinderFn, ...] = ()
    ignored_folders: tuple[str, ...] | None = None
    watch_folders: tuple[str, ...] = ()
    typescript: TypeScriptConfig | None = None
    monorepo: MonorepoInfo | None = None
    resolver: CustomResolver | None = None
    config: Mapping[str, Any] | None = None


def default_helper_options() -> HelperOptions:
    return HelperOptions(monorepo_finders=DEFAULT_FINDERS)


def coerce_typescript(
    enabled: bool | str | Mapping[str, Any] | TypeScriptConfig,
) -> TypeScriptConfig | None:
    """Turn the TypeScript toggle accepted by settings into a config (or None)."""
    if isinstance(enabled, TypeScriptConfig):
        return enabled
    if enabled is True:
        return DEFAULT_TYPESCRIPT_CONFIG
    if enabled is False:
        return None
    if isinstance(enabled, str):
        if not enabled:
            raise ConfigError("Transformer module name cannot be empty.")
        return dataclasses.replace(DEFAULT_TYPESCRIPT_CONFIG, transformer_module_name=enabled)
    if isinstance(enabled, Mapping):
        changes: dict[str, Any] = {}
        name = enabled.get("transformerModuleName", enabled.get("transformer_module_name"))
        if name is not None:
            changes["transformer_module_name"] = name
        extensions = enabled.get("fileExtensions", enabled.get("file_extensions"))
        if extensions is not None:
            changes["file_extensions"] = tuple(extensions)
        return dataclasses.replace(DEFAULT_TYPESCRIPT_CONFIG, **changes)
    raise ConfigError(f"Unsupported TypeScript setting: {enabled!r}")


def resolve_transformer(module_name: str, project_root: Path | str) -> str:
    """Locate the TypeScript transformer module from the project root."""
    return resolve_sync(module_name, basedir=project_root)


class MetroConfigHelper:
    """Builder for the bundler configuration of a project inside a monorepo."""

    def __init__(
        self,
        options: HelperOptions | None = None,
        *,
        cached_monorepo: MonorepoInfo | None = None,
    ) -> None:
        self._options = options or HelperOptions()
        self._lock = threading.RLock()
        self._monorepo = self._options.monorepo or cached_monorepo
        self._resolver = self._options.resolver
        self._config = self._options.config

    @property
    def options(self) -> HelperOptions:
        return self._options

    def _derive(self, *, keep_monorepo: bool = True, **changes: Any) -> MetroConfigHelper:
        options = dataclasses.replace(self._options, **changes)
        cached = self._monorepo if keep_monorepo else None
        return MetroConfigHelper(options, cached_monorepo=cached)

    # ---- plain settings ------------------------------------------------------------------

    def project_root(self) -> Path:
        if not self._options.project_root:
            raise ConfigError("Project's root folder not set.")
        return self._options.project_root

    def with_project_root(self, project_root: Path | str) -> MetroConfigHelper:
        return self._derive(keep_monorepo=False, project_root=Path(project_root))

    def logger(self) -> logging.Logger:
        if self._options.logger is None:
            raise ConfigError("Logger not set.")
        return self._options.logger

    def with_logger(self, logger: logging.Logger) -> MetroConfigHelper:
        return self._derive(logger=logger)

    def default_config(self) -> Mapping[str, Any]:
        if self._options.default_config is None:
            raise ConfigError("Default config not set.")
        return self._options.default_config

    def with_default_config(self, default_config: Mapping[str, Any]) -> MetroConfigHelper:
        return self._derive(default_config=default_config)

    def with_monorepo_finder(self, *finders: MonorepoFinderFn) -> MetroConfigHelper:
        added = tuple(f for f in finders if callable(f))
        return self._derive(
            keep_monorepo=False,
            monorepo_finders=self._options.monorepo_finders + added,
        )

    def with_ignored_folders(self, *patterns: str) -> MetroConfigHelper:
        return self._derive(keep_monorepo=False, ignored_folders=tuple(patterns))

    def typescript(self) -> TypeScriptConfig | None:
        return self._options.typescript

    def with_typescript(
        self, enabled: bool | str | Mapping[str, Any] | TypeScriptConfig = True
    ) -> MetroConfigHelper:
        return self._derive(typescript=coerce_typescript(enabled))

    def with_watch_folder(self, *folders: str | Path) -> MetroConfigHelper:
        added = tuple(str(folder) for folder in folders)
        return self._derive(watch_folders=self._options.watch_folders + added)

    # ---- derived values ------------------------------------------------------------------

    def find_monorepo(self) -> MonorepoInfo | None:
        return locate(
            self.project_root(),
            self._options.monorepo_finders,
            logger=self.logger(),
            ignored_folders=self._options.ignored_folders,
        )

    def monorepo(self) -> MonorepoInfo:
        with self._lock:
            if self._monorepo is None:
                self._monorepo = self.find_monorepo()
            if self._monorepo is None:
                raise ConfigError("Monorepo not set.")
            return self._monorepo

    def with_monorepo(self, monorepo: MonorepoInfo) -> MetroConfigHelper:
        return self._derive(monorepo=monorepo)

    def package_roots(self) -> list[str]:
        return [str(root) for root in self.monorepo().package_roots]

    def watch_folders(self) -> list[str]:
        return unique(
            [
                str(self.monorepo().root),
                *self.package_roots(),
                *self._options.watch_folders,
            ]
        )

    def create_custom_resolver(self) -> LayeredResolver:
        monorepo = self.monorepo()
        return LayeredResolver(
            monorepo,
            project_root=monorepo.project.root,
            logger=self.logger(),
        )

    def custom_resolver(self) -> CustomResolver:
        with self._lock:
            if self._resolver is None:
                self._resolver = self.create_custom_resolver()
            return self._resolver

    def with_custom_resolver(self, resolver: CustomResolver) -> MetroConfigHelper:
        return self._derive(resolver=resolver)

    def config(self) -> Mapping[str, Any]:
        with self._lock:
            if self._config is None:
                self._config = self.generate()
            return self._config

    def with_config(self, config: Mapping[str, Any]) -> MetroConfigHelper:
        return self._derive(config=config)

    def generate(self) -> dict[str, Any]:
        """Assemble the configuration record handed to the bundler."""
        defaults = self.default_config()
        config: dict[str, Any] = dict(defaults)

        config["watchFolders"] = [
            *(defaults.get("watchFolders") or []),
            *compute_watch_folders(self.monorepo(), self._options.watch_folders),
        ]
        config["resolver"] = {
            **(defaults.get("resolver") or {}),
            "resolveRequest": self.custom_resolver(),
        }

        typescript = self.typescript()
        if typescript is not None:
            if not config.get("getTransformModulePath"):
                module_name = typescript.transformer_module_name
                project_root = self.project_root()
                config["getTransformModulePath"] = lambda: resolve_transformer(
                    module_name, project_root
                )
            config["sourceExts"] = [
                *(config.get("sourceExts") or []),
                *typescript.file_extensions,
            ]

        return config


def metro_config_helper(
    project_root: Path | str, options: HelperOptions | None = None
) -> MetroConfigHelper:
    return MetroConfigHelper(options or default_helper_options()).with_project_root(project_root)


def metro_config(project_root: Path | str) -> dict[str, Any]:
    """Configuration record for ``project_root`` with default helper options."""
    return metro_config_helper(project_root).generate()
