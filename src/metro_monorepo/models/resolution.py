"""Resolver request and result types."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from collections.abc import Iterable, Mapping
from typing import Any

RELATIVE_PREFIXES = ("./", "../")


class ResolutionType(str, enum.Enum):
    ASSET = "asset"
    SOURCE_FILE = "sourceFile"


@dataclass(frozen=True)
class Resolution:
    """A concrete file the bundler should load."""

    type: ResolutionType
    file_path: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type.value, "filePath": self.file_path}


@dataclass(frozen=True)
class ResolverContext:
    """One resolution request; built per call and then discarded."""

    origin_module_path: str
    module_name: str
    platform: str
    source_exts: tuple[str, ...]
    asset_exts: tuple[str, ...] = ()

    @property
    def is_relative(self) -> bool:
        return self.module_name.startswith(RELATIVE_PREFIXES)

    @classmethod
    def create(
        cls,
        *,
        origin_module_path: str,
        module_name: str,
        platform: str,
        source_exts: Iterable[str],
        asset_exts: Iterable[str] = (),
    ) -> ResolverContext:
        return cls(
            origin_module_path=str(origin_module_path),
            module_name=module_name,
            platform=platform,
            source_exts=tuple(source_exts),
            asset_exts=tuple(asset_exts),
        )

    @classmethod
    def from_metro(
        cls, metro: Mapping[str, Any], module_name: str, platform: str
    ) -> ResolverContext:
        """Build a context from the bundler's resolver config mapping."""
        return cls.create(
            origin_module_path=metro["originModulePath"],
            module_name=module_name,
            platform=platform,
            source_exts=metro.get("sourceExts") or (),
            asset_exts=metro.get("assetExts") or (),
        )
