"""Parse lerna.json."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .json_file import read_json_object

FILENAME = "lerna.json"
NATIVE_WORKSPACE_CLIENT = "yarn"


@dataclass(slots=True, frozen=True)
class LernaManifest:
    """The parts of lerna.json that decide where packages live."""

    use_workspaces: bool
    npm_client: str | None
    packages: tuple[Any, ...] | None

    @property
    def delegates_to_workspaces(self) -> bool:
        """True when packages must be read from package.json ``workspaces``."""
        return self.use_workspaces and self.npm_client == NATIVE_WORKSPACE_CLIENT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LernaManifest:
        packages = data.get("packages")
        npm_client = data.get("npmClient")
        return cls(
            use_workspaces=data.get("useWorkspaces") is True,
            npm_client=npm_client if isinstance(npm_client, str) else None,
            packages=tuple(packages) if isinstance(packages, list) else None,
        )


def parse(directory: Path) -> LernaManifest | None:
    """Return the lerna manifest in ``directory``, or None when absent."""
    data = read_json_object(directory / FILENAME)
    if data is None:
        return None
    return LernaManifest.from_dict(data)
