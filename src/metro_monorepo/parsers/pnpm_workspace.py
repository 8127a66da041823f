"""Parse pnpm-workspace.yaml."""

from __future__ import annotations

from pathlib import Path

FILENAME = "pnpm-workspace.yaml"


def parse(path: Path) -> tuple[list[str], list[str]] | None:
    """Return ``(patterns, negated_patterns)`` from a pnpm workspace file.

    Negated entries (``!**/test/**``) are returned without their ``!`` prefix.
    Returns None when the file does not exist.
    """
    import yaml

    if not path.is_file():
        return None

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        return [], []
    packages = data.get("packages")
    if not isinstance(packages, list):
        return [], []

    patterns: list[str] = []
    negated: list[str] = []
    for entry in packages:
        if not isinstance(entry, str):
            continue
        if entry.startswith("!"):
            negated.append(entry[1:])
        else:
            patterns.append(entry)

    return patterns, negated
