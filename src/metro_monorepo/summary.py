"""Human-readable summary rendering."""

from __future__ import annotations

from typing import Any


def render_summary(report: dict[str, Any]) -> str:
    """Return a Markdown string with totals and a table of packages."""
    totals = report.get("totals", {})
    monorepo = report.get("monorepo", {})
    packages = monorepo.get("packages", [])
    project = monorepo.get("project", {})

    lines = []
    lines.append("# Monorepo Summary")
    lines.append("")
    lines.append(f"Root: `{monorepo.get('root', '(unknown)')}`")
    lines.append(f"Project: `{project.get('root', '(unknown)')}`")
    lines.append("")
    lines.append(
        f"Total packages: {totals.get('packages', 0)} | "
        f"Watch folders: {totals.get('watchFolders', 0)}"
    )
    lines.append("")
    lines.append("| Package root | node_modules |")
    lines.append("| --- | --- |")

    for package in packages:
        lines.append(f"| {package.get('root', '')} | {package.get('nodeModulesRoot', '')} |")

    if not packages:
        lines.append("| (no packages found) | n/a |")

    return "\n".join(lines) + "\n"
