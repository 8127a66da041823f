"""Report aggregation and JSON-friendly output."""

from __future__ import annotations

from typing import Any

from .models.monorepo_info import MonorepoInfo


def build_report(monorepo: MonorepoInfo, watch_folders: list[str]) -> dict[str, Any]:
    """Combine a located monorepo and its watch folders into a single report.

    The report passes the monorepo description through unchanged and adds the
    computed watch folders plus a few totals for quick inspection.
    """

    report: dict[str, Any] = {
        "version": "1",
        "monorepo": monorepo.to_dict(),
        "watchFolders": list(watch_folders),
        "totals": {
            "packages": len(monorepo.packages),
            "watchFolders": len(watch_folders),
        },
    }

    return report
