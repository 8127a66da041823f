"""Tolerant JSON manifest reader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def read_json_object(path: Path | str) -> dict[str, Any] | None:
    """Return the parsed JSON object stored at ``path``.

    A missing file, or a document that is not a JSON object, yields None.
    Malformed JSON raises ``json.JSONDecodeError``.
    """
    path = Path(path)
    if not path.is_file():
        return None

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        return data
    return None
