"""Run directories for persisted route outputs."""

from __future__ import annotations

import json
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import settings

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def _slug(label: str) -> str:
    return _UNSAFE_CHARS.sub("-", label.strip()).strip("-")[:40]


class FileStorage:
    """Stores each optimization run in its own directory under ``<data_root>/outputs``."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / "outputs"
        self.output_root.mkdir(parents=True, exist_ok=True)

    def make_run_directory(self, prefix: str = "route", label: str | None = None) -> Path:
        """Create ``<prefix>[_<label>]_<UTC timestamp>``; a random suffix keeps same-second runs apart."""
        parts = [prefix]
        if label and _slug(label):
            parts.append(_slug(label))
        parts.append(datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"))
        path = self.output_root / "_".join(parts)
        if path.exists():
            path = path.with_name(f"{path.name}_{uuid.uuid4().hex[:6]}")
        path.mkdir(parents=True)
        return path

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=indent, default=str), encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
