"""Build manifest: per-category asset counts plus build time.

Serialized flat, e.g. ``{"h": 14, "v": 9, "generated_at": "2026-01-26T10:05:52.239Z"}``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

MANIFEST_NAME = "manifest.json"


@dataclass(frozen=True)
class Manifest:
    counts: Mapping[str, int]
    generated_at: str

    def count(self, category: str) -> int:
        return int(self.counts.get(category, 0))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {k: int(v) for k, v in self.counts.items()}
        data["generated_at"] = self.generated_at
        return data


def iso_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_manifest(counts: Mapping[str, int], now: Optional[datetime] = None) -> Manifest:
    for category, n in counts.items():
        if n < 0:
            raise ValueError(f"Negative count for category {category!r}: {n}")
    return Manifest(counts=MappingProxyType(dict(counts)), generated_at=iso_timestamp(now))


def write_manifest(manifest: Manifest, path: Path) -> None:
    Path(path).write_text(json.dumps(manifest.to_dict(), indent=2) + "\n", encoding="utf-8")


def load_manifest(path: Path) -> Manifest:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict) or "generated_at" not in data:
        raise ValueError(f"Manifest has unexpected format: {path}")
    generated_at = str(data.pop("generated_at"))
    return Manifest(counts=MappingProxyType({k: int(v) for k, v in data.items()}), generated_at=generated_at)
