"""Discover source images for each category.

The source root holds one folder per category::

  pics/
    h/   landscape images
    v/   portrait images

Only files directly inside a category folder are considered, filtered by
extension (case-insensitive).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

LOGGER = logging.getLogger(__name__)

CATEGORIES = ("h", "v")
CATEGORY_LABELS: Dict[str, str] = {
    "h": "横屏",
    "v": "竖屏",
}

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".avif", ".tiff"}


def is_image(p: Path) -> bool:
    return p.suffix.lower() in IMAGE_EXTS


def classify_category(category: str, source_root: Path) -> List[Path]:
    """Return the recognized images of ``category`` sorted by file name.

    A missing or unreadable category folder yields an empty list.
    """
    folder = Path(source_root) / category
    items: List[Path] = []
    try:
        for p in folder.iterdir():
            if p.is_file() and is_image(p):
                items.append(p)
    except OSError as exc:
        LOGGER.warning("Could not read directory %s: %s", folder, exc)
        return []
    items.sort(key=lambda p: p.name)
    return items
