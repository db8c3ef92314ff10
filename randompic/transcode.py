"""Re-encode a category's source images to WebP and publish them by index.

Images are encoded first, in parallel, into a staging folder. Only the
images that encoded successfully are then shuffled and renamed to their
final ``<index>.webp`` names, so the published indices always form the dense
range ``0..count-1`` even when some sources fail to decode.
"""

from __future__ import annotations

import concurrent.futures
import logging
import os
import random
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from PIL import Image, ImageOps
from tqdm import tqdm

from .classify import classify_category
from .shuffle import shuffle_renumber

LOGGER = logging.getLogger(__name__)

WEBP_QUALITY = 80
OUTPUT_EXT = ".webp"
STAGING_DIRNAME = ".staging"

# Number of parallel encode workers
MAX_WORKERS = os.cpu_count() or 4

Encoder = Callable[[Path, Path, int], None]


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("LA", "PA", "RGBA") or "transparency" in img.info


def encode_webp(src: Path, dst: Path, quality: int = WEBP_QUALITY) -> None:
    """Encode ``src`` to a WebP file at ``dst``.

    Animated inputs keep their first frame only.
    """
    with Image.open(src) as img:
        img = ImageOps.exif_transpose(img)
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA" if _has_alpha(img) else "RGB")
        img.save(dst, "WEBP", quality=quality)


def _encode_one(task: Tuple[Path, Path, int, Encoder]) -> Optional[Path]:
    """Worker function to encode a single file."""
    src, dst, quality, encoder = task
    try:
        encoder(src, dst, quality)
    except Exception as exc:
        LOGGER.error("Error processing %s: %s", src, exc)
        try:
            dst.unlink(missing_ok=True)
        except OSError:
            LOGGER.debug("Could not remove partial output %s", dst)
        return None
    return dst


def transcode_batch(
    files: Sequence[Path],
    staging_dir: Path,
    quality: int = WEBP_QUALITY,
    workers: int = MAX_WORKERS,
    encoder: Encoder = encode_webp,
    desc: str = "Encoding images",
) -> List[Path]:
    """Encode every file into ``staging_dir`` and return the staged outputs.

    Staged files are named by their position in ``files``. Failed images are
    logged and left out; the result keeps the input order.
    """
    ensure_dir(staging_dir)
    tasks = [(src, staging_dir / f"{pos}{OUTPUT_EXT}", quality, encoder) for pos, src in enumerate(files)]
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        results = list(tqdm(executor.map(_encode_one, tasks), total=len(tasks), desc=desc))
    return [p for p in results if p is not None]


def publish(staged: Sequence[Path], out_dir: Path, rng: Optional[random.Random] = None) -> int:
    """Rename staged outputs to ``<index>.webp`` in a random order.

    Returns the number of published files.
    """
    ensure_dir(out_dir)
    for asset in shuffle_renumber(staged, rng):
        asset.source.replace(out_dir / f"{asset.index}{OUTPUT_EXT}")
    return len(staged)


def process_category(
    category: str,
    source_root: Path,
    dest_root: Path,
    *,
    quality: int = WEBP_QUALITY,
    workers: int = MAX_WORKERS,
    encoder: Encoder = encode_webp,
    rng: Optional[random.Random] = None,
) -> int:
    """Classify, encode and publish one category. Returns its final count."""
    input_dir = Path(source_root) / category
    out_dir = Path(dest_root) / category
    ensure_dir(out_dir)

    files = classify_category(category, source_root)
    if not files:
        LOGGER.info("No images found in %s", input_dir)
        return 0

    LOGGER.info("Found %d images in %s...", len(files), category)
    staging_dir = out_dir / STAGING_DIRNAME
    staged = transcode_batch(files, staging_dir, quality, workers, encoder, desc=f"Encoding {category}")
    count = publish(staged, out_dir, rng)
    shutil.rmtree(staging_dir, ignore_errors=True)

    failed = len(files) - count
    if failed:
        LOGGER.warning("%d of %d images in %s failed to encode and were left out", failed, len(files), category)
    return count
