"""
Build the static random image API from a folder of source images.

Input layout:   <source>/h/*, <source>/v/*  (landscape / portrait)
Output layout:  <dest>/h/<index>.webp, <dest>/v/<index>.webp,
                manifest.json, random.js, gallery.html, index.html,
                lib/*.js, .wranglerignore

Usage:
  DOMAIN=https://cdn.example.com python3 -m randompic
  python3 -m randompic --source pics --dest dest [--quality 80] [--verbose]

Notes:
- The output folder is removed and recreated on every run.
- Indices are reshuffled on every build; nothing links an index to a source
  file across builds.
- A source image that fails to encode is left out and does not use up an
  index, so manifest counts always match the published files.
"""

from __future__ import annotations

import argparse
import concurrent.futures
import logging
import os
import random
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .classify import CATEGORIES
from .client_script import CLIENT_SCRIPT_NAME, ClientConfig, PicSession, write_client_script
from .manifest import MANIFEST_NAME, Manifest, build_manifest, write_manifest
from .pages import write_gallery, write_index, write_wranglerignore
from .transcode import MAX_WORKERS, WEBP_QUALITY, Encoder, encode_webp, ensure_dir, process_category
from .vendor import DEFAULT_VENDOR_ROOT, copy_vendor_libs

LOGGER = logging.getLogger(__name__)


class BuildError(RuntimeError):
    """Invalid build configuration."""


@dataclass
class BuildConfig:
    source_dir: Path = Path("pics")
    dest_dir: Path = Path("dest")
    domain: str = ""
    quality: int = WEBP_QUALITY
    workers: int = MAX_WORKERS
    vendor_root: Path = DEFAULT_VENDOR_ROOT

    def validate(self) -> None:
        if not 1 <= self.quality <= 100:
            raise BuildError(f"WebP quality must be within 1..100, got {self.quality}")
        if self.workers < 1:
            raise BuildError(f"Worker count must be at least 1, got {self.workers}")
        source = Path(self.source_dir).resolve()
        dest = Path(self.dest_dir).resolve()
        # dest is wiped on every build; it must not overlap the source tree
        if dest == source or dest in source.parents or source in dest.parents:
            raise BuildError(f"Output folder {dest} overlaps source folder {source}")


def clean_output(dest: Path) -> None:
    if dest.exists():
        shutil.rmtree(dest)
    ensure_dir(dest)


def emit_side_artifacts(manifest: Manifest, config: BuildConfig) -> List[str]:
    """Write the artifacts that are not needed to serve random URLs.

    Each runs as its own task; a failing task is logged and does not undo
    the others. Returns the names of the tasks that failed.
    """
    dest = config.dest_dir
    tasks: Dict[str, Callable[[], object]] = {
        "vendor libs": lambda: copy_vendor_libs(dest, config.vendor_root),
        "gallery page": lambda: write_gallery(manifest, config.domain, dest),
        "index page": lambda: write_index(dest),
        "wranglerignore": lambda: write_wranglerignore(dest),
    }
    failed: List[str] = []
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(tasks)) as executor:
        futures = {executor.submit(fn): name for name, fn in tasks.items()}
        for future in concurrent.futures.as_completed(futures):
            name = futures[future]
            try:
                future.result()
            except Exception:
                LOGGER.exception("Failed to generate %s", name)
                failed.append(name)
    return sorted(failed)


def run_build(
    config: BuildConfig,
    *,
    encoder: Encoder = encode_webp,
    rng: Optional[random.Random] = None,
) -> Manifest:
    """Run the whole pipeline and return the manifest that was written."""
    config.validate()
    source = Path(config.source_dir)
    dest = Path(config.dest_dir)

    LOGGER.info("Starting build process...")
    clean_output(dest)

    counts: Dict[str, int] = {}
    for category in CATEGORIES:
        counts[category] = process_category(
            category,
            source,
            dest,
            quality=config.quality,
            workers=config.workers,
            encoder=encoder,
            rng=rng,
        )

    manifest = build_manifest(counts)
    write_manifest(manifest, dest / MANIFEST_NAME)
    write_client_script(manifest, config.domain, dest / CLIENT_SCRIPT_NAME)

    failed = emit_side_artifacts(manifest, config)
    if failed:
        LOGGER.warning("Build finished with failed side artifacts: %s", ", ".join(failed))

    session = PicSession.from_config(ClientConfig.from_manifest(manifest, config.domain))
    for category in CATEGORIES:
        sample = session.random_url(category)
        if sample:
            LOGGER.info("Sample %s URL: %s", category, sample)

    LOGGER.info("Build complete!")
    LOGGER.info("Manifest: %s", manifest.to_dict())
    return manifest


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Build the static random image API")
    ap.add_argument("--source", default=os.environ.get("RANDOMPIC_SOURCE", "pics"),
                    help="Folder with one subfolder per category (default: pics or RANDOMPIC_SOURCE)")
    ap.add_argument("--dest", default=os.environ.get("RANDOMPIC_DEST", "dest"),
                    help="Output folder, recreated on every build (default: dest or RANDOMPIC_DEST)")
    ap.add_argument("--domain", default=os.environ.get("DOMAIN", ""),
                    help="URL prefix for published assets, e.g. a CDN origin (default: DOMAIN env, empty = relative)")
    ap.add_argument("--quality", type=int, default=WEBP_QUALITY, help="WebP quality 1-100")
    ap.add_argument("--workers", type=int, default=MAX_WORKERS, help="Parallel encode workers")
    ap.add_argument("--vendor-root", default=str(DEFAULT_VENDOR_ROOT),
                    help="Local package folder holding the gallery's JS libraries")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return ap.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> BuildConfig:
    return BuildConfig(
        source_dir=Path(args.source),
        dest_dir=Path(args.dest),
        domain=args.domain,
        quality=args.quality,
        workers=args.workers,
        vendor_root=Path(args.vendor_root),
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    try:
        run_build(config_from_args(args))
    except Exception:
        LOGGER.exception("Build failed")
        return 1
    return 0

