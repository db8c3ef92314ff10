"""Copy the gallery's front-end libraries into ``<dest>/lib``.

Each library is taken from a local package folder (``node_modules`` by
default) when present, otherwise downloaded from unpkg. A library that can
be found neither way is skipped with a warning; the gallery then degrades
but the build still succeeds.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import requests

LOGGER = logging.getLogger(__name__)

LIB_DIRNAME = "lib"
DEFAULT_VENDOR_ROOT = Path("node_modules")
CDN_URL = "https://unpkg.com/{package}@{version}/{path}"
DOWNLOAD_TIMEOUT = 30


@dataclass(frozen=True)
class VendorLib:
    name: str
    package: str
    path: str
    version: str

    @property
    def url(self) -> str:
        return CDN_URL.format(package=self.package, version=self.version, path=self.path)


VENDOR_LIBS = (
    VendorLib("masonry.pkgd.min.js", "masonry-layout", "dist/masonry.pkgd.min.js", "4.2.2"),
    VendorLib("imagesloaded.pkgd.min.js", "imagesloaded", "imagesloaded.pkgd.min.js", "5.0.0"),
    VendorLib("lozad.min.js", "lozad", "dist/lozad.min.js", "1.16.0"),
)


def download(lib: VendorLib, target: Path, session: requests.Session) -> None:
    response = session.get(lib.url, timeout=DOWNLOAD_TIMEOUT)
    response.raise_for_status()
    target.write_bytes(response.content)


def copy_vendor_libs(
    dest: Path,
    vendor_root: Path = DEFAULT_VENDOR_ROOT,
    session: Optional[requests.Session] = None,
) -> List[str]:
    """Copy every library in ``VENDOR_LIBS``; return the names that made it."""
    if session is None:
        with requests.Session() as owned:
            return copy_vendor_libs(dest, vendor_root, owned)

    lib_dir = Path(dest) / LIB_DIRNAME
    lib_dir.mkdir(parents=True, exist_ok=True)

    copied: List[str] = []
    for lib in VENDOR_LIBS:
        target = lib_dir / lib.name
        local = Path(vendor_root) / lib.package / lib.path
        try:
            if local.is_file():
                shutil.copyfile(local, target)
            else:
                LOGGER.debug("Library not found locally: %s; fetching %s", local, lib.url)
                download(lib, target, session)
        except (OSError, requests.RequestException) as exc:
            LOGGER.warning("Failed to copy library %s: %s", lib.name, exc)
            continue
        copied.append(lib.name)
    return copied
