import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
import requests
from PIL import Image


@pytest.fixture(autouse=True)
def no_network(monkeypatch):
    """Make every requests download fail fast"""
    def _blocked(self, url, *args, **kwargs):
        raise requests.ConnectionError(f"network disabled in tests: {url}")

    monkeypatch.setattr(requests.Session, "get", _blocked)


@pytest.fixture
def make_image():
    """Write a small real image and return its path"""
    def _make(path: Path, size=(24, 16), mode="RGB", color=(200, 40, 40)):
        path.parent.mkdir(parents=True, exist_ok=True)
        if mode == "P":
            img = Image.new("RGB", size, color).convert("P")
        elif mode == "RGBA":
            img = Image.new("RGBA", size, color + (128,))
        else:
            img = Image.new(mode, size, color)
        img.save(path)
        return path

    return _make


@pytest.fixture
def source_root(tmp_path, make_image):
    """Source tree with 5 landscape images and no portrait folder"""
    root = tmp_path / "pics"
    for name in ("a.jpg", "b.png", "c.JPG", "d.jpeg", "e.gif"):
        make_image(root / "h" / name)
    (root / "h" / "notes.txt").write_text("not an image", encoding="utf-8")
    return root


@pytest.fixture
def dest_root(tmp_path):
    return tmp_path / "dest"


@pytest.fixture
def vendor_root(tmp_path):
    return tmp_path / "node_modules"
