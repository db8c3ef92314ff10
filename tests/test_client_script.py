import json
import random
import re
import shutil
import subprocess

import pytest

from randompic.client_script import (
    ClientConfig,
    PicSession,
    asset_url,
    normalize_domain,
    render_client_script,
    write_client_script,
)
from randompic.manifest import build_manifest


@pytest.mark.parametrize("raw,expected", [
    ("", ""),
    (None, ""),
    ("https://cdn.example.com/", "https://cdn.example.com"),
    ("https://cdn.example.com", "https://cdn.example.com"),
    ("https://cdn.example.com/pics//", "https://cdn.example.com/pics/"),
])
def test_normalize_domain(raw, expected):
    assert normalize_domain(raw) == expected


def test_asset_url_relative_and_prefixed():
    assert asset_url("", "h", 2) == "h/2.webp"
    assert asset_url("https://cdn.example.com", "v", 0) == "https://cdn.example.com/v/0.webp"


def test_session_caches_first_draw():
    """Repeated calls within one session return the same URL"""
    session = PicSession({"h": 3, "v": 0}, rng=random.Random(11))

    first = session.random_pic_h()
    assert re.fullmatch(r"h/[0-2]\.webp", first)
    for _ in range(20):
        assert session.random_pic_h() == first


def test_session_empty_category_returns_empty_string():
    session = PicSession({"h": 3, "v": 0})
    assert session.random_pic_v() == ""
    assert session.random_pic_v() == ""
    assert session.random_url("unknown") == ""


def test_session_from_config_strips_trailing_slash():
    config = ClientConfig.from_manifest(build_manifest({"h": 3, "v": 2}), "https://cdn.example.com/")
    session = PicSession.from_config(config, rng=random.Random(1))

    assert re.fullmatch(r"https://cdn\.example\.com/h/[0-2]\.webp", session.random_pic_h())
    assert re.fullmatch(r"https://cdn\.example\.com/v/[01]\.webp", session.random_pic_v())


def test_new_sessions_draw_independently():
    """Over many page loads every index gets picked"""
    rng = random.Random(99)
    seen = {PicSession({"h": 3}, rng=rng).random_pic_h() for _ in range(200)}
    assert seen == {"h/0.webp", "h/1.webp", "h/2.webp"}


def test_client_config_from_manifest():
    manifest = build_manifest({"h": 4, "v": 1})
    config = ClientConfig.from_manifest(manifest, "https://cdn.example.com/")
    assert dict(config.counts) == {"h": 4, "v": 1}
    assert config.domain == "https://cdn.example.com"


def test_script_embeds_counts_and_domain():
    manifest = build_manifest({"h": 3, "v": 0})
    script = render_client_script(manifest, "https://cdn.example.com/")

    assert f"Generated at {manifest.generated_at}" in script
    assert 'counts: {"h": 3, "v": 0}' in script
    assert 'domain: "https://cdn.example.com"' in script
    assert "https://cdn.example.com/\"" not in script
    assert 'cached: {"h": null, "v": null}' in script


def test_script_exposes_entry_points_and_dom_hooks():
    script = render_client_script(build_manifest({"h": 1, "v": 1}))

    assert "window.getRandomPicH = function() { return getRandomUrl('h'); };" in script
    assert "window.getRandomPicV = function() { return getRandomUrl('v'); };" in script
    assert 'domain: ""' in script
    assert "if (session.cached[type]) return session.cached[type];" in script
    assert "Math.floor(Math.random() * count)" in script
    assert "document.getElementById('bg-box')" in script
    assert "document.querySelectorAll('[data-random-bg]')" in script
    assert "'/random/' + type" in script
    assert "img.onload" in script
    assert "DOMContentLoaded" in script


def test_write_client_script(tmp_path):
    path = tmp_path / "random.js"
    write_client_script(build_manifest({"h": 2, "v": 2}), "", path)
    assert path.read_text(encoding="utf-8").startswith("/**")


def test_script_strips_only_one_trailing_slash():
    script = render_client_script(build_manifest({"h": 1, "v": 1}), "https://cdn.example.com/pics//")

    assert 'domain: "https://cdn.example.com/pics/"' in script
    assert "session.domain.slice" not in script


# Minimal browser globals: no matching elements, document already parsed
_BROWSER_STUB = """\
var window = globalThis;
var document = {
    readyState: 'complete',
    getElementById: function() { return null; },
    getElementsByTagName: function() { return []; },
    querySelectorAll: function() { return []; }
};
"""

_REPORT = """
var h = [];
for (var i = 0; i < 50; i++) h.push(window.getRandomPicH());
console.log(JSON.stringify({h: h, v: [window.getRandomPicV(), window.getRandomPicV()]}));
"""


def _run_in_node(script, tmp_path):
    node = shutil.which("node")
    if node is None:
        pytest.skip("node is not installed")
    path = tmp_path / "run.js"
    path.write_text(_BROWSER_STUB + script + _REPORT, encoding="utf-8")
    result = subprocess.run([node, str(path)], capture_output=True, text=True, timeout=30, check=True)
    return json.loads(result.stdout)


def test_generated_script_keeps_one_url_per_page_load(tmp_path):
    """getRandomPicH is stable within a page, getRandomPicV is empty"""
    script = render_client_script(build_manifest({"h": 3, "v": 0}), "https://cdn.example.com/")

    out = _run_in_node(script, tmp_path)

    assert re.fullmatch(r"https://cdn\.example\.com/h/[0-2]\.webp", out["h"][0])
    assert set(out["h"]) == {out["h"][0]}
    assert out["v"] == ["", ""]


def test_generated_script_relative_urls(tmp_path):
    out = _run_in_node(render_client_script(build_manifest({"h": 1, "v": 2})), tmp_path)

    assert out["h"][0] == "h/0.webp"
    assert re.fullmatch(r"v/[01]\.webp", out["v"][0])
    assert out["v"][1] == out["v"][0]
