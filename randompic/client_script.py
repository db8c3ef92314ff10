"""Generate ``random.js``, the client half of the random image API.

The script picks a random index per category in the browser and builds the
asset URL from the counts frozen at build time. Within one page load each
category is drawn once: later calls return the cached URL, so an image used
in several places on a page stays the same.

``PicSession`` implements the same selection rules in Python.
"""

from __future__ import annotations

import json
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from jinja2 import Environment

from .classify import CATEGORIES
from .manifest import Manifest
from .transcode import OUTPUT_EXT

CLIENT_SCRIPT_NAME = "random.js"
BACKGROUND_ELEMENT_ID = "bg-box"
BACKGROUND_ATTR = "data-random-bg"

_js_env = Environment(autoescape=False, keep_trailing_newline=True)


def normalize_domain(domain: Optional[str]) -> str:
    """Drop a single trailing slash from a domain prefix."""
    domain = (domain or "").strip()
    if domain.endswith("/"):
        domain = domain[:-1]
    return domain


def asset_url(domain: str, category: str, index: int) -> str:
    prefix = f"{domain}/" if domain else ""
    return f"{prefix}{category}/{index}{OUTPUT_EXT}"


def entry_point_name(category: str) -> str:
    return f"getRandomPic{category.upper()}"


@dataclass(frozen=True)
class ClientConfig:
    """Counts and domain prefix as embedded in the script; the domain is
    normalized exactly once, here."""

    counts: Mapping[str, int]
    domain: str

    @classmethod
    def from_manifest(cls, manifest: Manifest, domain: Optional[str]) -> "ClientConfig":
        return cls(counts={c: manifest.count(c) for c in CATEGORIES}, domain=normalize_domain(domain))


class PicSession:
    """Random selection state for one page load.

    ``domain`` is used as given; build one from a ``ClientConfig`` to get the
    normalized prefix.
    """

    def __init__(self, counts: Mapping[str, int], domain: str = "", rng: Optional[random.Random] = None) -> None:
        self.counts = dict(counts)
        self.domain = domain or ""
        self._rng = rng or random.Random()
        self._cached: Dict[str, Optional[str]] = {c: None for c in CATEGORIES}

    @classmethod
    def from_config(cls, config: ClientConfig, rng: Optional[random.Random] = None) -> "PicSession":
        return cls(config.counts, config.domain, rng)

    def random_url(self, category: str) -> str:
        count = self.counts.get(category, 0)
        if not count:
            return ""
        cached = self._cached.get(category)
        if cached:
            return cached
        url = asset_url(self.domain, category, self._rng.randrange(count))
        self._cached[category] = url
        return url

    def random_pic_h(self) -> str:
        return self.random_url("h")

    def random_pic_v(self) -> str:
        return self.random_url("v")


CLIENT_SCRIPT_TEMPLATE = _js_env.from_string("""\
/**
 * Static Random Pic API client logic
 * Generated at {{ generated_at }}
 */
(function() {
    var session = {
        counts: {{ counts_json }},
        domain: {{ domain_json }},
        cached: {{ cached_json }}
    };

    function getRandomUrl(type) {
        var count = session.counts[type];
        if (!count) return '';
        if (session.cached[type]) return session.cached[type];

        // 0-based index
        var num = Math.floor(Math.random() * count);
        var url = (session.domain ? session.domain + '/' : '') + type + '/' + num + '{{ ext }}';
        session.cached[type] = url;
        return url;
    }
{% for category in categories %}
    window.{{ entry_points[category] }} = function() { return getRandomUrl('{{ category }}'); };
{%- endfor %}

    function isCategory(type) {
        return Object.prototype.hasOwnProperty.call(session.counts, type);
    }

    function setBackground(el, url) {
        if (!url) return;
        var img = new Image();
        img.onload = function() {
            el.style.backgroundImage = 'url("' + url + '")';
            el.classList.add('loaded');
        };
        img.src = url;
    }

    function setRandomBackground() {
        var bgBox = document.getElementById('{{ bg_id }}');
        if (bgBox) {
            setBackground(bgBox, getRandomUrl('{{ bg_category }}'));
        }
    }

    function initImgTags() {
        var imgTags = document.getElementsByTagName('img');
        for (var i = 0; i < imgTags.length; i++) {
            var img = imgTags[i];
            var alt = img.getAttribute('alt');
            var src = img.getAttribute('src');
            for (var type in session.counts) {
                if (!isCategory(type)) continue;
                if (alt === 'random:' + type || (src && src.indexOf('/random/' + type) !== -1)) {
                    img.src = getRandomUrl(type);
                    break;
                }
            }
        }
    }

    function initGenericBackgrounds() {
        var bgElements = document.querySelectorAll('[{{ bg_attr }}]');
        for (var i = 0; i < bgElements.length; i++) {
            var el = bgElements[i];
            if (el.id === '{{ bg_id }}') continue;
            var type = el.getAttribute('{{ bg_attr }}');
            if (isCategory(type)) {
                setBackground(el, getRandomUrl(type));
            }
        }
    }

    function init() {
        setRandomBackground();
        initGenericBackgrounds();
        initImgTags();
    }

    if (document.readyState === 'loading') {
        document.addEventListener('DOMContentLoaded', init);
    } else {
        init();
    }
})();
""")


def render_client_script(manifest: Manifest, domain: Optional[str] = "") -> str:
    config = ClientConfig.from_manifest(manifest, domain)
    return CLIENT_SCRIPT_TEMPLATE.render(
        generated_at=manifest.generated_at,
        counts_json=json.dumps(dict(config.counts)),
        domain_json=json.dumps(config.domain),
        cached_json=json.dumps({c: None for c in CATEGORIES}),
        categories=CATEGORIES,
        entry_points={c: entry_point_name(c) for c in CATEGORIES},
        ext=OUTPUT_EXT,
        bg_id=BACKGROUND_ELEMENT_ID,
        bg_attr=BACKGROUND_ATTR,
        bg_category=CATEGORIES[0],
    )


def write_client_script(manifest: Manifest, domain: Optional[str], path: Path) -> None:
    Path(path).write_text(render_client_script(manifest, domain), encoding="utf-8")
