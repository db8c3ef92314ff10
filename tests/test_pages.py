from randompic.manifest import build_manifest
from randompic.pages import (
    gallery_sections,
    render_gallery,
    render_index,
    write_gallery,
    write_index,
    write_wranglerignore,
)


def test_gallery_skips_empty_categories():
    sections = gallery_sections(build_manifest({"h": 2, "v": 0}))

    assert len(sections) == 1
    assert sections[0]["category"] == "h"
    assert sections[0]["label"] == "横屏"
    assert sections[0]["urls"] == ["h/0.webp", "h/1.webp"]


def test_gallery_lists_every_published_index():
    html = render_gallery(build_manifest({"h": 2, "v": 3}), "https://cdn.example.com/")

    for url in ("https://cdn.example.com/h/1.webp", "https://cdn.example.com/v/2.webp"):
        assert f'data-src="{url}"' in html
    assert "https://cdn.example.com/v/3.webp" not in html
    assert 'id="section-v"' in html
    assert "竖屏" in html
    assert "lib/lozad.min.js" in html


def test_index_page_uses_client_script():
    html = render_index()

    assert 'id="bg-box"' in html
    assert '<img alt="random:h"' in html
    assert '<img alt="random:v"' in html
    assert '<script src="random.js"></script>' in html
    assert 'href="gallery.html"' in html


def test_write_pages(tmp_path):
    manifest = build_manifest({"h": 1, "v": 1})

    assert write_gallery(manifest, "", tmp_path).name == "gallery.html"
    assert write_index(tmp_path).name == "index.html"
    ignore = write_wranglerignore(tmp_path)

    assert ignore.read_text(encoding="utf-8").split() == [".git", ".github", "node_modules", ".DS_Store"]


def test_gallery_lightbox_reads_url_from_attribute():
    """A quote in the domain must not break out of the onclick handler"""
    html = render_gallery(build_manifest({"h": 1, "v": 0}), "https://cdn.example.com/it's")

    assert "openLightbox(this.getAttribute('data-url'))" in html
    assert 'data-url="https://cdn.example.com/it&#39;s/h/0.webp"' in html
    assert "openLightbox('" not in html
