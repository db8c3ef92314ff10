"""Static pages shipped next to the images: gallery, demo index and the
deploy ignore file."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from jinja2 import Environment

from .classify import CATEGORIES, CATEGORY_LABELS
from .client_script import BACKGROUND_ELEMENT_ID, CLIENT_SCRIPT_NAME, asset_url, normalize_domain
from .manifest import Manifest

GALLERY_NAME = "gallery.html"
INDEX_NAME = "index.html"
WRANGLERIGNORE_NAME = ".wranglerignore"

# Keep git metadata out of uploads when deploying from the build branch
WRANGLERIGNORE_ENTRIES = [".git", ".github", "node_modules", ".DS_Store"]

_html_env = Environment(autoescape=True)
Template = _html_env.from_string

GALLERY_TEMPLATE = Template("""\
<!DOCTYPE html>
<html lang="zh-CN">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>RandomPic Gallery | 精选画廊</title>
    <link rel="preconnect" href="https://fonts.googleapis.com">
    <link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
    <link href="https://fonts.googleapis.com/css2?family=Outfit:wght@300;400;600&display=swap" rel="stylesheet">
    <style>
        :root { --bg: #09090b; --fg: #fafafa; --accent: #3b82f6; --card-bg: #18181b; --border: rgba(255, 255, 255, 0.1); --text-muted: #a1a1aa; }
        * { box-sizing: border-box; }
        body { font-family: 'Outfit', -apple-system, system-ui, sans-serif; margin: 0; padding: 0; background: var(--bg); color: var(--fg); line-height: 1.5; }
        header { padding: 4rem 2rem 2rem; text-align: center; background: radial-gradient(circle at top center, rgba(59, 130, 246, 0.15), transparent); }
        h1 { font-size: 3rem; margin: 0; font-weight: 600; letter-spacing: -0.05em; background: linear-gradient(to bottom, #fff, #a1a1aa); -webkit-background-clip: text; -webkit-text-fill-color: transparent; }
        .subtitle { color: var(--text-muted); margin-top: 0.5rem; font-size: 1.1rem; }
        .filter-nav { position: sticky; top: 1rem; z-index: 50; display: flex; justify-content: center; gap: 0.5rem; margin: 2rem auto; padding: 0.5rem; backdrop-filter: blur(12px); background: rgba(9, 9, 11, 0.7); width: fit-content; border-radius: 1rem; border: 1px solid var(--border); }
        .filter-btn { background: transparent; border: none; padding: 0.6rem 1.2rem; border-radius: 0.75rem; cursor: pointer; transition: all 0.3s; color: var(--text-muted); font-weight: 500; font-size: 0.95rem; }
        .filter-btn:hover { color: var(--fg); background: rgba(255,255,255,0.05); }
        .filter-btn.active { background: var(--accent); color: white; box-shadow: 0 4px 12px rgba(59, 130, 246, 0.3); }
        main { padding: 0 2rem 4rem; max-width: 1400px; margin: 0 auto; }
        .gallery-section { margin-bottom: 4rem; }
        .section-title { font-size: 1.5rem; margin-bottom: 2rem; display: flex; align-items: center; gap: 0.75rem; font-weight: 600; }
        .section-title span { color: var(--accent); opacity: 0.8; }
        .grid { margin: 0 auto; }
        .grid-sizer, .grid-item { width: calc(25% - 12px); margin-bottom: 16px; }
        .grid-item { cursor: zoom-in; border-radius: 1rem; overflow: hidden; background: var(--card-bg); border: 1px solid var(--border); transition: all 0.4s; }
        .grid-item:hover { transform: translateY(-4px); border-color: rgba(255,255,255,0.2); }
        .img-wrapper { width: 100%; position: relative; overflow: hidden; }
        .grid-item img { display: block; width: 100%; height: auto; opacity: 0; transition: opacity 0.6s ease-out, transform 0.6s ease-out; transform: scale(1.05); }
        .grid-item img[data-loaded="true"] { opacity: 1; transform: scale(1); }
        #lightbox { position: fixed; top: 0; left: 0; width: 100%; height: 100%; background: rgba(0,0,0,0.98); display: none; flex-direction: column; z-index: 1000; }
        .lightbox-header { padding: 1rem 2rem; display: flex; justify-content: flex-end; position: absolute; top: 0; width: 100%; z-index: 1010; }
        .close-btn { background: rgba(255,255,255,0.1); border: none; color: white; width: 48px; height: 48px; border-radius: 50%; cursor: pointer; font-size: 1.5rem; }
        .lightbox-main { flex: 1; display: flex; align-items: center; justify-content: center; padding: 2rem; position: relative; overflow: hidden; }
        #lightbox-img { max-width: 100%; max-height: 100%; object-fit: contain; border-radius: 0.75rem; transition: transform 0.4s, opacity 0.3s ease; }
        .nav-btn { position: absolute; top: 50%; transform: translateY(-50%); background: rgba(255,255,255,0.05); border: 1px solid rgba(255,255,255,0.1); color: white; width: 60px; height: 60px; border-radius: 50%; cursor: pointer; font-size: 1.2rem; z-index: 1005; }
        .nav-btn:hover { background: var(--accent); border-color: var(--accent); }
        .nav-prev { left: 2rem; }
        .nav-next { right: 2rem; }
        .thumbnails-container { height: 140px; border-top: 1px solid rgba(255,255,255,0.05); display: flex; align-items: center; padding: 0 2rem; gap: 12px; overflow-x: auto; scrollbar-width: none; }
        .thumb-item { height: 90px; aspect-ratio: 1; object-fit: cover; border-radius: 0.75rem; cursor: pointer; opacity: 0.4; transition: all 0.3s; border: 2px solid transparent; flex-shrink: 0; }
        .thumb-item.active { opacity: 1; border-color: var(--accent); transform: scale(1.1) translateY(-4px); }
        @media (max-width: 1024px) { .grid-sizer, .grid-item { width: calc(33.333% - 11px); } h1 { font-size: 2.5rem; } }
        @media (max-width: 768px) { .grid-sizer, .grid-item { width: calc(50% - 8px); } .filter-nav { width: 90%; } .thumbnails-container { height: 100px; padding: 0 1rem; } .thumb-item { height: 60px; } }
        @media (max-width: 480px) { .grid-sizer, .grid-item { width: 100%; } main { padding: 0 1rem; } }
    </style>
</head>
<body>
    <header>
        <h1>RandomPic Gallery</h1>
        <p class="subtitle">随机美图库 - 精选高清图集</p>
    </header>

    <div class="filter-nav">
        <button class="filter-btn active" data-filter="all" onclick="filterGallery('all')">全部</button>
        {%- for section in sections %}
        <button class="filter-btn" data-filter="{{ section.category }}" onclick="filterGallery('{{ section.category }}')">{{ section.label }}</button>
        {%- endfor %}
    </div>

    <main>
    {%- for section in sections %}
        <section id="section-{{ section.category }}" class="gallery-section">
            <h2 class="section-title"><span>#</span> {{ section.label }}图片</h2>
            <div class="grid" id="grid-{{ section.category }}">
                <div class="grid-sizer"></div>
                {%- for url in section.urls %}
                <div class="grid-item" data-url="{{ url }}" onclick="openLightbox(this.getAttribute('data-url'))">
                    <div class="img-wrapper">
                        <img class="lozad" data-src="{{ url }}" alt="{{ section.category }}-{{ loop.index0 }}">
                    </div>
                </div>
                {%- endfor %}
            </div>
        </section>
    {%- endfor %}
    </main>

    <div id="lightbox" onclick="closeLightbox()">
        <div class="lightbox-header">
            <button class="close-btn" onclick="closeLightbox()">&times;</button>
        </div>
        <div class="lightbox-main">
            <button class="nav-btn nav-prev" onclick="event.stopPropagation(); prevImage()">&#10094;</button>
            <img id="lightbox-img" src="" alt="Preview" onclick="event.stopPropagation()">
            <button class="nav-btn nav-next" onclick="event.stopPropagation(); nextImage()">&#10095;</button>
        </div>
        <div class="thumbnails-container" id="thumbnails-container" onclick="event.stopPropagation()"></div>
    </div>

    <script src="lib/masonry.pkgd.min.js"></script>
    <script src="lib/imagesloaded.pkgd.min.js"></script>
    <script src="lib/lozad.min.js"></script>
    <script>
        var masonryInstances = [];
        var currentNavList = [];
        var currentIndex = 0;

        document.addEventListener('DOMContentLoaded', function() {
            document.querySelectorAll('.grid').forEach(function(grid) {
                var msnry = new Masonry(grid, { itemSelector: '.grid-item', columnWidth: '.grid-sizer', percentPosition: true, gutter: 16 });
                imagesLoaded(grid).on('progress', function() { msnry.layout(); });
                masonryInstances.push(msnry);
            });

            var observer = lozad('.lozad', {
                rootMargin: '300px 0px',
                loaded: function(el) {
                    el.onload = function() {
                        el.setAttribute('data-loaded', true);
                        masonryInstances.forEach(function(m) { m.layout(); });
                    };
                    if (el.complete && el.naturalHeight !== 0) el.onload();
                }
            });
            observer.observe();
        });

        function activeFilter() {
            var btn = document.querySelector('.filter-btn.active');
            return btn ? btn.getAttribute('data-filter') : 'all';
        }

        function filterGallery(type) {
            document.querySelectorAll('.filter-btn').forEach(function(b) {
                b.classList.toggle('active', b.getAttribute('data-filter') === type);
            });
            document.querySelectorAll('.gallery-section').forEach(function(s) {
                s.style.display = (type === 'all' || s.id === 'section-' + type) ? 'block' : 'none';
            });
            setTimeout(function() { masonryInstances.forEach(function(m) { m.layout(); }); }, 100);
        }

        function openLightbox(url) {
            var filter = activeFilter();
            var query = filter === 'all' ? '.grid-item img' : '#section-' + filter + ' .grid-item img';
            currentNavList = [];
            document.querySelectorAll(query).forEach(function(img) {
                currentNavList.push(img.getAttribute('data-src'));
            });
            currentIndex = currentNavList.indexOf(url);

            document.getElementById('lightbox').style.display = 'flex';
            document.body.style.overflow = 'hidden';
            initThumbnails();
            showImage(currentIndex);
        }

        function closeLightbox() {
            document.getElementById('lightbox').style.display = 'none';
            document.body.style.overflow = 'auto';
        }

        function initThumbnails() {
            var container = document.getElementById('thumbnails-container');
            container.innerHTML = '';
            currentNavList.forEach(function(url, i) {
                var thumb = document.createElement('img');
                thumb.src = url;
                thumb.className = 'thumb-item';
                thumb.onclick = function(e) { e.stopPropagation(); showImage(i); };
                container.appendChild(thumb);
            });
        }

        function showImage(index) {
            if (index < 0 || index >= currentNavList.length) return;
            currentIndex = index;
            var img = document.getElementById('lightbox-img');
            img.style.opacity = '0';
            img.style.transform = 'scale(0.95)';
            setTimeout(function() {
                img.src = currentNavList[currentIndex];
                img.onload = function() {
                    img.style.opacity = '1';
                    img.style.transform = 'scale(1)';
                };
                document.querySelectorAll('.thumb-item').forEach(function(t, i) {
                    if (i === currentIndex) {
                        t.classList.add('active');
                        t.scrollIntoView({ behavior: 'smooth', block: 'nearest', inline: 'center' });
                    } else {
                        t.classList.remove('active');
                    }
                });
            }, 150);
        }

        function prevImage() {
            showImage(currentIndex - 1 < 0 ? currentNavList.length - 1 : currentIndex - 1);
        }

        function nextImage() {
            showImage(currentIndex + 1 >= currentNavList.length ? 0 : currentIndex + 1);
        }

        document.addEventListener('keydown', function(e) {
            if (document.getElementById('lightbox').style.display !== 'flex') return;
            if (e.key === 'ArrowLeft') prevImage();
            if (e.key === 'ArrowRight') nextImage();
            if (e.key === 'Escape') closeLightbox();
        });
    </script>
</body>
</html>
""")

INDEX_TEMPLATE = Template("""\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>RandomPic Demo</title>
    <style>
        body { font-family: system-ui, sans-serif; max-width: 800px; margin: 0 auto; padding: 2rem; color: #333; }
        .card { border: 1px solid #ddd; padding: 1.5rem; margin-bottom: 1.5rem; border-radius: 0.75rem; box-shadow: 0 4px 6px -1px rgba(0,0,0,0.1); }
        .btn { display: inline-block; padding: 0.5rem 1rem; background: #2563eb; color: white; text-decoration: none; border-radius: 0.375rem; }
        img { max-width: 100%; border-radius: 0.375rem; background: #f4f4f5; display: block; }
        #{{ bg_id }} { height: 250px; background-size: cover; background-position: center; border-radius: 0.5rem; display: flex; align-items: center; justify-content: center; color: white; font-weight: bold; font-size: 1.5rem; text-shadow: 0 2px 4px rgba(0,0,0,0.5); transition: background-image 0.5s ease; }
    </style>
</head>
<body>
    <div style="display: flex; justify-content: space-between; align-items: center; margin-bottom: 2rem;">
        <h1>RandomPic API Demo</h1>
        <a href="{{ gallery }}" class="btn">View Gallery</a>
    </div>

    <div class="card">
        <h2>Horizontal Background</h2>
        <div id="{{ bg_id }}">Random Background Header</div>
    </div>

    <div class="card">
        <h2>Img Tag (Horizontal)</h2>
        <p><code>&lt;img alt="random:h"&gt;</code></p>
        <img alt="random:h" style="min-height: 200px">
    </div>

    <div class="card">
        <h2>Img Tag (Vertical)</h2>
        <p><code>&lt;img alt="random:v"&gt;</code></p>
        <img alt="random:v" style="max-height: 400px; min-height: 200px;">
    </div>

    <script src="{{ script }}"></script>
</body>
</html>
""")


def gallery_sections(manifest: Manifest, domain: Optional[str] = "") -> List[dict]:
    """One section per non-empty category, listing every published URL."""
    domain = normalize_domain(domain)
    sections = []
    for category in CATEGORIES:
        count = manifest.count(category)
        if count == 0:
            continue
        sections.append({
            "category": category,
            "label": CATEGORY_LABELS.get(category, category),
            "urls": [asset_url(domain, category, i) for i in range(count)],
        })
    return sections


def render_gallery(manifest: Manifest, domain: Optional[str] = "") -> str:
    return GALLERY_TEMPLATE.render(sections=gallery_sections(manifest, domain))


def render_index() -> str:
    return INDEX_TEMPLATE.render(bg_id=BACKGROUND_ELEMENT_ID, gallery=GALLERY_NAME, script=CLIENT_SCRIPT_NAME)


def write_gallery(manifest: Manifest, domain: Optional[str], dest: Path) -> Path:
    out = Path(dest) / GALLERY_NAME
    out.write_text(render_gallery(manifest, domain), encoding="utf-8")
    return out


def write_index(dest: Path) -> Path:
    out = Path(dest) / INDEX_NAME
    out.write_text(render_index(), encoding="utf-8")
    return out


def write_wranglerignore(dest: Path) -> Path:
    out = Path(dest) / WRANGLERIGNORE_NAME
    out.write_text("\n".join(WRANGLERIGNORE_ENTRIES) + "\n", encoding="utf-8")
    return out
