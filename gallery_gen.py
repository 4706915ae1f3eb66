from pathlib import Path
from html import escape
import json
from PIL import Image

from gallery_config import (
    ROOT_FOLDERS, IMAGE_EXTENSIONS, PREVIEW_ORDER, SCROLL_OFFSET, OVERLAY_BREAKPOINT,
    PUBLIC_DIR, INDEX_FILE, DATA_FILE,
    PAGE_TITLE, PAGE_DESCRIPTION, PAGE_EYEBROW, PAGE_HEADING,
    CREDIT_NAME, CREDIT_URL, CREDIT_AUTHOR, SUPPORT_URL,
)
from asset_scan import collect_all, merge_assets, url_to_path
from sections import build_sections


def image_size(path):
    """(width, height) of a raster image, None for svg or anything Pillow can't read."""
    path = Path(path)
    if path.suffix.lower() == '.svg':
        return None
    try:
        with Image.open(path) as img:
            return img.size
    except (OSError, Image.DecompressionBombError):
        return None


def badge_class(extension):
    if extension in ('svg', 'png'):
        return f'badge badge-{extension}'
    return 'badge'


def render_card(asset, size=None):
    name = escape(asset['base_name'])
    rel = escape(asset['relative_path'])
    dims = f' width="{size[0]}" height="{size[1]}"' if size else ''
    links = '\n'.join(
        f'<a class="{badge_class(v["extension"])}" href="{escape(v["public_url"])}" download>'
        f'Download {escape(v["extension"])}</a>'
        for v in asset['variants']
    )
    return f'''<article class="card">
<div class="preview"><img src="{escape(asset['preview_url'])}" alt="{name}" loading="lazy"{dims}></div>
<div class="caption">
<p class="name" title="{name}">{name}</p>
<p class="path" title="{rel}">{rel}</p>
<div class="downloads">
{links}
</div>
</div>
</article>'''


def render_section(section, sizes):
    cards = '\n'.join(render_card(item, sizes.get(item['preview_url'])) for item in section['items'])
    return f'''<section id="{escape(section['id'])}" class="asset-section">
<h2>{escape(section['heading'])}</h2>
<div class="grid">
{cards}
</div>
</section>'''


def render_sidebar_entry(section):
    return (
        f'<li><button type="button" class="nav-entry" data-target="{escape(section["id"])}">'
        f'<span class="bar" aria-hidden="true"></span>'
        f'<span class="label">{escape(section["heading"])}</span></button></li>'
    )


STYLE = '''
* { margin: 0; padding: 0; box-sizing: border-box; }
body {
    background: #f5f3ef;
    color: #1c1917;
    font-family: system-ui, sans-serif;
    -webkit-font-smoothing: antialiased;
}
a { color: #0ea5e9; }
.wrap { max-width: 72rem; margin: 0 auto; padding: 2rem 1rem; }
.credit {
    margin-bottom: 2rem;
    padding: 1rem;
    border: 1px solid #e7e5e4;
    border-radius: 0.75rem;
    background: rgba(255, 255, 255, 0.8);
    font-size: 0.875rem;
    color: #57534e;
}
.credit p + p { margin-top: 0.75rem; }
.credit .small { font-size: 0.75rem; color: #78716c; }
header { margin-bottom: 3.5rem; }
.eyebrow { margin-bottom: 0.75rem; font-size: 11px; text-transform: uppercase; letter-spacing: 0.2em; color: #78716c; }
h1 { font-size: 2rem; font-weight: 600; }
.lead { margin-top: 0.5rem; max-width: 28rem; font-size: 0.875rem; color: #57534e; }
code { background: #e7e5e4; border-radius: 0.25rem; padding: 0.1rem 0.35rem; font-size: 0.75rem; }
#sidebar-toggle {
    position: fixed; left: 1rem; top: 6rem; z-index: 20;
    width: 2.5rem; height: 2.5rem;
    display: flex; align-items: center; justify-content: center;
    border: 1px solid #e7e5e4; border-radius: 0.5rem;
    background: rgba(255, 255, 255, 0.9);
    cursor: pointer;
}
#sidebar-toggle .icon-close { display: none; }
.sidebar-open #sidebar-toggle .icon-close { display: block; }
.sidebar-open #sidebar-toggle .icon-open { display: none; }
#sidebar {
    position: fixed; left: 3.5rem; top: 6rem; z-index: 10;
    width: 13rem; padding: 0.5rem 0;
    visibility: hidden; opacity: 0; pointer-events: none;
    transition: opacity 0.2s, visibility 0.2s;
}
.sidebar-open #sidebar { visibility: visible; opacity: 1; pointer-events: auto; }
.layout-overlay #sidebar { background: rgba(245, 243, 239, 0.97); padding: 0.5rem; border-radius: 0.5rem; }
#sidebar .title { margin-bottom: 0.75rem; font-size: 0.75rem; text-transform: uppercase; letter-spacing: 0.05em; color: #78716c; }
#sidebar ul { list-style: none; }
.nav-entry {
    display: flex; align-items: center; gap: 0.5rem; width: 100%;
    padding: 0.375rem 0.25rem 0.375rem 0;
    background: none; border: 0; text-align: left; font-size: 0.875rem;
    color: #57534e; cursor: pointer;
    transition: color 0.2s;
}
.nav-entry .bar { height: 1px; width: 0.375rem; flex-shrink: 0; background: #a8a29e; transition: width 0.2s; }
.nav-entry .label { min-width: 0; overflow: hidden; white-space: nowrap; text-overflow: ellipsis; transition: transform 0.2s; }
.nav-entry.highlight { color: #0ea5e9; }
.nav-entry.highlight .bar { width: 2rem; background: #0ea5e9; }
.nav-entry.highlight .label { transform: translateX(0.125rem); }
.sections { display: flex; flex-direction: column; gap: 3.5rem; padding-left: 3.5rem; min-width: 0; }
.asset-section { scroll-margin-top: 2rem; }
.asset-section h2 { margin-bottom: 1.25rem; font-size: 1.125rem; font-weight: 500; color: #44403c; }
.grid { display: grid; grid-template-columns: repeat(2, minmax(0, 1fr)); gap: 0.75rem; }
@media (min-width: 640px) { .grid { grid-template-columns: repeat(3, minmax(0, 1fr)); } }
@media (min-width: 768px) { .grid { grid-template-columns: repeat(4, minmax(0, 1fr)); } }
@media (min-width: 1024px) { .grid { grid-template-columns: repeat(5, minmax(0, 1fr)); } }
.card {
    overflow: hidden; border: 1px solid #e7e5e4; border-radius: 0.75rem; background: white;
    box-shadow: 0 1px 2px rgba(0, 0, 0, 0.04);
    transition: box-shadow 0.2s, border-color 0.2s;
}
.card:hover { border-color: #d6d3d1; box-shadow: 0 4px 6px rgba(0, 0, 0, 0.08); }
.preview { aspect-ratio: 1 / 1; display: flex; align-items: center; justify-content: center; background: #fafaf9; padding: 1rem; }
.preview img { max-width: 100%; max-height: 100%; width: auto; height: auto; object-fit: contain; transition: transform 0.2s; }
.card:hover .preview img { transform: scale(1.02); }
.caption { border-top: 1px solid #e7e5e4; padding: 0.5rem 0.75rem; }
.caption p { overflow: hidden; white-space: nowrap; text-overflow: ellipsis; }
.caption .name { font-size: 0.75rem; font-weight: 500; color: #44403c; }
.caption .path { font-size: 11px; color: #78716c; }
.downloads { margin-top: 0.5rem; display: flex; flex-wrap: wrap; gap: 0.375rem; }
.badge {
    display: inline-flex; padding: 0.25rem 0.5rem; border-radius: 0.25rem;
    font-size: 10px; font-weight: 600; text-transform: uppercase; letter-spacing: 0.03em;
    text-decoration: none; background: #f5f5f4; color: #57534e;
}
.badge:hover { background: #e7e5e4; }
.badge-svg { background: #e0f2fe; color: #0369a1; }
.badge-svg:hover { background: #bae6fd; }
.badge-png { background: #dcfce7; color: #15803d; }
.badge-png:hover { background: #bbf7d0; }
.empty { color: #78716c; font-size: 0.875rem; }
'''

SCRIPT = '''
// Same rules as sections.GalleryState / resolve_active_id.
const gallery = document.getElementById('gallery');
const toggle = document.getElementById('sidebar-toggle');
const entries = Array.from(document.querySelectorAll('.nav-entry'));
const ids = entries.map(e => e.dataset.target);

const layout = window.matchMedia(`(min-width: ${CONFIG.overlay_breakpoint}px)`).matches ? 'persistent' : 'overlay';
const state = {
    sidebarOpen: layout === 'persistent',
    activeId: null,
    hoveredId: null,
};

function highlightedId() {
    return state.hoveredId !== null ? state.hoveredId : state.activeId;
}

function render() {
    gallery.classList.toggle('sidebar-open', state.sidebarOpen);
    gallery.classList.toggle('layout-overlay', layout === 'overlay');
    toggle.setAttribute('aria-label', state.sidebarOpen ? 'Close sections' : 'Open sections');
    toggle.setAttribute('aria-expanded', String(state.sidebarOpen));
    const current = highlightedId();
    entries.forEach(e => e.classList.toggle('highlight', e.dataset.target === current));
}

function setState(changes) {
    let changed = false;
    for (const key of Object.keys(changes)) {
        if (state[key] !== changes[key]) {
            state[key] = changes[key];
            changed = true;
        }
    }
    if (changed) render();
}

function sectionTop(el) {
    return el.getBoundingClientRect().top + window.scrollY;
}

function onScroll() {
    const anchor = window.scrollY + CONFIG.scroll_offset;
    let current = null;
    for (const id of ids) {
        const el = document.getElementById(id);
        if (el && sectionTop(el) <= anchor) current = id;
    }
    if (current !== null) setState({ activeId: current });
}

toggle.addEventListener('click', () => setState({ sidebarOpen: !state.sidebarOpen }));

entries.forEach(entry => {
    const id = entry.dataset.target;
    entry.addEventListener('click', () => {
        const el = document.getElementById(id);
        if (!el) return;
        el.scrollIntoView({ behavior: 'smooth', block: 'start' });
        if (layout === 'overlay') setState({ sidebarOpen: false });
    });
    entry.addEventListener('mouseenter', () => setState({ hoveredId: id }));
    entry.addEventListener('mouseleave', () => setState({ hoveredId: null }));
});

document.addEventListener('keydown', (e) => {
    if (e.key === 'Escape' && layout === 'overlay') setState({ sidebarOpen: false });
});

window.addEventListener('scroll', onScroll, { passive: true });
render();
onScroll();
'''

ICON_OPEN = ('<svg class="icon-open" width="14" height="14" viewBox="0 0 24 24" fill="none" stroke="currentColor" '
             'stroke-width="2" stroke-linecap="round" aria-hidden="true">'
             '<line x1="4" y1="6" x2="20" y2="6"/><line x1="4" y1="12" x2="20" y2="12"/>'
             '<line x1="4" y1="18" x2="20" y2="18"/></svg>')
ICON_CLOSE = ('<svg class="icon-close" width="14" height="14" viewBox="0 0 24 24" fill="none" stroke="currentColor" '
              'stroke-width="2" stroke-linecap="round" aria-hidden="true">'
              '<line x1="6" y1="6" x2="18" y2="18"/><line x1="18" y1="6" x2="6" y2="18"/></svg>')


def page_config(root_folders=ROOT_FOLDERS):
    return {
        'root_folders': list(root_folders),
        'image_extensions': sorted(IMAGE_EXTENSIONS),
        'preview_order': list(PREVIEW_ORDER),
        'scroll_offset': SCROLL_OFFSET,
        'overlay_breakpoint': OVERLAY_BREAKPOINT,
    }


def render_page(sections, sizes=None, root_folders=ROOT_FOLDERS):
    sizes = sizes or {}
    if sections:
        body = '\n'.join(render_section(s, sizes) for s in sections)
    else:
        body = '<p class="empty">No assets found.</p>'
    nav = '\n'.join(render_sidebar_entry(s) for s in sections)
    folders = ', '.join(f'<code>{escape(r)}</code>' for r in root_folders)
    # </ can't appear inside the inline script
    config = json.dumps(page_config(root_folders)).replace('</', '<\\/')

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{escape(PAGE_TITLE)}</title>
<meta name="description" content="{escape(PAGE_DESCRIPTION)}">
<style>{STYLE}</style>
</head>
<body>
<main>
<div class="wrap">
<section class="credit">
<p><strong>This is not my creation.</strong> All credit goes to
<a href="{escape(CREDIT_URL)}" target="_blank" rel="noopener noreferrer">{escape(CREDIT_NAME)}</a>
(hand-drawn illustration library by {escape(CREDIT_AUTHOR)}). I have only built a UI layer on top of the assets they provide.</p>
<p>Please support them:
<a href="{escape(SUPPORT_URL)}" target="_blank" rel="noopener noreferrer">Support {escape(CREDIT_NAME)} on Gumroad</a>.</p>
<p class="small">I do not own these assets in any way. All rights and credit go to {escape(CREDIT_NAME)}.</p>
</section>
<header>
<p class="eyebrow">{escape(PAGE_EYEBROW)}</p>
<h1>{escape(PAGE_HEADING)}</h1>
<p class="lead">From {folders}. Preview as SVG; download PNG or SVG.</p>
</header>
<div id="gallery">
<button type="button" id="sidebar-toggle" aria-label="Open sections" aria-controls="sidebar">{ICON_OPEN}{ICON_CLOSE}</button>
<aside id="sidebar">
<nav>
<p class="title">Sections</p>
<ul>
{nav}
</ul>
</nav>
</aside>
<div class="sections">
{body}
</div>
</div>
</div>
</main>
<script>
const CONFIG = {config};
{SCRIPT}
</script>
</body>
</html>
'''


def build(public_dir=PUBLIC_DIR, root_folders=ROOT_FOLDERS):
    public_dir = Path(public_dir)
    items = collect_all(public_dir, root_folders)
    assets = merge_assets(items)
    sections = build_sections(assets, root_folders)
    sizes = {a['preview_url']: image_size(url_to_path(public_dir, a['preview_url'])) for a in assets}

    data = {
        'assets': assets,
        'sections': [
            {
                'id': s['id'],
                'heading': s['heading'],
                'root': s['root'],
                'folder_path': s['folder_path'],
                'items': [i['relative_path'] for i in s['items']],
            }
            for s in sections
        ],
        'config': page_config(root_folders),
    }

    public_dir.mkdir(parents=True, exist_ok=True)
    with open(public_dir / DATA_FILE, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    with open(public_dir / INDEX_FILE, 'w', encoding='utf-8') as f:
        f.write(render_page(sections, sizes, root_folders))

    return data


def main():
    data = build()
    print(f"Generated {PUBLIC_DIR / DATA_FILE} and {PUBLIC_DIR / INDEX_FILE} with:")
    for root in ROOT_FOLDERS:
        count = sum(1 for a in data['assets'] if a['root_folder'] == root)
        print(f"  - {root}: {count} assets")
    print(f"  {len(data['sections'])} sections")


if __name__ == '__main__':
    main()
