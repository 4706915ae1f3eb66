import re

from gallery_config import ROOT_FOLDERS, SCROLL_OFFSET

OVERLAY = 'overlay'
PERSISTENT = 'persistent'


def folder_path_of(relative_path):
    if "/" not in relative_path:
        return ""
    return relative_path.rsplit("/", 1)[0]


def slugify(heading):
    slug = re.sub(r"\s+", "-", heading.lower())
    slug = slug.replace("/", "-")
    return re.sub(r"[^a-z0-9-]", "", slug)


def unique_id(slug, used):
    if slug not in used:
        return slug
    n = 2
    while f"{slug}-{n}" in used:
        n += 1
    return f"{slug}-{n}"


def build_sections(assets, root_order=ROOT_FOLDERS):
    """Group merged assets into sections, one per (root folder, folder path).

    Roots follow `root_order`; assets of roots missing from it get no section.
    Within a root, folders are ordered case-insensitively.
    """
    sections = []
    used = set()
    for root in root_order:
        by_folder = {}
        for item in assets:
            if item['root_folder'] != root:
                continue
            by_folder.setdefault(folder_path_of(item['relative_path']), []).append(item)

        for folder_path in sorted(by_folder, key=lambda f: (f.lower(), f)):
            heading = f"{root} / {folder_path}" if folder_path else root
            section_id = unique_id(slugify(heading), used)
            used.add(section_id)
            sections.append({
                'root': root,
                'folder_path': folder_path,
                'heading': heading,
                'id': section_id,
                'items': by_folder[folder_path],
            })
    return sections


def resolve_active_id(section_tops, scroll_y, current=None, offset=SCROLL_OFFSET):
    """Scroll-spy: the last section (document order) whose top is at or above the anchor line.

    `section_tops` is a list of (id, top offset) pairs. When nothing qualifies
    the current id is kept.
    """
    anchor = scroll_y + offset
    active = None
    for section_id, top in section_tops:
        if top <= anchor:
            active = section_id
    return active if active is not None else current


class GalleryState:
    """UI state of the gallery page: sidebar, scrolled-to section and hovered entry.

    Listeners registered with subscribe() are called with the state after
    every change.
    """

    def __init__(self, section_ids, layout=OVERLAY, sidebar_open=None, offset=SCROLL_OFFSET):
        if layout not in (OVERLAY, PERSISTENT):
            raise ValueError(f"unknown sidebar layout: {layout!r}")
        self.section_ids = list(section_ids)
        self.layout = layout
        self.offset = offset
        self.sidebar_open = (layout == PERSISTENT) if sidebar_open is None else sidebar_open
        self.active_id = None
        self.hovered_id = None
        self._listeners = []

    @property
    def highlighted_id(self):
        if self.hovered_id is not None:
            return self.hovered_id
        return self.active_id

    def subscribe(self, listener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _set(self, **changes):
        changed = False
        for name, value in changes.items():
            if getattr(self, name) != value:
                setattr(self, name, value)
                changed = True
        if changed:
            for listener in list(self._listeners):
                listener(self)

    def toggle_sidebar(self):
        self._set(sidebar_open=not self.sidebar_open)

    def close_sidebar(self):
        self._set(sidebar_open=False)

    def on_scroll(self, scroll_y, section_tops):
        tops = [(sid, top) for sid, top in section_tops if sid in self.section_ids]
        self._set(active_id=resolve_active_id(tops, scroll_y, self.active_id, self.offset))

    def hover(self, section_id):
        if section_id in self.section_ids:
            self._set(hovered_id=section_id)

    def unhover(self):
        self._set(hovered_id=None)

    def select(self, section_id):
        """Returns the id to scroll to, or None for an unknown id."""
        if section_id not in self.section_ids:
            return None
        if self.layout == OVERLAY:
            self.close_sidebar()
        return section_id

    def on_key(self, key):
        if key == 'Escape' and self.layout == OVERLAY:
            self.close_sidebar()

    def to_dict(self):
        return {
            'layout': self.layout,
            'sidebar_open': self.sidebar_open,
            'active_id': self.active_id,
            'hovered_id': self.hovered_id,
            'highlighted_id': self.highlighted_id,
        }
