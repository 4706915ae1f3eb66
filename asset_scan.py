"""Walk the root folders and merge same-named files into assets with variants.

A raw asset is one image file:
    {'name', 'extension', 'relative_path', 'public_url', 'root_folder'}

A merged asset groups every raw asset sharing root folder and
extension-stripped relative path:
    {'root_folder', 'base_name', 'relative_path', 'variants',
     'preview_url', 'preview_extension'}
with variants as [{'extension', 'public_url'}, ...].
"""
from pathlib import Path
import stat
from urllib.parse import quote, unquote

from natsort import natsorted

from gallery_config import IMAGE_EXTENSIONS, PREVIEW_ORDER, ROOT_FOLDERS


def to_public_url(root_folder, relative_path):
    full = f"{root_folder}/{relative_path}"
    # same escaping as encodeURIComponent, one segment at a time
    return "/" + "/".join(quote(segment, safe="!'()*") for segment in full.split("/"))


def url_to_path(public_dir, public_url):
    segments = [unquote(s) for s in public_url.lstrip("/").split("/")]
    return Path(public_dir).joinpath(*segments)


def extension_of(name):
    return Path(name).suffix[1:].lower()


def entry_kind(item):
    """'dir', 'file' or None. Symlinked directories are None so the walk can't loop."""
    mode = item.lstat().st_mode
    if stat.S_ISDIR(mode):
        return 'dir'
    if stat.S_ISLNK(mode):
        mode = item.stat().st_mode
    if stat.S_ISREG(mode):
        return 'file'
    return None


def collect_assets(path, root_folder, relative_dir="", extensions=IMAGE_EXTENSIONS):
    """Recursively list the image files under `path`.

    A directory that can't be listed contributes nothing; the error stays here.
    """
    path = Path(path)
    try:
        entries = natsorted(path.iterdir(), key=lambda x: x.name)
    except OSError:
        return []

    results = []
    for item in entries:
        relative = f"{relative_dir}/{item.name}" if relative_dir else item.name
        try:
            kind = entry_kind(item)
        except OSError:
            # listed but not stat-able (directory without execute permission)
            continue
        if kind == 'dir':
            results.extend(collect_assets(item, root_folder, relative, extensions))
            continue
        if kind != 'file':
            continue

        extension = extension_of(item.name)
        if extension not in extensions:
            continue

        results.append({
            'name': item.name,
            'extension': extension,
            'relative_path': relative,
            'public_url': to_public_url(root_folder, relative),
            'root_folder': root_folder,
        })

    return results


def collect_all(public_dir, root_folders=ROOT_FOLDERS, extensions=IMAGE_EXTENSIONS):
    items = []
    for root_folder in root_folders:
        items.extend(collect_assets(Path(public_dir) / root_folder, root_folder, extensions=extensions))
    return items


def strip_extension(relative_path):
    name = relative_path.rsplit("/", 1)[-1]
    suffix = Path(name).suffix
    if not suffix:
        return relative_path
    return relative_path[:-len(suffix)]


def base_name_of(item):
    stem = Path(item['name']).stem if Path(item['name']).suffix else ""
    return stem or item['name']


def preference_rank(extension, preview_order=PREVIEW_ORDER):
    if extension in preview_order:
        return preview_order.index(extension)
    return len(preview_order)


def sort_variants(variants, preview_order=PREVIEW_ORDER):
    # unknown extensions go last, so the fallback preview doesn't depend on listing order
    return sorted(
        variants,
        key=lambda v: (preference_rank(v['extension'], preview_order), v['extension'], v['public_url']),
    )


def pick_preview(variants, preview_order=PREVIEW_ORDER):
    for extension in preview_order:
        for variant in variants:
            if variant['extension'] == extension:
                return variant
    return sort_variants(variants, preview_order)[0]


def merge_assets(items, preview_order=PREVIEW_ORDER):
    """Group raw assets by (root folder, path without extension), sorted by that key."""
    groups = {}
    for item in items:
        key = (item['root_folder'], strip_extension(item['relative_path']))
        groups.setdefault(key, []).append(item)

    merged = []
    for (root_folder, path_no_ext), group in groups.items():
        variants = sort_variants(
            [{'extension': i['extension'], 'public_url': i['public_url']} for i in group],
            preview_order,
        )
        preview = pick_preview(variants, preview_order)
        # every member of a group shares the stem, take the smallest name for stability
        first = min(group, key=lambda i: i['name'])
        merged.append({
            'root_folder': root_folder,
            'base_name': base_name_of(first),
            'relative_path': path_no_ext,
            'variants': variants,
            'preview_url': preview['public_url'],
            'preview_extension': preview['extension'],
        })

    merged.sort(key=lambda a: (a['root_folder'], a['relative_path']))
    return merged
