import itertools
from pathlib import Path

from asset_scan import (
    collect_assets, collect_all, merge_assets, pick_preview, strip_extension,
    to_public_url, url_to_path,
)
from conftest import touch


def test_public_url_encodes_each_segment():
    assert to_public_url('Separate Atoms', 'Body/arm one.svg') == '/Separate%20Atoms/Body/arm%20one.svg'
    assert to_public_url('Templates', 'a#b/c?d.png') == '/Templates/a%23b/c%3Fd.png'


def test_url_to_path_inverts_public_url(tmp_path):
    url = to_public_url('Separate Atoms', 'Body/arm one.svg')
    assert url_to_path(tmp_path, url) == tmp_path / 'Separate Atoms' / 'Body' / 'arm one.svg'


def test_collect_filters_extensions_case_insensitive(tmp_path):
    touch(tmp_path, 'a.PNG', 'b.svg', 'notes.txt', 'README', 'deep/er/c.WebP', 'deep/d.tiff')
    items = collect_assets(tmp_path, 'Templates')
    by_path = {i['relative_path']: i for i in items}
    assert sorted(by_path) == ['a.PNG', 'b.svg', 'deep/er/c.WebP']
    assert by_path['a.PNG']['extension'] == 'png'
    assert by_path['deep/er/c.WebP']['public_url'] == '/Templates/deep/er/c.WebP'
    assert by_path['b.svg']['name'] == 'b.svg'
    assert all(i['root_folder'] == 'Templates' for i in items)


def test_collect_lists_every_file_once(tmp_path):
    touch(tmp_path, 'x/1.png', 'x/2.png', 'y/1.png', '1.png')
    paths = [i['relative_path'] for i in collect_assets(tmp_path, 'R')]
    assert len(paths) == len(set(paths)) == 4


def test_missing_root_is_empty(tmp_path):
    assert collect_assets(tmp_path / 'nope', 'R') == []


def test_file_as_root_is_empty(tmp_path):
    touch(tmp_path, 'file.png')
    assert collect_assets(tmp_path / 'file.png', 'R') == []


def test_unreadable_folder_is_skipped(tmp_path, monkeypatch):
    touch(
        tmp_path,
        'Separate Atoms/Body/arm.svg',
        'Separate Atoms/Locked/secret.png',
        'Templates/poster.svg',
    )
    iterdir = Path.iterdir

    def failing_iterdir(self):
        if self.name == 'Locked':
            raise PermissionError(13, 'Permission denied', str(self))
        return iterdir(self)

    monkeypatch.setattr(Path, 'iterdir', failing_iterdir)
    with_locked = collect_all(tmp_path)

    monkeypatch.undo()
    for f in (tmp_path / 'Separate Atoms' / 'Locked').iterdir():
        f.unlink()
    (tmp_path / 'Separate Atoms' / 'Locked').rmdir()

    assert with_locked == collect_all(tmp_path)
    assert merge_assets(with_locked) == merge_assets(collect_all(tmp_path))


def test_strip_extension():
    assert strip_extension('Body/arm.svg') == 'Body/arm'
    assert strip_extension('v1.2/arm.svg') == 'v1.2/arm'
    assert strip_extension('archive.tar.gz') == 'archive.tar'


def test_merge_example(public_dir):
    merged = merge_assets(collect_all(public_dir))
    assert merged == [
        {
            'root_folder': 'Separate Atoms',
            'base_name': 'arm',
            'relative_path': 'Body/arm',
            'variants': [
                {'extension': 'svg', 'public_url': '/Separate%20Atoms/Body/arm.svg'},
                {'extension': 'png', 'public_url': '/Separate%20Atoms/Body/arm.png'},
            ],
            'preview_url': '/Separate%20Atoms/Body/arm.svg',
            'preview_extension': 'svg',
        },
        {
            'root_folder': 'Templates',
            'base_name': 'poster',
            'relative_path': 'poster',
            'variants': [{'extension': 'svg', 'public_url': '/Templates/poster.svg'}],
            'preview_url': '/Templates/poster.svg',
            'preview_extension': 'svg',
        },
    ]


def _variants(*extensions):
    return [{'extension': e, 'public_url': f'/R/a.{e}'} for e in extensions]


def test_preview_preference():
    assert pick_preview(_variants('jpg', 'svg', 'png'))['extension'] == 'svg'
    assert pick_preview(_variants('jpg', 'png'))['extension'] == 'png'
    assert pick_preview(_variants('bmp', 'gif'))['extension'] == 'gif'


def test_preview_fallback_is_deterministic():
    order = ('svg',)
    a = pick_preview(_variants('webp', 'gif'), order)
    b = pick_preview(_variants('gif', 'webp'), order)
    assert a == b == {'extension': 'gif', 'public_url': '/R/a.gif'}


def test_merge_is_order_independent(tmp_path):
    touch(tmp_path, 'R/b.png', 'R/b.jpg', 'R/a/x.gif', 'R/a/x.bmp', 'R/c.avif', 'S/b.svg')
    items = collect_all(tmp_path, ('R', 'S'))
    expected = merge_assets(items)
    for perm in itertools.permutations(items):
        assert merge_assets(list(perm)) == expected


def test_merge_sorted_by_root_then_path(tmp_path):
    touch(tmp_path, 'B/z.png', 'A/y.png', 'A/b/x.png', 'A/a.png')
    merged = merge_assets(list(reversed(collect_all(tmp_path, ('B', 'A')))))
    assert [(m['root_folder'], m['relative_path']) for m in merged] == [
        ('A', 'a'), ('A', 'b/x'), ('A', 'y'), ('B', 'z'),
    ]


def test_same_stem_in_different_roots_not_merged(tmp_path):
    touch(tmp_path, 'A/x.png', 'B/x.svg')
    merged = merge_assets(collect_all(tmp_path, ('A', 'B')))
    assert len(merged) == 2
    assert all(len(m['variants']) == 1 for m in merged)


def test_unstatable_entries_are_skipped(tmp_path, monkeypatch):
    touch(
        tmp_path,
        'Separate Atoms/Body/arm.svg',
        'Separate Atoms/Locked/secret.png',
        'Separate Atoms/Locked/inner/deep.png',
        'Templates/poster.svg',
    )
    stat, lstat = Path.stat, Path.lstat

    def denied(original):
        def wrapper(self, *args, **kwargs):
            if self.parent.name == 'Locked':
                raise PermissionError(13, 'Permission denied', str(self))
            return original(self, *args, **kwargs)
        return wrapper

    monkeypatch.setattr(Path, 'stat', denied(stat))
    monkeypatch.setattr(Path, 'lstat', denied(lstat))
    items = collect_all(tmp_path)

    assert [i['public_url'] for i in items] == [
        '/Separate%20Atoms/Body/arm.svg',
        '/Templates/poster.svg',
    ]


def test_backslash_is_part_of_the_segment(tmp_path):
    touch(tmp_path, 'Templates/a\\b.png')
    items = collect_all(tmp_path, ('Templates',))
    assert [i['public_url'] for i in items] == ['/Templates/a%5Cb.png']
    assert url_to_path(tmp_path, items[0]['public_url']) == tmp_path / 'Templates' / 'a\\b.png'


def test_symlinked_directory_not_followed(tmp_path):
    touch(tmp_path, 'R/real/a.png')
    (tmp_path / 'R' / 'link').symlink_to(tmp_path / 'R' / 'real', target_is_directory=True)
    (tmp_path / 'R' / 'b.png').symlink_to(tmp_path / 'R' / 'real' / 'a.png')
    paths = [i['relative_path'] for i in collect_assets(tmp_path / 'R', 'R')]
    assert sorted(paths) == ['b.png', 'real/a.png']
