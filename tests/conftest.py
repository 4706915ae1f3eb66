from pathlib import Path

import pytest


def touch(root, *relative_paths):
    for rel in relative_paths:
        p = Path(root) / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(b'')


@pytest.fixture
def public_dir(tmp_path):
    touch(
        tmp_path,
        'Separate Atoms/Body/arm.svg',
        'Separate Atoms/Body/arm.png',
        'Templates/poster.svg',
    )
    return tmp_path
