# Path: tests/test_staging.py
"""
Tests for the staging area and promotion helpers.

Tests:
- staging_area naming, creation and removal on every exit path
- CleanupError only when cleanup is the sole failure
- promote_path for directories, files, lost races and cross-device moves
"""

import asyncio
import errno
import os
import stat

import pytest

from runtime_downloader.engine import staging
from runtime_downloader.engine.errors import CleanupError
from runtime_downloader.engine.existence_gate import path_exists
from runtime_downloader.engine.staging import (
    staging_area,
    staging_prefix,
    remove_path,
    list_entries,
    promote_path,
)


def test_staging_area_is_private_and_descriptively_named(temp_dir):
    async def scenario():
        async with staging_area(temp_dir, 'runtime-downloader', '18.0.0', 'x64') as first:
            async with staging_area(temp_dir, 'runtime-downloader', '18.0.0', 'x64') as second:
                return first.name, second.name, stat.S_IMODE(first.stat().st_mode)

    first, second, mode = asyncio.run(scenario())

    assert staging_prefix('runtime-downloader', '18.0.0', 'x64') == 'runtime-downloader-18.0.0-x64-'
    assert first.startswith('runtime-downloader-18.0.0-x64-')
    assert first != second
    if os.name == 'posix':
        assert mode == 0o700


def test_staging_area_created_and_removed(temp_dir):
    async def scenario():
        async with staging_area(temp_dir, 'rd', '18.0.0', 'x64') as path:
            assert path.parent == temp_dir
            assert path.is_dir()
            (path / 'node').mkdir()
            (path / 'node' / 'file.txt').write_text('x')
            return path

    path = asyncio.run(scenario())

    assert not path.exists()
    assert list(temp_dir.iterdir()) == []


def test_staging_area_removed_when_body_fails(temp_dir):
    async def scenario():
        async with staging_area(temp_dir, 'rd', '18.0.0', 'x64') as path:
            (path / 'partial').write_bytes(b'half')
            raise RuntimeError('extraction exploded')

    with pytest.raises(RuntimeError, match='extraction exploded'):
        asyncio.run(scenario())

    assert list(temp_dir.iterdir()) == []


def test_staging_area_tolerates_already_removed(temp_dir):
    async def scenario():
        async with staging_area(temp_dir, 'rd', '18.0.0', 'x64') as path:
            path.rmdir()

    asyncio.run(scenario())

    assert list(temp_dir.iterdir()) == []


def test_staging_area_creates_missing_temp_dir(tmp_path):
    temp_dir = tmp_path / 'does' / 'not' / 'exist'

    async def scenario():
        async with staging_area(temp_dir, 'rd', '18.0.0', 'x64') as path:
            assert path.is_dir()

    asyncio.run(scenario())

    assert temp_dir.is_dir()


def test_cleanup_failure_alone_raises_cleanup_error(temp_dir, monkeypatch):
    async def failing_remove(path):
        raise PermissionError(errno.EACCES, 'Permission denied', str(path))

    monkeypatch.setattr(staging, 'remove_path', failing_remove)

    async def scenario():
        async with staging_area(temp_dir, 'rd', '18.0.0', 'x64'):
            pass

    with pytest.raises(CleanupError, match='Could not remove staging area'):
        asyncio.run(scenario())


def test_cleanup_failure_does_not_mask_original_error(temp_dir, monkeypatch):
    async def failing_remove(path):
        raise PermissionError(errno.EACCES, 'Permission denied', str(path))

    monkeypatch.setattr(staging, 'remove_path', failing_remove)

    async def scenario():
        async with staging_area(temp_dir, 'rd', '18.0.0', 'x64'):
            raise ValueError('original failure')

    with pytest.raises(ValueError, match='original failure'):
        asyncio.run(scenario())


def test_remove_path_handles_files_directories_and_absence(tmp_path):
    tree = tmp_path / 'tree'
    (tree / 'a' / 'b').mkdir(parents=True)
    (tree / 'a' / 'b' / 'c.txt').write_text('c')
    single = tmp_path / 'single.bin'
    single.write_bytes(b'1')

    asyncio.run(remove_path(tree))
    asyncio.run(remove_path(single))
    asyncio.run(remove_path(tmp_path / 'missing'))

    assert not tree.exists()
    assert not single.exists()


def test_list_entries_sorted(tmp_path):
    (tmp_path / 'b').mkdir()
    (tmp_path / 'a.txt').write_text('a')

    assert asyncio.run(list_entries(tmp_path)) == ['a.txt', 'b']


def test_path_exists(tmp_path):
    assert asyncio.run(path_exists(tmp_path)) is True
    assert asyncio.run(path_exists(tmp_path / 'nope')) is False


def test_promote_directory_creates_parents(tmp_path):
    src = tmp_path / 'staged'
    (src / 'bin').mkdir(parents=True)
    (src / 'bin' / 'node').write_text('node')
    dst = tmp_path / 'out' / 'nested' / '18.0.0'

    assert asyncio.run(promote_path(src, dst)) is True

    assert (dst / 'bin' / 'node').read_text() == 'node'
    assert not src.exists()


def test_promote_directory_loses_race_to_existing_output(tmp_path):
    src = tmp_path / 'staged'
    src.mkdir()
    (src / 'mine.txt').write_text('mine')
    dst = tmp_path / 'out'
    dst.mkdir()
    (dst / 'theirs.txt').write_text('theirs')

    assert asyncio.run(promote_path(src, dst)) is False

    assert sorted(p.name for p in dst.iterdir()) == ['theirs.txt']


def test_promote_file_never_replaces_existing_file(tmp_path):
    src = tmp_path / 'node.exe'
    src.write_bytes(b'new')
    dst = tmp_path / 'out' / 'node.exe'

    assert asyncio.run(promote_path(src, dst)) is True
    assert dst.read_bytes() == b'new'

    again = tmp_path / 'again.exe'
    again.write_bytes(b'newer')
    assert asyncio.run(promote_path(again, dst)) is False
    assert dst.read_bytes() == b'new'


def test_promote_across_devices_copies_then_renames(tmp_path, monkeypatch):
    src = tmp_path / 'staged'
    (src / 'lib').mkdir(parents=True)
    (src / 'lib' / 'index.js').write_text('module.exports = 1')
    dst = tmp_path / 'out' / '18.0.0'

    real_move = staging._move_no_replace
    calls = []

    def move(source, target):
        calls.append((source, target))
        if len(calls) == 1:
            raise OSError(errno.EXDEV, 'Invalid cross-device link')
        real_move(source, target)

    monkeypatch.setattr(staging, '_move_no_replace', move)

    assert asyncio.run(promote_path(src, dst)) is True

    assert (dst / 'lib' / 'index.js').read_text() == 'module.exports = 1'
    assert calls[1][0].name.startswith('.18.0.0.partial-')
    assert sorted(p.name for p in dst.parent.iterdir()) == ['18.0.0']
    assert not src.exists()


def test_promote_across_devices_lost_race_removes_partial(tmp_path, monkeypatch):
    src = tmp_path / 'staged'
    src.mkdir()
    (src / 'mine.txt').write_text('mine')
    dst = tmp_path / 'out' / '18.0.0'
    dst.mkdir(parents=True)
    (dst / 'theirs.txt').write_text('theirs')

    real_move = staging._move_no_replace
    calls = []

    def move(source, target):
        calls.append(source)
        if len(calls) == 1:
            raise OSError(errno.EXDEV, 'Invalid cross-device link')
        real_move(source, target)

    monkeypatch.setattr(staging, '_move_no_replace', move)

    assert asyncio.run(promote_path(src, dst)) is False

    assert sorted(p.name for p in dst.parent.iterdir()) == ['18.0.0']
    assert sorted(p.name for p in dst.iterdir()) == ['theirs.txt']
