# Path: runtime_downloader/engine/staging.py
"""
Staging Area

Filesystem collaborator for the atomic installer:
- staging_area(): scoped, uniquely named directory in the temp area,
  removed on every exit path
- remove_path(): recursive removal tolerating absence
- list_entries(): top-level directory listing
- promote_path(): rename (same device) or copy+rename (cross device)
  that never replaces an existing final path

Staging lives in the temporary-files area, never next to the final
path, so an interrupted process leaves nothing that external temp
cleanup cannot reclaim.
"""

import asyncio
import errno
import os
import shutil
import sys
import tempfile
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Union

import aiofiles.os

from runtime_downloader.core.logger import get_logger
from runtime_downloader.engine.errors import AcquisitionError, CleanupError
from runtime_downloader.constants import LOG_PROCESS, LOG_OUTPUT
from runtime_downloader.engine.constants import (
    STAGING_SUFFIX_LENGTH,
    PROMOTION_PARTIAL_TEMPLATE,
)

logger = get_logger(__name__, 'engine')

# Raised by os.link on filesystems without hard links
_LINK_UNSUPPORTED = {errno.EPERM, errno.EOPNOTSUPP, getattr(errno, 'ENOTSUP', errno.EOPNOTSUPP)}


def _unique_suffix() -> str:
    return uuid.uuid4().hex[:STAGING_SUFFIX_LENGTH]


def staging_prefix(prefix: str, version: str, architecture: str) -> str:
    """Name prefix of a staging directory; mkdtemp appends the random part."""
    return f"{prefix}-{version}-{architecture}-"


@asynccontextmanager
async def staging_area(
    temp_dir: Union[str, Path],
    prefix: str,
    version: str,
    architecture: str,
) -> AsyncIterator[Path]:
    """
    Create a staging directory and remove it on exit.

    A cleanup failure never masks an error raised inside the block;
    it is logged instead. When cleanup is the only failure it is
    raised as CleanupError.

    Yields:
        Path of the new (empty) staging directory

    Raises:
        AcquisitionError: Staging directory could not be created
        CleanupError: Staging directory could not be removed
    """
    name_prefix = staging_prefix(prefix, version, architecture)

    try:
        await aiofiles.os.makedirs(temp_dir, exist_ok=True)
        path = Path(await asyncio.to_thread(tempfile.mkdtemp, prefix=name_prefix, dir=temp_dir))
    except OSError as e:
        raise AcquisitionError(f"Could not create staging area in {temp_dir}: {e}") from e

    logger.info(f"{LOG_PROCESS} Staging area: {path}")

    try:
        yield path
    except BaseException:
        try:
            await remove_path(path)
        except OSError as cleanup_error:
            logger.warning(f"{LOG_OUTPUT} Could not remove staging area {path}: {cleanup_error}")
        raise

    try:
        await remove_path(path)
    except OSError as e:
        logger.error(f"{LOG_OUTPUT} Could not remove staging area {path}: {e}")
        raise CleanupError(f"Could not remove staging area {path}: {e}") from e

    logger.debug(f"{LOG_PROCESS} Removed staging area: {path}")


def _rmtree(path: Union[str, Path]) -> None:
    def _ignore_missing(function, failed_path, error):
        # onerror passes exc_info, onexc passes the exception
        exc = error[1] if isinstance(error, tuple) else error
        if not isinstance(exc, FileNotFoundError):
            raise exc

    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_ignore_missing)
    else:
        shutil.rmtree(path, onerror=_ignore_missing)


async def remove_path(path: Union[str, Path]) -> None:
    """Remove a file or directory tree; an absent path counts as removed."""
    try:
        if await aiofiles.os.path.isdir(path) and not await aiofiles.os.path.islink(path):
            await asyncio.to_thread(_rmtree, path)
        else:
            await aiofiles.os.remove(path)
    except FileNotFoundError:
        return


async def list_entries(path: Union[str, Path]) -> list[str]:
    """Top-level entry names of a directory, sorted."""
    return sorted(await aiofiles.os.listdir(path))


def _move_no_replace(src: Path, dst: Path) -> None:
    """
    Move src to dst, failing if dst already exists.

    Directories use rename, which refuses to replace a non-empty
    directory. Files are hard-linked then unlinked, since rename would
    silently replace an existing file.
    """
    if src.is_dir() and not src.is_symlink():
        os.rename(src, dst)
        return

    try:
        os.link(src, dst)
    except OSError as e:
        if e.errno not in _LINK_UNSUPPORTED:
            raise
        if dst.exists():
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(dst)) from e
        os.rename(src, dst)
        return
    os.unlink(src)


def _copy_entry(src: Path, dst: Path) -> None:
    if src.is_dir() and not src.is_symlink():
        shutil.copytree(src, dst, symlinks=True)
    else:
        shutil.copy2(src, dst, follow_symlinks=False)


def _lost_race(error: OSError, dst: Path) -> bool:
    if isinstance(error, FileExistsError) or error.errno in (errno.EEXIST, errno.ENOTEMPTY):
        return True
    return dst.exists()


async def promote_path(src: Union[str, Path], dst: Union[str, Path]) -> bool:
    """
    Make a staged entry visible at its final path.

    Args:
        src: Staged entry
        dst: Final output path

    Returns:
        True if this call promoted src, False if dst appeared first
        (another acquisition won the race)

    Raises:
        OSError: Promotion failed for any other reason
    """
    src, dst = Path(src), Path(dst)
    await aiofiles.os.makedirs(dst.parent, exist_ok=True)

    try:
        await asyncio.to_thread(_move_no_replace, src, dst)
    except OSError as e:
        if e.errno == errno.EXDEV:
            return await _promote_across_devices(src, dst)
        if _lost_race(e, dst):
            logger.info(f"{LOG_OUTPUT} {dst} appeared during promotion; keeping it")
            return False
        raise

    logger.info(f"{LOG_OUTPUT} Promoted {src.name} to {dst}")
    return True


async def _promote_across_devices(src: Path, dst: Path) -> bool:
    """Copy into a hidden sibling of dst, then rename it into place."""
    partial = dst.parent / PROMOTION_PARTIAL_TEMPLATE.format(
        name=dst.name, suffix=_unique_suffix()
    )
    logger.info(f"{LOG_PROCESS} Cross-device promotion via {partial.name}")

    try:
        await asyncio.to_thread(_copy_entry, src, partial)
        await asyncio.to_thread(_move_no_replace, partial, dst)
    except OSError as e:
        await remove_path(partial)
        if _lost_race(e, dst):
            logger.info(f"{LOG_OUTPUT} {dst} appeared during promotion; keeping it")
            return False
        raise
    except BaseException:
        await remove_path(partial)
        raise

    await remove_path(src)
    logger.info(f"{LOG_OUTPUT} Promoted {src.name} to {dst} (copied)")
    return True


__all__ = [
    'staging_prefix',
    'staging_area',
    'remove_path',
    'list_entries',
    'promote_path',
]
