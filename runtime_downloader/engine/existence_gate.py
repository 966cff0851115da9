# Path: runtime_downloader/engine/existence_gate.py
"""
Existence Gate

Filesystem presence check used twice per acquisition: before any
network activity (idempotence) and right before promotion (race
re-check). An existing final path is treated as complete and valid.

No locking: concurrent acquisitions may duplicate work, but only the
first promotion becomes visible.
"""

from pathlib import Path
from typing import Union

import aiofiles.os


async def path_exists(path: Union[str, Path]) -> bool:
    """Return True if a file or directory exists at path."""
    return await aiofiles.os.path.exists(path)


__all__ = ['path_exists']
