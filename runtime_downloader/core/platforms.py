# Path: runtime_downloader/core/platforms.py
"""
Host Platform Detection

Maps machine and OS identifiers onto the names used by runtime
distribution mirrors (x64, arm64, linux, darwin, win, ...).
"""

import platform as _platform
import sys
from typing import Optional

ARCH_ALIASES = {
    'x86_64': 'x64',
    'amd64': 'x64',
    'x64': 'x64',
    'aarch64': 'arm64',
    'arm64': 'arm64',
    'i386': 'x86',
    'i686': 'x86',
    'x86': 'x86',
    'ia32': 'x86',
    'armv7l': 'armv7l',
    'armv6l': 'armv6l',
    'ppc64le': 'ppc64le',
    's390x': 's390x',
}

PLATFORM_ALIASES = {
    'linux': 'linux',
    'darwin': 'darwin',
    'win32': 'win',
    'windows': 'win',
    'win': 'win',
    'cygwin': 'win',
    'aix': 'aix',
    'sunos': 'sunos',
}


def normalize_arch(arch: str) -> str:
    """Return the mirror name for a machine architecture (unknown names pass through)."""
    key = arch.strip().lower()
    return ARCH_ALIASES.get(key, key)


def normalize_platform(platform_name: str) -> str:
    """Return the mirror name for an operating system."""
    key = platform_name.strip().lower()
    for prefix, name in PLATFORM_ALIASES.items():
        if key.startswith(prefix):
            return name
    return key


def host_arch(machine: Optional[str] = None) -> str:
    return normalize_arch(machine or _platform.machine())


def host_platform(system: Optional[str] = None) -> str:
    return normalize_platform(system or sys.platform)


__all__ = [
    'ARCH_ALIASES',
    'PLATFORM_ALIASES',
    'normalize_arch',
    'normalize_platform',
    'host_arch',
    'host_platform',
]
