"""Platform and architecture detection."""

from __future__ import annotations

import platform
import sys

from .errors import UnsupportedPlatformError
from .utils import log

PLATFORMS = ("linux", "darwin", "windows")

# sys.platform (and accepted override spellings) -> canonical platform token
_PLATFORM_MAP = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "windows": "windows",
}

# platform.machine() -> canonical arch token
_ARCH_MAP = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
}

_ARCH_ALIASES = {
    "x64": ("x64", "x86_64", "amd64"),
}


def resolve_platform(override: str | None = None, system: str | None = None) -> str:
    """Return the canonical platform token for an override or the host."""
    reported = sys.platform if system is None else system
    requested = override.strip().lower() if override else reported.lower()
    resolved = _PLATFORM_MAP.get(requested)
    if resolved is None:
        msg = (
            f"Unsupported platform '{requested}' - "
            f"releases are only installed for {', '.join(PLATFORMS)}"
        )
        raise UnsupportedPlatformError(msg)
    log(f"System reported platform: {reported}", "debug")
    log(f"Using platform: {resolved}", "info")
    return resolved


def resolve_arch(override: str | None = None, machine: str | None = None) -> str:
    """Return the arch token for an override (used as given) or the host."""
    reported = platform.machine() if machine is None else machine
    if override and override.strip():
        arch = override.strip().lower()
    else:
        arch = _ARCH_MAP.get(reported.lower(), reported.lower())
    if not arch:
        msg = "Could not determine the CPU architecture, pass one explicitly"
        raise UnsupportedPlatformError(msg)
    log(f"System reported arch: {reported}", "debug")
    log(f"Using arch: {arch}", "info")
    return arch


def arch_aliases(arch: str) -> tuple[str, ...]:
    """Return the spellings of ``arch`` an asset name may use."""
    return _ARCH_ALIASES.get(arch, (arch,))
