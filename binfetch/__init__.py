"""binfetch - GitHub Release Binary Installer.

Installs the release asset of a GitHub project that was built for the
current operating system and CPU architecture: the archive is downloaded,
extracted into a tool cache directory, its binaries are made executable and
the directory is added to the PATH. Installs of fixed tags can be cached and
replayed across runs without touching the network.
"""

from __future__ import annotations

__version__ = "0.1.0"

from . import cache, cli, config, detect, extract, github, install, match, utils
from .cache import DirectoryCache, cache_key, tool_path
from .cli import main
from .config import BinfetchConfig, InstallOptions, ToolInfo
from .detect import arch_aliases, resolve_arch, resolve_platform
from .extract import extract_archive, extraction_plan
from .github import GitHubClient
from .install import Installer, make_executable
from .match import ReleaseAsset, find_asset

__all__ = [
    "BinfetchConfig",
    "DirectoryCache",
    "GitHubClient",
    "InstallOptions",
    "Installer",
    "ReleaseAsset",
    "ToolInfo",
    "arch_aliases",
    "cache",
    "cache_key",
    "cli",
    "config",
    "detect",
    "extract",
    "extract_archive",
    "extraction_plan",
    "find_asset",
    "github",
    "install",
    "main",
    "make_executable",
    "match",
    "resolve_arch",
    "resolve_platform",
    "tool_path",
    "utils",
]
