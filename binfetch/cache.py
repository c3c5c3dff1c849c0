"""Cache keys, install destinations and the cross-run tool cache."""

from __future__ import annotations

import enum
import hashlib
import os
import shutil
import time
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple, Protocol

from .config import LATEST
from .utils import log

if TYPE_CHECKING:
    from .config import ToolInfo

KEY_PREFIX = "binfetch"
MAX_KEY_LENGTH = 512
# a reservation without a tree after this long belongs to a run that died
STALE_RESERVATION_SECONDS = 600


def cache_key(info: ToolInfo) -> str | None:
    """Return the cache key for ``info``, or None for floating tags."""
    # Floating tags may point at a different release next run.
    if info.tag in (LATEST, ""):
        return None
    return f"{KEY_PREFIX}/{info.owner}/{info.project}/{info.tag}/{info.platform}-{info.arch}"


def tool_path(info: ToolInfo, root: Path) -> Path:
    """Return the directory ``info`` is extracted into below ``root``."""
    return Path(root, info.owner, info.project, info.tag, f"{info.platform}-{info.arch}")


class SaveStatus(enum.Enum):
    """Outcome of storing an entry in the cache."""

    SAVED = "saved"
    RESERVED = "reserved"  # another run already claimed the key
    INVALID = "invalid"
    FAILED = "failed"


class SaveResult(NamedTuple):
    status: SaveStatus
    message: str = ""


class ToolCache(Protocol):
    """Storage that outlives a single run."""

    def restore(self, path: Path, key: str) -> bool:
        """Restore the tree stored under ``key`` into ``path``; True on a hit."""
        ...

    def save(self, path: Path, key: str) -> SaveResult:
        """Store the tree at ``path`` under ``key``."""
        ...


class DirectoryCache:
    """A ToolCache keeping entries as directory trees on the local disk.

    A save copies into a private staging directory and renames it into place
    last, so a concurrent restore sees either no tree or a complete one.
    """

    def __init__(self, root: Path, stale_after: float = STALE_RESERVATION_SECONDS) -> None:
        self.root = Path(root)
        self.stale_after = stale_after

    def _entry_dir(self, key: str) -> Path:
        return self.root / hashlib.sha256(key.encode()).hexdigest()

    def restore(self, path: Path, key: str) -> bool:
        entry = self._entry_dir(key) / "tree"
        if not entry.is_dir():
            log(f"Cache miss for {key}", "debug")
            return False
        path.mkdir(parents=True, exist_ok=True)
        shutil.copytree(entry, path, symlinks=True, dirs_exist_ok=True)
        return True

    def _reserve(self, entry: Path) -> int:
        """Create the reservation marker, reclaiming one abandoned by a dead run."""
        marker = entry / "reserved"
        try:
            return os.open(marker, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            if (entry / "tree").is_dir() or time.time() - marker.stat().st_mtime < self.stale_after:
                raise
        log(f"Reclaiming stale cache reservation {marker}", "debug")
        marker.unlink(missing_ok=True)
        return os.open(marker, os.O_CREAT | os.O_EXCL | os.O_WRONLY)

    def save(self, path: Path, key: str) -> SaveResult:
        if not key or len(key) > MAX_KEY_LENGTH or "," in key:
            return SaveResult(
                SaveStatus.INVALID,
                f"Key validation failed for {key!r}: keys must be 1-{MAX_KEY_LENGTH} "
                "characters and must not contain commas",
            )
        if not path.is_dir():
            return SaveResult(SaveStatus.INVALID, f"Path validation failed: {path} does not exist")

        entry = self._entry_dir(key)
        try:
            entry.mkdir(parents=True, exist_ok=True)
            # O_EXCL makes the reservation atomic across concurrent runs
            fd = self._reserve(entry)
        except FileExistsError:
            return SaveResult(
                SaveStatus.RESERVED,
                f"Unable to reserve cache with key {key}, another job may be creating this cache.",
            )
        except OSError as e:
            return SaveResult(SaveStatus.FAILED, f"Failed to reserve cache entry for {key}: {e}")

        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(key)
        staging = entry / f"tree.tmp-{os.getpid()}"
        try:
            shutil.copytree(path, staging, symlinks=True)
            os.replace(staging, entry / "tree")
        except OSError as e:
            shutil.rmtree(entry, ignore_errors=True)
            return SaveResult(SaveStatus.FAILED, f"Failed to save cache entry for {key}: {e}")
        log(f"Cache saved with key: {key}", "success")
        return SaveResult(SaveStatus.SAVED)
