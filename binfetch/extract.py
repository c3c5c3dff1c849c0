"""Extract release archives into an install destination."""

from __future__ import annotations

import tarfile
import zipfile
from pathlib import Path
from typing import Literal, NamedTuple

from .errors import ExtractionError, UnsupportedArchiveError
from .utils import log

BZIP2_FLAGS = "xj"

# tar flags -> tarfile read mode; no flags means gzip
_TAR_MODES = {
    None: "r:gz",
    BZIP2_FLAGS: "r:bz2",
}


class ExtractionPlan(NamedTuple):
    """How to extract an archive: which routine, and any format flag."""

    kind: Literal["tar", "zip"]
    flags: str | None = None


def extraction_plan(asset_name: str) -> ExtractionPlan:
    """Choose the extraction routine from the asset's file-name suffix."""
    if asset_name.endswith(".tar.gz"):
        return ExtractionPlan("tar")
    if asset_name.endswith(".tar.bz2"):
        return ExtractionPlan("tar", BZIP2_FLAGS)
    if asset_name.endswith(".zip"):
        return ExtractionPlan("zip")
    msg = f"Unsupported archive type: {asset_name}"
    raise UnsupportedArchiveError(msg)


def extract_tar(archive_path: Path, dest_dir: Path, flags: str | None = None) -> None:
    """Extract a (compressed) tarball into ``dest_dir``."""
    mode = _TAR_MODES.get(flags)
    if mode is None:
        msg = f"Unsupported tar flags: {flags}"
        raise ExtractionError(msg)
    try:
        with tarfile.open(archive_path, mode=mode) as tar:
            tar.extractall(path=dest_dir, filter="data")
    except (tarfile.TarError, EOFError, OSError) as e:
        msg = f"Failed to extract tar {archive_path}: {e}"
        raise ExtractionError(msg) from e


def extract_zip(archive_path: Path, dest_dir: Path) -> None:
    """Extract a zip archive into ``dest_dir``."""
    try:
        with zipfile.ZipFile(archive_path) as zip_file:
            zip_file.extractall(path=dest_dir)
    except (zipfile.BadZipFile, OSError) as e:
        msg = f"Failed to extract zip {archive_path}: {e}"
        raise ExtractionError(msg) from e


def extract_archive(archive_path: Path, dest_dir: Path, plan: ExtractionPlan) -> None:
    """Extract ``archive_path`` into ``dest_dir`` following ``plan``."""
    dest_dir.mkdir(parents=True, exist_ok=True)
    log(f"Extracting {archive_path} to {dest_dir}", "debug")
    if plan.kind == "tar":
        extract_tar(archive_path, dest_dir, plan.flags)
    else:
        extract_zip(archive_path, dest_dir)
