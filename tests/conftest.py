"""Configuration for pytest fixtures used in binfetch tests."""

from __future__ import annotations

import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Callable

import pytest

from binfetch.config import BinfetchConfig


@pytest.fixture
def create_dummy_archive() -> Callable:
    r"""Create an archive file with binary files for testing.

    Returns a function that creates archive files with specified binaries.

    Usage:
        archive_path = create_dummy_archive(
            dest_path=tmp_path / "test.tar.gz",
            binary_names=["mybinary", "otherbinary"],
            archive_type="tar.gz",
            binary_content="#!/bin/sh\necho test"
        )
    """

    def _create_archive(
        dest_path: Path,
        binary_names: str | list[str],
        archive_type: str = "tar.gz",
        binary_content: str = "#!/usr/bin/env echo\n",
        nested_dir: str | None = None,
    ) -> Path:
        if isinstance(binary_names, str):
            binary_names = [binary_names]

        with tempfile.TemporaryDirectory() as tmp_dir:
            tmp_path = Path(tmp_dir)

            if nested_dir:
                bin_dir = tmp_path / nested_dir
                bin_dir.mkdir(exist_ok=True, parents=True)
            else:
                bin_dir = tmp_path

            created_files = []
            for binary in binary_names:
                bin_file = bin_dir / binary
                bin_file.write_text(binary_content)
                bin_file.chmod(0o644)
                created_files.append(bin_file)

            if archive_type in ("tar.gz", "tar.bz2"):
                mode = "w:gz" if archive_type == "tar.gz" else "w:bz2"
                with tarfile.open(dest_path, mode) as tar:
                    for file_path in created_files:
                        tar.add(file_path, arcname=str(file_path.relative_to(tmp_path)))
            elif archive_type == "zip":
                with zipfile.ZipFile(dest_path, "w") as zipf:
                    for file_path in created_files:
                        zipf.write(file_path, arcname=str(file_path.relative_to(tmp_path)))
            else:  # pragma: no cover
                msg = f"Unsupported archive type: {archive_type}"
                raise ValueError(msg)

            return dest_path

    return _create_archive


@pytest.fixture
def config(tmp_path: Path) -> BinfetchConfig:
    """A configuration that keeps everything inside ``tmp_path``."""
    return BinfetchConfig(
        tool_cache_dir=tmp_path / "tools",
        cache_dir=tmp_path / "cache",
        github_path=tmp_path / "github_path",
    )


@pytest.fixture
def clean_path(monkeypatch: pytest.MonkeyPatch) -> None:
    """Let tests modify PATH without leaking into the session."""
    monkeypatch.setenv("PATH", "/usr/bin")
