"""Tests for binfetch.utils."""

import logging
import os
from pathlib import Path

import pytest

from binfetch import utils
from binfetch.utils import add_to_path, log, setup_logging


@pytest.mark.usefixtures("clean_path")
def test_add_to_path(tmp_path: Path) -> None:
    github_path = tmp_path / "github_path"
    add_to_path(tmp_path / "a", github_path)
    add_to_path(tmp_path / "b", github_path)

    entries = os.environ["PATH"].split(os.pathsep)
    assert entries[:3] == [str(tmp_path / "b"), str(tmp_path / "a"), "/usr/bin"]
    assert github_path.read_text().splitlines() == [str(tmp_path / "a"), str(tmp_path / "b")]


@pytest.mark.usefixtures("clean_path")
def test_add_to_path_outside_actions(tmp_path: Path) -> None:
    add_to_path(tmp_path)
    assert os.environ["PATH"].startswith(str(tmp_path) + os.pathsep)


def test_log_escapes_markup(capsys: pytest.CaptureFixture[str]) -> None:
    log("asset [linux] ready", "success")
    assert "asset [linux] ready" in capsys.readouterr().out


def test_debug_only_when_verbose(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    # setup_logging replaces the root handlers; hand it a copy to keep pytest's own
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    level = root.level
    monkeypatch.setattr(utils, "_VERBOSE", False)
    log("hidden detail", "debug")
    assert "hidden detail" not in capsys.readouterr().out

    try:
        setup_logging(verbose=True)
        log("shown detail", "debug")
        assert "shown detail" in capsys.readouterr().out
    finally:
        root.setLevel(level)
