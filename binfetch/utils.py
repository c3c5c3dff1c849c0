"""Utility functions for binfetch."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Initialize rich console; paths and URLs must not be folded across lines
console = Console(soft_wrap=True)

_VERBOSE = False

_STYLES = {
    "info": ("🔍", "blue"),
    "success": ("✅", "green"),
    "warning": ("⚠️", "yellow"),
    "error": ("❌", "bold red"),
    "debug": ("🔧", "dim"),
}


def setup_logging(verbose: bool = False) -> None:  # noqa: FBT001, FBT002
    """Configure logging level based on verbosity."""
    global _VERBOSE
    _VERBOSE = verbose
    # requests/urllib3 log through the stdlib; only surface them when verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def log(message: str, level: str = "default", *, print_exception: bool = False) -> None:
    """Print a message to the console with a style matching its level."""
    if level == "debug" and not _VERBOSE:
        return
    if level in _STYLES:
        emoji, style = _STYLES[level]
        console.print(f"{emoji} [{style}]{escape(message)}[/{style}]")
    else:
        console.print(escape(message))
    if print_exception:
        console.print_exception()


def add_to_path(path: Path, github_path: Path | None = None) -> None:
    """Prepend ``path`` to PATH for this process and any GitHub Actions steps after it."""
    os.environ["PATH"] = f"{path}{os.pathsep}{os.environ.get('PATH', '')}"
    if github_path is not None:
        with open(github_path, "a", encoding="utf-8") as f:
            f.write(f"{path}{os.linesep}")
    log(f"Added {path} to the path", "info")
