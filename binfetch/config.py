"""Configuration management for binfetch."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, NamedTuple

import yaml

from .utils import log

DEFAULT_CHMOD = "755"
LATEST = "latest"


class ToolInfo(NamedTuple):
    """Identifies one (owner, project, tag, platform, arch) install target."""

    owner: str
    project: str
    tag: str
    platform: str
    arch: str


@dataclass
class InstallOptions:
    """Per-run inputs of an installation."""

    tag: str = LATEST
    platform: str | None = None
    arch: str | None = None
    cache: bool = False
    chmod: str = DEFAULT_CHMOD

    def __post_init__(self) -> None:
        """Treat an empty tag as the floating tag."""
        if not self.tag:
            self.tag = LATEST
        if not self.chmod:
            self.chmod = DEFAULT_CHMOD


@dataclass
class ToolEntry:
    """A tool listed in the configuration file."""

    owner: str
    project: str
    options: InstallOptions = field(default_factory=InstallOptions)

    @property
    def repo(self) -> str:
        return f"{self.owner}/{self.project}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolEntry:
        """Build an entry from a ``{repo: owner/project, ...}`` mapping."""
        owner, project = split_repo(data["repo"])
        options = InstallOptions(
            tag=str(data.get("tag") or LATEST),
            platform=data.get("platform"),
            arch=data.get("arch"),
            cache=_as_bool(data.get("cache", False)),
            chmod=str(data.get("chmod") or DEFAULT_CHMOD),
        )
        return cls(owner=owner, project=project, options=options)


def split_repo(repo: str) -> tuple[str, str]:
    """Split ``owner/project`` into its two parts."""
    owner, sep, project = repo.strip().partition("/")
    if not sep or not owner or not project or "/" in project:
        msg = f"Repository must look like 'owner/project', got '{repo}'"
        raise ValueError(msg)
    return owner, project


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "enable", "enabled")
    return bool(value)


def _default_tool_cache_dir() -> Path:
    return Path(os.path.expanduser("~/.cache/binfetch/tools"))


@dataclass
class BinfetchConfig:
    """Process-wide configuration for binfetch."""

    tool_cache_dir: Path = field(default_factory=_default_tool_cache_dir)
    cache_dir: Path = field(
        default_factory=lambda: Path(os.path.expanduser("~/.cache/binfetch/cache")),
    )
    token: str | None = None
    api_url: str = "https://api.github.com"
    timeout: float = 30
    max_retries: int = 3
    github_path: Path | None = None
    tools: list[ToolEntry] = field(default_factory=list)

    def apply_environment(self, environ: dict[str, str] | None = None) -> BinfetchConfig:
        """Override settings from environment variables set by CI runners."""
        env = os.environ if environ is None else environ
        if env.get("GITHUB_TOKEN"):
            self.token = env["GITHUB_TOKEN"]
        if env.get("RUNNER_TOOL_CACHE"):
            self.tool_cache_dir = Path(env["RUNNER_TOOL_CACHE"])
        if env.get("GITHUB_PATH"):
            self.github_path = Path(env["GITHUB_PATH"])
        return self

    def validate(self) -> None:
        """Validate the configuration."""
        if self.tool_cache_dir == _default_tool_cache_dir():
            log(
                f"Expected RUNNER_TOOL_CACHE to be defined, using {self.tool_cache_dir}",
                "warning",
            )
        if self.max_retries < 0:
            log(f"max_retries must not be negative, got {self.max_retries}; using 0", "warning")
            self.max_retries = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BinfetchConfig:
        """Build a configuration from a parsed YAML mapping."""
        data = dict(data)
        for key in ("tool_cache_dir", "cache_dir", "github_path"):
            if isinstance(data.get(key), str):
                data[key] = Path(os.path.expanduser(data[key]))
        data["tools"] = [ToolEntry.from_dict(t) for t in data.get("tools") or []]
        return cls(**data)

    @classmethod
    def load_from_file(cls, config_path: str | None = None) -> BinfetchConfig:
        """Load configuration from YAML file."""
        if not config_path:
            config_path = os.path.expanduser("~/.config/binfetch/binfetch.yaml")
            if not os.path.exists(config_path):
                return cls()

        try:
            with open(config_path) as file:
                config_data = yaml.safe_load(file) or {}
            return cls.from_dict(config_data)
        except FileNotFoundError:
            log(f"Configuration file not found: {config_path}", "warning")
            return cls()
        except yaml.YAMLError:
            log(
                f"Invalid YAML in configuration file: {config_path}",
                "error",
                print_exception=True,
            )
            return cls()
        except (TypeError, ValueError, KeyError) as e:
            log(f"Error loading configuration: {e}", "error")
            return cls()
