"""Install a release: resolve, match, download, extract, chmod and cache."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from .cache import SaveStatus, cache_key, tool_path
from .config import LATEST, InstallOptions, ToolInfo
from .detect import arch_aliases, resolve_arch, resolve_platform
from .errors import CacheValidationError, InvalidModeError, NoBinariesError
from .extract import extract_archive, extraction_plan
from .match import ReleaseAsset, find_asset
from .utils import add_to_path, log

if TYPE_CHECKING:
    from .cache import ToolCache
    from .config import BinfetchConfig
    from .github import ReleaseSource


class ChmodResult(NamedTuple):
    path: Path
    error: OSError | None = None


@dataclass
class ChmodReport:
    """Per-file outcome of making binaries executable."""

    mode: str
    results: list[ChmodResult] = field(default_factory=list)

    @property
    def failures(self) -> list[ChmodResult]:
        return [r for r in self.results if r.error is not None]

    @property
    def failed(self) -> bool:
        return bool(self.failures)


def parse_mode(mode: str) -> int:
    """Parse an octal permission string such as ``"755"``."""
    try:
        value = int(mode, 8)
    except (TypeError, ValueError):
        value = -1
    if not 0 <= value <= 0o7777:  # noqa: PLR2004
        msg = f"Invalid chmod mode: {mode!r}"
        raise InvalidModeError(msg)
    return value


def make_executable(dest_dir: Path, mode: str = "755") -> ChmodReport:
    """Apply ``mode`` to every regular file directly inside ``dest_dir``.

    A failing chmod is logged and recorded but does not stop the remaining
    files from being processed.
    """
    value = parse_mode(mode)
    with os.scandir(dest_dir) as entries:
        bins = sorted(
            Path(entry.path) for entry in entries if entry.is_file(follow_symlinks=False)
        )
    if not bins:
        msg = f"No files found in {dest_dir}"
        raise NoBinariesError(msg)

    report = ChmodReport(mode=mode)
    for bin_path in bins:
        try:
            bin_path.chmod(value)
        except OSError as e:
            log(f"Failed to chmod {bin_path} to {mode}: {e}", "error")
            report.results.append(ChmodResult(bin_path, e))
        else:
            log(f"chmod'd {bin_path} to {mode}", "debug")
            report.results.append(ChmodResult(bin_path))
    return report


@dataclass
class InstallResult:
    """What an installation did."""

    tool: ToolInfo
    destination: Path
    cache_hit: bool = False
    asset: ReleaseAsset | None = None
    chmod: ChmodReport | None = None

    @property
    def ok(self) -> bool:
        return self.chmod is None or not self.chmod.failed


class Installer:
    """Installs GitHub release binaries for the current platform."""

    def __init__(
        self,
        config: BinfetchConfig,
        source: ReleaseSource,
        cache: ToolCache | None = None,
    ) -> None:
        self.config = config
        self.source = source
        self.cache = cache

    def install(self, owner: str, project: str, options: InstallOptions | None = None) -> InstallResult:
        """Install ``owner/project`` and expose it on the path."""
        options = options or InstallOptions()
        platform = resolve_platform(options.platform)
        arch = resolve_arch(options.arch)
        info = ToolInfo(owner, project, options.tag, platform, arch)
        dest = tool_path(info, self.config.tool_cache_dir)

        key = cache_key(info)
        use_cache = options.cache and key is not None and self.cache is not None
        if use_cache and self.cache.restore(dest, key):
            log(f"Found {project} in the cache: {dest}", "success")
            self._expose(dest)
            return InstallResult(tool=info, destination=dest, cache_hit=True)

        asset = self._find_asset(info)
        chmod_report = self._download_and_extract(asset, dest, options.chmod)

        if use_cache:
            self._store(dest, key)

        self._expose(dest)
        log(f"Successfully installed {project}", "success")
        log(f"Binaries available at {dest}", "info")
        return InstallResult(tool=info, destination=dest, asset=asset, chmod=chmod_report)

    def _find_asset(self, info: ToolInfo) -> ReleaseAsset:
        if info.tag == LATEST:
            release = self.source.latest_release(info.owner, info.project)
        else:
            release = self.source.release_by_tag(info.owner, info.project, info.tag)
        return find_asset(release.assets, info.platform, arch_aliases(info.arch))

    def _download_and_extract(self, asset: ReleaseAsset, dest: Path, mode: str) -> ChmodReport:
        plan = extraction_plan(asset.name)
        parse_mode(mode)
        fd, tmp_name = tempfile.mkstemp(prefix="binfetch-", suffix=f"-{asset.name}")
        os.close(fd)
        archive_path = Path(tmp_name)
        try:
            self.source.download_asset(asset.url, archive_path)
            log(f"Downloaded {asset.name} to {archive_path}", "debug")
            extract_archive(archive_path, dest, plan)
            log(f"Extracted release asset {asset.name} to {dest}", "info")
        finally:
            archive_path.unlink(missing_ok=True)
        return make_executable(dest, mode)

    def _store(self, dest: Path, key: str) -> None:
        result = self.cache.save(dest, key)
        if result.status is SaveStatus.INVALID:
            raise CacheValidationError(result.message)
        if result.status is SaveStatus.RESERVED:
            log(result.message, "info")
        elif result.status is SaveStatus.FAILED:
            log(result.message, "warning")

    def _expose(self, dest: Path) -> None:
        add_to_path(dest, self.config.github_path)
