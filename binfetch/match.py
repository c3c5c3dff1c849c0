"""Select the release asset built for a platform and architecture."""

from __future__ import annotations

from typing import Iterable, NamedTuple

from .errors import AssetNotFoundError
from .utils import log

# .tar.bz2 is extractable but deliberately not matched, see DESIGN.md
MATCH_SUFFIXES = (".tar.gz", ".zip")


class ReleaseAsset(NamedTuple):
    """A downloadable file attached to a release."""

    name: str
    url: str


def _token_end(name: str, tokens: Iterable[str]) -> int:
    """Return the smallest end offset of any token in ``name``, or -1."""
    ends = [name.find(t) + len(t) for t in tokens if t and t in name]
    return min(ends) if ends else -1


def _has_suffix_after(name: str, start: int) -> bool:
    return any(name.find(suffix, start) != -1 for suffix in MATCH_SUFFIXES)


def matches(name: str, platform: str, aliases: Iterable[str]) -> bool:
    """Check whether an asset name embeds the platform, an arch alias and an archive suffix.

    The platform and arch may appear in either order with anything in
    between; the archive suffix has to come after both of them.
    """
    name = name.lower()
    platform_end = _token_end(name, [platform.lower()])
    arch_end = _token_end(name, [a.lower() for a in aliases])
    if platform_end == -1 or arch_end == -1:
        return False
    return _has_suffix_after(name, max(platform_end, arch_end))


def find_asset(
    assets: list[ReleaseAsset],
    platform: str,
    aliases: Iterable[str],
) -> ReleaseAsset:
    """Return the first asset in listing order built for ``platform``/``aliases``."""
    aliases = tuple(aliases)
    log(
        f"Looking for an asset matching {platform} and one of {', '.join(aliases)}",
        "debug",
    )
    for asset in assets:
        if matches(asset.name, platform, aliases):
            log(f"Found matching asset: {asset.name}", "success")
            return asset

    names = [asset.name for asset in assets]
    msg = f"Could not find a release asset for {platform}/{'|'.join(aliases)}. Found: {', '.join(names)}"
    raise AssetNotFoundError(msg, names)
