"""GitHub REST API access: release metadata and asset downloads."""

from __future__ import annotations

import time
from contextlib import suppress
from datetime import timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Any, NamedTuple, Protocol

import requests

from .errors import DownloadError, ReleaseNotFoundError
from .match import ReleaseAsset
from .utils import log

_RATE_LIMIT_STATUSES = (403, 429)
# used when a rate-limit response says when to retry in a form we cannot read
DEFAULT_RATE_LIMIT_WAIT = 60.0


def _parse_retry_after(value: str) -> float:
    """Seconds to wait for a Retry-After value in delta-seconds or HTTP-date form."""
    with suppress(ValueError):
        return max(float(value), 0.0)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        log(f"Unreadable Retry-After header: {value!r}", "debug")
        return DEFAULT_RATE_LIMIT_WAIT
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(when.timestamp() - time.time(), 1.0)


class Release(NamedTuple):
    tag_name: str
    assets: list[ReleaseAsset]


class ReleaseSource(Protocol):
    """Where releases and their assets come from."""

    def latest_release(self, owner: str, repo: str) -> Release: ...

    def release_by_tag(self, owner: str, repo: str, tag: str) -> Release: ...

    def download_asset(self, url: str, destination: Path) -> Path: ...


def _parse_release(data: dict[str, Any]) -> Release:
    assets = [ReleaseAsset(name=a["name"], url=a["url"]) for a in data.get("assets", [])]
    return Release(tag_name=data.get("tag_name", ""), assets=assets)


class GitHubClient:
    """A small GitHub client that waits out rate limits instead of failing."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        timeout: float = 30,
        max_retries: int = 3,
        session: requests.Session | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.token = token
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/vnd.github+json"})
        if token:
            self.session.headers.update({"Authorization": f"token {token}"})

    def _retry_after(self, response: requests.Response) -> float | None:
        """Return how long to wait if ``response`` is a rate-limit rejection."""
        if response.status_code not in _RATE_LIMIT_STATUSES:
            return None
        headers = response.headers
        if "Retry-After" in headers:
            return _parse_retry_after(headers["Retry-After"])
        if headers.get("X-RateLimit-Remaining") == "0":
            try:
                reset = float(headers["X-RateLimit-Reset"])
            except (KeyError, ValueError):
                return DEFAULT_RATE_LIMIT_WAIT
            return max(reset - time.time(), 1.0)
        return None

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        for attempt in range(self.max_retries + 1):
            response = self.session.request(method, url, **kwargs)
            wait = self._retry_after(response)
            if wait is None or attempt == self.max_retries:
                return response
            kind = "RateLimit" if "Retry-After" not in response.headers else "SecondaryRateLimit"
            log(f"{kind} detected for request {method} {url}.", "warning")
            log(f"Retrying after {wait:.0f} seconds.", "info")
            response.close()
            time.sleep(wait)
        return response  # pragma: no cover

    def _get_release(self, url: str, description: str) -> Release:
        log(f"Fetching {description} from {url}", "info")
        response = self._request("GET", url)
        if response.status_code == 404:  # noqa: PLR2004
            msg = f"Could not find {description}"
            raise ReleaseNotFoundError(msg)
        response.raise_for_status()
        return _parse_release(response.json())

    def latest_release(self, owner: str, repo: str) -> Release:
        """Get the latest release of ``owner/repo``."""
        url = f"{self.api_url}/repos/{owner}/{repo}/releases/latest"
        return self._get_release(url, f"the latest release of {owner}/{repo}")

    def release_by_tag(self, owner: str, repo: str, tag: str) -> Release:
        """Get the release of ``owner/repo`` tagged ``tag``."""
        url = f"{self.api_url}/repos/{owner}/{repo}/releases/tags/{tag}"
        return self._get_release(url, f"release {tag} of {owner}/{repo}")

    def download_asset(self, url: str, destination: Path) -> Path:
        """Download a release asset from its API URL to ``destination``."""
        log(f"Downloading from {url}", "info")
        try:
            with self._request(
                "GET",
                url,
                headers={"Accept": "application/octet-stream"},
                stream=True,
            ) as response:
                response.raise_for_status()
                with open(destination, "wb") as f:
                    for chunk in response.iter_content(chunk_size=8192):
                        f.write(chunk)
        except requests.RequestException as e:
            msg = f"Failed to download {url}: {e}"
            raise DownloadError(msg) from e
        return destination
