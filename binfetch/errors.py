"""Exceptions raised by binfetch."""

from __future__ import annotations


class BinfetchError(Exception):
    """Base class for errors that abort an installation."""


class UnsupportedPlatformError(BinfetchError):
    """The host (or requested) platform or architecture is not supported."""


class ReleaseNotFoundError(BinfetchError):
    """The requested release does not exist."""


class AssetNotFoundError(BinfetchError):
    """No release asset matched the platform and architecture."""

    def __init__(self, message: str, candidates: list[str] | None = None) -> None:
        """Initialize the AssetNotFoundError."""
        self.message = message
        self.candidates = candidates or []
        super().__init__(message)


class DownloadError(BinfetchError):
    """Downloading a release asset failed."""


class UnsupportedArchiveError(BinfetchError):
    """The asset is not an archive type we know how to extract."""


class ExtractionError(BinfetchError):
    """Error during extraction process."""


class NoBinariesError(BinfetchError):
    """Extraction produced no regular files."""


class InvalidModeError(BinfetchError):
    """A chmod mode string is not a valid octal mode."""


class CacheValidationError(BinfetchError):
    """The cache rejected an entry as invalid."""
