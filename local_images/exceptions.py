"""Error types raised while localizing remote images."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class LocalImagesError(Exception):
    """Base class for every localization failure."""


class ConfigurationError(LocalImagesError):
    """Required settings are missing or invalid."""


class FetchError(LocalImagesError):
    """A remote resource could not be downloaded."""

    def __init__(self, locator: str, cause: Optional[BaseException | str] = None) -> None:
        self.locator = locator
        self.cause = cause
        message = f"Couldn't reach image {locator}"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)


class UnknownExtensionError(LocalImagesError):
    """Downloaded bytes did not match any known file signature."""

    def __init__(self, locator: str) -> None:
        self.locator = locator
        super().__init__(f"Could not determine a file type for {locator}")


class PersistenceError(LocalImagesError):
    """Writing a downloaded asset to disk failed."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")


class InvalidLocatorError(LocalImagesError):
    """A remote locator could not be parsed into a filename."""

    def __init__(self, locator: str, cause: ValueError) -> None:
        self.locator = locator
        self.cause = cause
        super().__init__(f"Malformed image URL {locator}: {cause}")
