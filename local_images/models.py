"""Data models used throughout the localization pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import LocalImagesError


@dataclass
class RemoteReference:
    """A remote locator discovered in an attribute of a markup node."""

    locator: str
    attribute: str
    descriptor: Optional[str] = None


@dataclass(frozen=True)
class LocalAsset:
    """Remote image persisted under the asset directory."""

    locator: str
    hash: str
    base_name: str
    filename: str
    output_path: Path
    public_path: str
    reused: bool = False


@dataclass(frozen=True)
class LocalizationResult:
    """Outcome of localizing one remote locator."""

    locator: str
    asset: Optional[LocalAsset] = None
    error: Optional[LocalImagesError] = None

    @property
    def ok(self) -> bool:
        return self.asset is not None
