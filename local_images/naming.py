"""Helpers for classifying locators and deriving local filenames."""

from __future__ import annotations

import hashlib
import re
from typing import Tuple
from urllib.parse import unquote, urlsplit

EXTERNAL_PATTERN = re.compile(r"^https?://(?:[\w-]+\.)+[\w-]{2,}", re.IGNORECASE)
HASH_LENGTH = 12
FALLBACK_BASE_NAME = "image"


def is_external(value: str) -> bool:
    """Return True for absolute http(s) locators pointing at a named host."""
    return bool(EXTERNAL_PATTERN.match(value.strip()))


def locator_hash(locator: str) -> str:
    """Short, deterministic digest of the full locator, query string included."""
    return hashlib.sha256(locator.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def derive_base_name(locator: str) -> Tuple[str, str]:
    """Return ``(hash, base)`` where base is the decoded last path segment without query."""
    segment = urlsplit(locator).path.rsplit("/", 1)[-1]
    base = unquote(segment).replace("/", "_").replace("\\", "_").strip()
    return locator_hash(locator), base or FALLBACK_BASE_NAME
