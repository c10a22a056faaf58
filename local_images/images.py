"""File type detection for downloaded image bytes."""

from __future__ import annotations

import mimetypes
import re
from pathlib import PurePosixPath
from typing import Optional

import filetype
from filetype import guess

from .exceptions import UnknownExtensionError

SVG_PATTERN = re.compile(
    rb"^\s*(?:<\?xml[^>]*>\s*)?(?:<!--.*?-->\s*)*(?:<!DOCTYPE svg[^>]*>\s*)?<svg[\s>]",
    re.DOTALL | re.IGNORECASE,
)


def has_known_extension(filename: str) -> bool:
    """Return True if the filename ends with an extension we can serve as-is."""
    suffix = PurePosixPath(filename).suffix.lower()
    if len(suffix) < 2:
        return False
    if filetype.get_type(ext=suffix[1:]) is not None:
        return True
    return mimetypes.guess_type(f"file{suffix}")[0] is not None


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect a file type from its signature; returns a lowercase extension."""
    kind = guess(data)
    if kind:
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    if SVG_PATTERN.match(data[:2048]):
        return "svg"
    return None


def resolve_extension(base: str, data: bytes, locator: Optional[str] = None) -> str:
    """Return ``base`` with a usable file extension.

    Names that already carry a recognized extension are returned unchanged;
    otherwise the extension is sniffed from ``data`` and appended.

    Raises:
        UnknownExtensionError: if the bytes match no known signature.
    """
    if has_known_extension(base):
        return base
    extension = detect_image_format(data)
    if not extension:
        raise UnknownExtensionError(locator or base)
    return f"{base}.{extension}"
