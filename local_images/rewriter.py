"""Rewriting of image attributes on individual markup nodes."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from bs4 import Tag

from .config import TransformConfig
from .localizer import LocalizationSession
from .models import RemoteReference
from .naming import is_external

logger = logging.getLogger("local_images")

CANDIDATE_LIST_ATTRIBUTES = ("srcset", "data-srcset")


def _attribute_value(node: Tag, name: str) -> str:
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def active_source_attribute(node: Tag, config: TransformConfig) -> Optional[str]:
    """Return the first configured attribute that is present and non-empty."""
    for name in config.attributes:
        if _attribute_value(node, name):
            return name
    return None


def candidate_list_attribute(node: Tag) -> Optional[str]:
    """Return ``srcset`` when present, falling back to ``data-srcset``."""
    for name in CANDIDATE_LIST_ATTRIBUTES:
        if _attribute_value(node, name):
            return name
    return None


def split_descriptor(entry: str) -> Tuple[str, Optional[str]]:
    """Split one candidate entry into its locator and descriptor."""
    parts = entry.strip().split(None, 1)
    if not parts:
        return "", None
    return parts[0], parts[1].strip() if len(parts) > 1 else None


def parse_candidate_list(value: str, attribute: str = "srcset") -> List[RemoteReference]:
    """Split a srcset-style value into locators and optional descriptors."""
    references: List[RemoteReference] = []
    for entry in value.split(","):
        locator, descriptor = split_descriptor(entry)
        if locator:
            references.append(RemoteReference(locator, attribute, descriptor))
    return references


def format_candidate(locator: str, descriptor: Optional[str]) -> str:
    return f"{locator} {descriptor}" if descriptor else locator


async def _rewrite_primary(node: Tag, attribute: str, session: LocalizationSession) -> None:
    locator = _attribute_value(node, attribute)
    if not is_external(locator):
        return
    result = await session.localize(locator)
    if result.ok:
        node[attribute] = result.asset.public_path
    else:
        logger.warning("Leaving %s=%s unchanged", attribute, locator)


async def _rewrite_candidate_list(node: Tag, attribute: str, session: LocalizationSession) -> None:
    references = parse_candidate_list(_attribute_value(node, attribute), attribute)
    external = [ref for ref in references if is_external(ref.locator)]
    if not external:
        return

    # Every entry must settle before the attribute is rewritten.
    results = await asyncio.gather(*(session.localize(ref.locator) for ref in external))
    localized = {result.locator: result for result in results}

    entries: List[str] = []
    for ref in references:
        result = localized.get(ref.locator)
        if result is None:
            entries.append(format_candidate(ref.locator, ref.descriptor))
        elif result.ok:
            entries.append(format_candidate(result.asset.public_path, ref.descriptor))
        else:
            logger.warning("Dropping %s entry %s", attribute, ref.locator)
    if entries:
        node[attribute] = ", ".join(entries)
    else:
        del node[attribute]


async def process_node(
    node: Tag,
    config: TransformConfig,
    session: Optional[LocalizationSession] = None,
) -> None:
    """Localize the remote images referenced by ``node`` in place.

    Failures are logged and leave the affected attribute untouched (or drop
    the failed candidate entry); nothing is raised to the caller.
    """
    if session is None:
        async with LocalizationSession(config) as own_session:
            await process_node(node, config, own_session)
        return

    try:
        pending: List = []
        primary = active_source_attribute(node, config)
        if primary and primary not in CANDIDATE_LIST_ATTRIBUTES:
            pending.append(_rewrite_primary(node, primary, session))
        candidates = candidate_list_attribute(node)
        if candidates:
            pending.append(_rewrite_candidate_list(node, candidates, session))
        await asyncio.gather(*pending)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unexpected error localizing images on <%s>", node.name)

