"""Document-level transform and plugin registration."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Protocol

import httpx
from bs4 import BeautifulSoup

from .config import PLUGIN_NAME, TransformConfig
from .localizer import LocalizationSession
from .rewriter import process_node

logger = logging.getLogger("local_images")

HTML_SUFFIXES = (".html", ".htm")


def is_html_output(output_path: Optional[str]) -> bool:
    return bool(output_path) and str(output_path).lower().endswith(HTML_SUFFIXES)


async def transform(
    raw_content: str,
    output_path: Optional[str],
    config: TransformConfig,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Localize remote images referenced by a rendered HTML document.

    Non-HTML outputs and documents without matching nodes are returned
    unchanged. Otherwise every matching node is processed concurrently and
    the document is serialized once all of them have settled.
    """
    if not is_html_output(output_path):
        return raw_content

    soup = BeautifulSoup(raw_content, "html.parser")
    nodes = soup.select(config.selector)
    if not nodes:
        return raw_content

    logger.debug("Found %d node(s) matching %r in %s", len(nodes), config.selector, output_path)
    async with LocalizationSession(config, client=client) as session:
        await asyncio.gather(*(process_node(node, config, session) for node in nodes))
    return str(soup)


def transform_sync(raw_content: str, output_path: Optional[str], config: TransformConfig) -> str:
    """Run :func:`transform` for hosts without an event loop."""
    return asyncio.run(transform(raw_content, output_path, config))


class TransformHost(Protocol):
    """Build tool that invokes named transforms for every rendered output."""

    def add_transform(self, name: str, func: Any) -> None:
        ...


class LocalImagesPlugin:
    """Callable transform bound to a validated configuration."""

    name = PLUGIN_NAME

    def __init__(self, config: TransformConfig) -> None:
        self.config = config

    @classmethod
    def from_options(
        cls,
        options: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> "LocalImagesPlugin":
        merged = dict(options or {})
        merged.update(kwargs)
        return cls(TransformConfig.from_options(merged))

    async def transform(self, raw_content: str, output_path: Optional[str]) -> str:
        return await transform(raw_content, output_path, self.config)

    def __call__(self, raw_content: str, output_path: Optional[str]) -> str:
        return transform_sync(raw_content, output_path, self.config)


def register(
    host: TransformHost,
    options: Optional[Mapping[str, Any]] = None,
    **kwargs: Any,
) -> LocalImagesPlugin:
    """Validate options and register the transform with ``host``.

    Raises:
        ConfigurationError: if ``distPath`` or ``assetPath`` is missing.
    """
    plugin = LocalImagesPlugin.from_options(options, **kwargs)
    host.add_transform(plugin.name, plugin)
    return plugin
