"""Single-attempt HTTP retrieval of remote images."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .config import TransformConfig
from .exceptions import FetchError

logger = logging.getLogger("local_images")


def build_client(
    config: TransformConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the HTTP client shared by every fetch in one document."""
    return httpx.AsyncClient(
        timeout=config.timeout,
        follow_redirects=True,
        headers={"User-Agent": config.user_agent},
        transport=transport,
    )


async def fetch(client: httpx.AsyncClient, locator: str) -> bytes:
    """Download ``locator`` once, raising FetchError on any failure."""
    try:
        resp = await client.get(locator)
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(locator, f"HTTP {exc.response.status_code}") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(locator, exc) from exc
    logger.debug("Fetched %s (%d bytes)", locator, len(resp.content))
    return resp.content
