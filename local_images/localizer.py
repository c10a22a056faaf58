"""Per-document orchestration of fetching and storing remote images."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

import httpx

from .config import TransformConfig
from .exceptions import InvalidLocatorError, LocalImagesError
from .fetcher import build_client, fetch
from .images import resolve_extension
from .models import LocalAsset, LocalizationResult
from .naming import derive_base_name
from .store import AssetStore

logger = logging.getLogger("local_images")


class LocalizationSession:
    """Shares one HTTP client and one download per locator across a document.

    Concurrent requests for the same locator await a single task, so each
    distinct URL is fetched and written at most once per session.
    """

    def __init__(
        self,
        config: TransformConfig,
        client: Optional[httpx.AsyncClient] = None,
        store: Optional[AssetStore] = None,
    ) -> None:
        self.config = config
        self.store = store or AssetStore(config.asset_dir)
        self._client = client
        self._owns_client = client is None
        self._tasks: Dict[str, asyncio.Task] = {}
        self.fetch_count = 0

    async def __aenter__(self) -> "LocalizationSession":
        if self._client is None:
            self._client = build_client(self.config)
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _log_saved(self, message: str, *args) -> None:
        level = logging.INFO if self.config.verbose else logging.DEBUG
        logger.log(level, message, *args)

    async def localize(self, locator: str) -> LocalizationResult:
        """Fetch and store ``locator`` unless this session already did."""
        task = self._tasks.get(locator)
        if task is None:
            task = asyncio.ensure_future(self._localize(locator))
            self._tasks[locator] = task
        return await task

    async def _localize(self, locator: str) -> LocalizationResult:
        try:
            asset = await self._run_pipeline(locator)
        except LocalImagesError as exc:
            logger.warning("%s", exc)
            return LocalizationResult(locator=locator, error=exc)
        return LocalizationResult(locator=locator, asset=asset)

    async def _run_pipeline(self, locator: str) -> LocalAsset:
        try:
            url_hash, base = derive_base_name(locator)
        except ValueError as exc:
            raise InvalidLocatorError(locator, exc) from exc
        stem = f"{url_hash}-{base}"

        if self.config.use_existing:
            existing = await asyncio.to_thread(self.store.find_existing, stem)
            if existing is not None:
                self._log_saved("Reusing %s for %s", existing, locator)
                return self._asset(locator, url_hash, base, existing.name, reused=True)

        if self._client is None:
            raise RuntimeError("LocalizationSession must be entered before use")
        self.fetch_count += 1
        data = await fetch(self._client, locator)

        filename = f"{url_hash}-{resolve_extension(base, data, locator)}"
        output_path = self.store.path_for(filename)
        await asyncio.to_thread(self.store.store, output_path, data)
        self._log_saved("Saved %s to %s", base, output_path)
        return self._asset(locator, url_hash, base, filename)

    def _asset(
        self,
        locator: str,
        url_hash: str,
        base: str,
        filename: str,
        reused: bool = False,
    ) -> LocalAsset:
        return LocalAsset(
            locator=locator,
            hash=url_hash,
            base_name=base,
            filename=filename,
            output_path=self.store.path_for(filename),
            public_path=self.config.public_path(filename),
            reused=reused,
        )
