"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable, Dict, List, Union

import httpx
import pytest

from local_images.config import TransformConfig

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 64


class FakeRemote:
    """Serves canned responses and records every requested URL."""

    def __init__(self, routes: Dict[str, Union[bytes, int]]) -> None:
        self.routes = routes
        self.requests: List[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        body = self.routes.get(url, 404)
        if isinstance(body, int):
            return httpx.Response(body)
        return httpx.Response(200, content=body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def dist_path(tmp_path: Path) -> Path:
    """Return a temporary build output directory."""
    output = tmp_path / "_site"
    output.mkdir()
    return output


@pytest.fixture
def config(dist_path: Path) -> TransformConfig:
    """Return a configuration writing assets to /assets/img."""
    return TransformConfig(dist_path=dist_path, asset_path="/assets/img")


@pytest.fixture
def make_remote() -> Callable[[Dict[str, Union[bytes, int]]], FakeRemote]:
    """Return a factory for fake remote hosts."""
    return FakeRemote
