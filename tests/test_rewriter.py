"""Unit tests for node attribute rewriting."""

from __future__ import annotations

from dataclasses import replace

import pytest
from bs4 import BeautifulSoup

from conftest import JPEG_BYTES, PNG_BYTES
from local_images.config import TransformConfig
from local_images.localizer import LocalizationSession
from local_images.naming import derive_base_name
from local_images.rewriter import (
    active_source_attribute,
    candidate_list_attribute,
    parse_candidate_list,
    process_node,
)


def _node(html: str):
    return BeautifulSoup(html, "html.parser").find()


def _public(url: str, filename: str) -> str:
    return f"/assets/img/{derive_base_name(url)[0]}-{filename}"


class TestAttributeSelection:
    """Tests for active_source_attribute and candidate_list_attribute."""

    def test_first_present_attribute_wins(self, config: TransformConfig) -> None:
        config = replace(config, attributes=("data-src", "src"))
        node = _node('<img src="https://ex.com/a.jpg" data-src="https://ex.com/b.jpg">')
        assert active_source_attribute(node, config) == "data-src"

    def test_empty_attribute_skipped(self, config: TransformConfig) -> None:
        config = replace(config, attributes=("data-src", "src"))
        node = _node('<img src="https://ex.com/a.jpg" data-src="">')
        assert active_source_attribute(node, config) == "src"

    def test_no_attribute(self, config: TransformConfig) -> None:
        assert active_source_attribute(_node("<img alt=x>"), config) is None

    def test_srcset_preferred_over_data_srcset(self) -> None:
        node = _node('<img srcset="a.jpg 1x" data-srcset="b.jpg 1x">')
        assert candidate_list_attribute(node) == "srcset"

    def test_data_srcset_fallback(self) -> None:
        assert candidate_list_attribute(_node('<img data-srcset="b.jpg 1x">')) == "data-srcset"


class TestParseCandidateList:
    """Tests for parse_candidate_list."""

    def test_entries_and_descriptors(self) -> None:
        refs = parse_candidate_list("https://ex.com/a.jpg 1x,  https://ex.com/b.jpg 640w ,c.jpg")
        assert [(ref.locator, ref.descriptor) for ref in refs] == [
            ("https://ex.com/a.jpg", "1x"),
            ("https://ex.com/b.jpg", "640w"),
            ("c.jpg", None),
        ]

    def test_blank_entries_skipped(self) -> None:
        assert parse_candidate_list(" , ,") == []


class TestProcessNode:
    """Tests for process_node."""

    @pytest.mark.asyncio
    async def test_rewrites_external_src(self, config: TransformConfig, make_remote) -> None:
        url = "https://cdn.example.com/a/b/photo.jpg"
        remote = make_remote({url: JPEG_BYTES})
        node = _node(f'<img src="{url}" alt="Photo">')
        async with remote.client() as client:
            async with LocalizationSession(config, client=client) as session:
                await process_node(node, config, session)

        assert node["src"] == _public(url, "photo.jpg")
        assert node["alt"] == "Photo"

    @pytest.mark.asyncio
    async def test_relative_src_untouched(self, config: TransformConfig, make_remote) -> None:
        remote = make_remote({})
        node = _node('<img src="/local/img.png">')
        async with remote.client() as client:
            async with LocalizationSession(config, client=client) as session:
                await process_node(node, config, session)

        assert node["src"] == "/local/img.png"
        assert remote.requests == []

    @pytest.mark.asyncio
    async def test_failed_src_left_remote(self, config: TransformConfig, make_remote) -> None:
        url = "https://cdn.example.com/missing.jpg"
        remote = make_remote({url: 500})
        node = _node(f'<img src="{url}">')
        async with remote.client() as client:
            async with LocalizationSession(config, client=client) as session:
                await process_node(node, config, session)

        assert node["src"] == url

    @pytest.mark.asyncio
    async def test_srcset_drops_failed_entry(self, config: TransformConfig, make_remote) -> None:
        good, bad = "https://ex.com/a.jpg", "https://ex.com/b.jpg"
        remote = make_remote({good: JPEG_BYTES, bad: 404})
        node = _node(f'<img srcset="{good} 1x, {bad} 2x">')
        async with remote.client() as client:
            async with LocalizationSession(config, client=client) as session:
                await process_node(node, config, session)

        assert node["srcset"] == f"{_public(good, 'a.jpg')} 1x"

    @pytest.mark.asyncio
    async def test_srcset_keeps_order_and_local_entries(self, config: TransformConfig, make_remote) -> None:
        first, second = "https://ex.com/small.png", "https://ex.com/large.png"
        remote = make_remote({first: PNG_BYTES, second: PNG_BYTES})
        node = _node(f'<img srcset="{first} 320w, /local/mid.png 640w, {second} 1280w">')
        async with remote.client() as client:
            async with LocalizationSession(config, client=client) as session:
                await process_node(node, config, session)

        assert node["srcset"] == (
            f"{_public(first, 'small.png')} 320w, /local/mid.png 640w, "
            f"{_public(second, 'large.png')} 1280w"
        )

    @pytest.mark.asyncio
    async def test_data_srcset_rewritten(self, config: TransformConfig, make_remote) -> None:
        url = "https://ex.com/a.jpg"
        remote = make_remote({url: JPEG_BYTES})
        node = _node(f'<img data-srcset="{url} 2x">')
        async with remote.client() as client:
            async with LocalizationSession(config, client=client) as session:
                await process_node(node, config, session)

        assert node["data-srcset"] == f"{_public(url, 'a.jpg')} 2x"

    @pytest.mark.asyncio
    async def test_all_srcset_entries_failed_removes_attribute(self, config: TransformConfig, make_remote) -> None:
        remote = make_remote({})
        node = _node('<img src="/x.png" srcset="https://ex.com/a.jpg 1x">')
        async with remote.client() as client:
            async with LocalizationSession(config, client=client) as session:
                await process_node(node, config, session)

        assert not node.has_attr("srcset")
        assert node["src"] == "/x.png"

    @pytest.mark.asyncio
    async def test_meta_content_attribute(self, config: TransformConfig, make_remote) -> None:
        config = replace(config, attributes=("src", "content"))
        url = "https://ex.com/og.png"
        remote = make_remote({url: PNG_BYTES})
        node = _node(f'<meta property="og:image" content="{url}">')
        async with remote.client() as client:
            async with LocalizationSession(config, client=client) as session:
                await process_node(node, config, session)

        assert node["content"] == _public(url, "og.png")

    @pytest.mark.asyncio
    async def test_unexpected_error_is_swallowed(self, config: TransformConfig, make_remote, monkeypatch) -> None:
        async def boom(self, locator):
            raise RuntimeError("boom")

        monkeypatch.setattr(LocalizationSession, "localize", boom)
        url = "https://ex.com/a.jpg"
        node = _node(f'<img src="{url}">')
        async with make_remote({}).client() as client:
            async with LocalizationSession(config, client=client) as session:
                await process_node(node, config, session)

        assert node["src"] == url

    @pytest.mark.asyncio
    async def test_without_session(self, config: TransformConfig) -> None:
        node = _node('<img src="/local/img.png">')
        await process_node(node, config)
        assert node["src"] == "/local/img.png"
