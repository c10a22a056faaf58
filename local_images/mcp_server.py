"""MCP server exposing the image localization tool."""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from .build import DEFAULT_PATTERN, run_build
from .config import DEFAULT_SELECTOR, TransformConfig

logger = logging.getLogger("local_images.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="local-images")


@mcp.tool()
async def localize_site(
    dist_path: str,
    asset_path: str,
    selector: str = DEFAULT_SELECTOR,
    attribute: str = "src",
    use_existing: bool = False,
    pattern: str = DEFAULT_PATTERN,
) -> str:
    """Download remote images referenced by HTML under dist_path and rewrite them to local copies."""

    config = TransformConfig.from_options(
        {
            "distPath": dist_path,
            "assetPath": asset_path,
            "selector": selector,
            "attribute": attribute,
            "useExisting": use_existing,
        }
    )
    summary = await run_build(config, pattern)
    lines = [
        f"Rewrote {len(summary.changed)} of {len(summary.files)} HTML file(s) "
        f"in {summary.total_seconds:.2f}s."
    ]
    lines.extend(f"- {result.path}" for result in summary.changed)
    return "\n".join(lines)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
