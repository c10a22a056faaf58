"""Command-line entry point for localizing images in a build directory."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

from .build import DEFAULT_PATTERN, run_build
from .config import DEFAULT_SELECTOR, DEFAULT_TIMEOUT, TransformConfig
from .exceptions import ConfigurationError

logger = logging.getLogger("local_images.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Download remote images referenced by rendered HTML and rewrite the markup to local copies."
        ),
    )
    parser.add_argument(
        "dist_path",
        type=Path,
        help="Root output directory containing the rendered HTML",
    )
    parser.add_argument(
        "--asset-path",
        required=True,
        help="Subpath under the output directory for downloaded images, also used as the URL prefix",
    )
    parser.add_argument(
        "--selector",
        default=DEFAULT_SELECTOR,
        help="CSS selector for nodes to process (default: img)",
    )
    parser.add_argument(
        "--attribute",
        default="src",
        help="Comma separated attribute names to check in order (default: src)",
    )
    parser.add_argument(
        "--use-existing",
        action="store_true",
        help="Reuse images already present in the asset directory instead of downloading again",
    )
    parser.add_argument(
        "--pattern",
        default=DEFAULT_PATTERN,
        help="Glob pattern used to find HTML files under the output directory",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Seconds to wait for each image download",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(sys.argv[1:] if argv is None else argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    try:
        config = TransformConfig.from_options(
            {
                "distPath": args.dist_path.resolve(),
                "assetPath": args.asset_path,
                "selector": args.selector,
                "attribute": args.attribute,
                "useExisting": args.use_existing,
                "verbose": args.verbose,
                "timeout": args.timeout,
            }
        )
        summary = asyncio.run(run_build(config, args.pattern))
    except (ConfigurationError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        raise SystemExit(2) from exc

    logger.info(
        "Finished in %.2fs (%d/%d file(s) rewritten, %d skipped)",
        summary.total_seconds,
        len(summary.changed),
        len(summary.files),
        len(summary.skipped),
    )

    if args.verbose:
        for result in summary.files:
            logger.debug(
                "Timing for %s -> %.2fs%s",
                result.path,
                result.seconds,
                " (rewritten)" if result.changed else "",
            )


if __name__ == "__main__":
    main()
