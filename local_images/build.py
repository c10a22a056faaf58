"""Apply the transform to every rendered HTML file in a build directory."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from .config import TransformConfig
from .fetcher import build_client
from .transform import transform

logger = logging.getLogger("local_images")

DEFAULT_PATTERN = "**/*.html"


@dataclass
class FileResult:
    """Outcome of transforming one output file."""

    path: Path
    changed: bool
    seconds: float


@dataclass
class BuildSummary:
    """Totals for a build directory pass."""

    files: List[FileResult] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    total_seconds: float = 0.0

    @property
    def changed(self) -> List[FileResult]:
        return [result for result in self.files if result.changed]


def find_html_files(root: Path, pattern: str = DEFAULT_PATTERN) -> Iterable[Path]:
    """Yield every file under ``root`` matching ``pattern`` in sorted order."""
    for path in sorted(root.glob(pattern)):
        if path.is_file():
            yield path


async def run_build(config: TransformConfig, pattern: str = DEFAULT_PATTERN) -> BuildSummary:
    """Transform each HTML file under ``config.dist_path`` and write back changes."""
    root = Path(config.dist_path)
    if not root.is_dir():
        raise FileNotFoundError(f"Build directory does not exist: {root}")

    summary = BuildSummary()
    overall_start = time.perf_counter()
    async with build_client(config) as client:
        for path in find_html_files(root, pattern):
            start = time.perf_counter()
            try:
                original = path.read_text(encoding="utf-8")
            except UnicodeDecodeError as exc:
                logger.warning("Skipping %s: not valid UTF-8 (%s)", path.relative_to(root), exc)
                summary.skipped.append(path)
                continue
            content = await transform(original, str(path), config, client=client)
            changed = content != original
            if changed:
                path.write_text(content, encoding="utf-8")
                logger.info("Rewrote %s", path.relative_to(root))
            summary.files.append(FileResult(path, changed, time.perf_counter() - start))
    summary.total_seconds = time.perf_counter() - overall_start
    return summary
