"""Persistence of localized assets on disk."""

from __future__ import annotations

import glob
import logging
from pathlib import Path
from typing import Optional

from .exceptions import PersistenceError

logger = logging.getLogger("local_images")


class AssetStore:
    """Reads and writes assets inside a single asset directory."""

    def __init__(self, asset_dir: Path) -> None:
        self.asset_dir = Path(asset_dir)

    def path_for(self, filename: str) -> Path:
        return self.asset_dir / filename

    def store(self, path: Path, data: bytes) -> None:
        """Write ``data`` to ``path``, replacing any previous copy."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise PersistenceError(path, exc) from exc

    def find_existing(self, stem: str) -> Optional[Path]:
        """Return a previously stored ``{stem}`` or ``{stem}.<ext>`` file, if any."""
        exact = self.asset_dir / stem
        if exact.is_file():
            return exact
        pattern = glob.escape(stem) + ".*"
        matches = sorted(path for path in self.asset_dir.glob(pattern) if path.is_file())
        if matches:
            logger.debug("Found %d stored match(es) for %s", len(matches), stem)
            return matches[0]
        return None
