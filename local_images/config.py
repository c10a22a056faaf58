"""Configuration objects and constants for image localization."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence, Tuple, Union
from urllib.parse import quote

from .exceptions import ConfigurationError

PLUGIN_NAME = "localimages"
DEFAULT_SELECTOR = "img"
DEFAULT_ATTRIBUTES: Tuple[str, ...] = ("src",)
DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = "local-images/0.1 (+https://pypi.org/project/local-images/)"

# Option spellings accepted from plugin hosts, mapped onto dataclass fields.
_OPTION_ALIASES = {
    "distPath": "dist_path",
    "assetPath": "asset_path",
    "attribute": "attributes",
    "useExisting": "use_existing",
    "userAgent": "user_agent",
}


def parse_attribute_list(value: Union[str, Sequence[str], None]) -> Tuple[str, ...]:
    """Split a comma separated attribute list, keeping order and dropping blanks."""
    if value is None:
        return DEFAULT_ATTRIBUTES
    items = value.split(",") if isinstance(value, str) else list(value)
    names = tuple(item.strip() for item in items if item and item.strip())
    return names or DEFAULT_ATTRIBUTES


@dataclass(frozen=True)
class TransformConfig:
    """Settings shared by every document transformed in one build."""

    dist_path: Path
    asset_path: str
    selector: str = DEFAULT_SELECTOR
    attributes: Tuple[str, ...] = DEFAULT_ATTRIBUTES
    use_existing: bool = False
    verbose: bool = False
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def asset_dir(self) -> Path:
        """Directory on disk where localized assets are written."""
        return Path(self.dist_path) / self.asset_path.strip("/")

    def public_path(self, filename: str) -> str:
        """Return the URL-encoded reference embedded in HTML for ``filename``."""
        prefix = self.asset_path.rstrip("/")
        encoded = quote(filename)
        return f"{prefix}/{encoded}" if prefix else encoded

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "TransformConfig":
        """Validate plugin options and build an immutable configuration."""
        values = {_OPTION_ALIASES.get(key, key): value for key, value in options.items()}

        unknown = set(values) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(
                f"{PLUGIN_NAME} received unknown options: {', '.join(sorted(unknown))}"
            )

        dist_path = values.get("dist_path")
        asset_path = values.get("asset_path")
        if not dist_path or not asset_path:
            raise ConfigurationError(
                f"{PLUGIN_NAME} requires that assetPath and distPath are set"
            )

        timeout = float(values.get("timeout", DEFAULT_TIMEOUT))
        if timeout <= 0:
            raise ConfigurationError(f"{PLUGIN_NAME} timeout must be positive, got {timeout}")

        return cls(
            dist_path=Path(dist_path),
            asset_path=str(asset_path),
            selector=values.get("selector") or DEFAULT_SELECTOR,
            attributes=parse_attribute_list(values.get("attributes")),
            use_existing=bool(values.get("use_existing", False)),
            verbose=bool(values.get("verbose", False)),
            timeout=timeout,
            user_agent=values.get("user_agent") or DEFAULT_USER_AGENT,
        )
