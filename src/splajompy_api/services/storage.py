"""Public URL resolution for objects kept in the image bucket."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StorageConfig:
    """Object storage location, built once at startup from settings."""

    cdn_base_url: str


class ObjectUrlResolver:
    """Turn stored object keys into URLs served by the CDN."""

    def __init__(self, config: StorageConfig) -> None:
        self._base_url = config.cdn_base_url.rstrip("/") + "/"

    def get_object_url(self, key: str) -> str:
        """Return the public URL for ``key``."""
        return self._base_url + key.lstrip("/")
