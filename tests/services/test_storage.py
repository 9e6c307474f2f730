# mypy: ignore-errors
"""Tests for public object URL resolution."""

import pytest

from splajompy_api.core.settings import settings
from splajompy_api.services.storage import ObjectUrlResolver, StorageConfig


@pytest.mark.parametrize(
    ("base_url", "key"),
    [
        ("https://cdn.example.test/", "posts/1/a.png"),
        ("https://cdn.example.test", "posts/1/a.png"),
        ("https://cdn.example.test/", "/posts/1/a.png"),
    ],
)
def test_object_url_joins_base_and_key(base_url, key) -> None:
    """Exactly one slash separates the CDN base from the key."""
    resolver = ObjectUrlResolver(StorageConfig(cdn_base_url=base_url))

    assert resolver.get_object_url(key) == "https://cdn.example.test/posts/1/a.png"


def test_storage_config_from_settings() -> None:
    assert settings.storage_config == StorageConfig(cdn_base_url=settings.storage_cdn_base_url)
