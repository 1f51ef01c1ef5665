"""Shared test fixtures.

Unit tests never reach the network: providers are stubs or mocks.
"""

import io
from typing import Callable, Tuple
from unittest.mock import AsyncMock

import pytest
from PIL import Image

from caloriesnap.domain.meal.ingestion.entities import ImageAsset


def make_image_bytes(
    size: Tuple[int, int] = (64, 48),
    mode: str = "RGB",
    fmt: str = "PNG",
    color: object = (200, 120, 40),
) -> bytes:
    """Encode a small solid image with Pillow."""
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """Factory fixture for encoded test images."""
    return make_image_bytes


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def sample_asset() -> ImageAsset:
    """Minimal encoded photo."""
    return ImageAsset(
        media_type="image/png",
        data="iVBORw0KGgo=",
        filename="lunch.png",
        size_bytes=8,
    )


@pytest.fixture
def mock_provider() -> AsyncMock:
    """Provider mock implementing both ports with an async context."""
    provider = AsyncMock()
    provider.__aenter__ = AsyncMock(return_value=provider)
    provider.__aexit__ = AsyncMock(return_value=None)
    provider.identify_food_items = AsyncMock(return_value=["apple", "toast"])
    provider.estimate_calories = AsyncMock(return_value="apple: 95 kcal, toast: 120 kcal")
    return provider
