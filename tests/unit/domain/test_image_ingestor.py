"""Unit tests for ImageAsset and ImageIngestor."""

import base64
import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

from caloriesnap.domain.meal.ingestion.entities import ImageAsset
from caloriesnap.domain.meal.ingestion.ingestor import ImageIngestor
from caloriesnap.domain.shared.errors import InvalidInputError, ReadError


class TestImageAsset:
    """Test ImageAsset invariants."""

    def test_data_url(self) -> None:
        asset = ImageAsset(media_type="image/png", data="iVBORw0KGgo=")

        assert asset.data_url == "data:image/png;base64,iVBORw0KGgo="

    def test_rejects_non_image_media_type(self) -> None:
        with pytest.raises(ValueError, match="must be an image"):
            ImageAsset(media_type="text/plain", data="aGVsbG8=")

    def test_rejects_empty_data(self) -> None:
        with pytest.raises(ValueError, match="cannot be empty"):
            ImageAsset(media_type="image/jpeg", data="")

    def test_is_immutable(self) -> None:
        asset = ImageAsset(media_type="image/png", data="iVBORw0KGgo=")

        with pytest.raises(Exception):
            asset.data = "other"  # type: ignore[misc]


class TestIngestValidation:
    """Test rejection of invalid uploads."""

    def test_non_image_media_type_rejected(self) -> None:
        ingestor = ImageIngestor()

        with pytest.raises(InvalidInputError, match="not an image"):
            ingestor.ingest(io.BytesIO(b"hello"), "text/plain", filename="notes.txt")

    def test_missing_media_type_rejected(self) -> None:
        ingestor = ImageIngestor()

        with pytest.raises(InvalidInputError, match="unknown type"):
            ingestor.ingest(io.BytesIO(b"hello"), None)

    def test_empty_file_rejected(self) -> None:
        ingestor = ImageIngestor()

        with pytest.raises(InvalidInputError, match="empty"):
            ingestor.ingest(io.BytesIO(b""), "image/png")

    def test_oversize_file_rejected(self) -> None:
        ingestor = ImageIngestor(max_upload_bytes=1024 * 1024, max_dimension=0)

        with pytest.raises(InvalidInputError, match="maximum size of 1MB"):
            ingestor.ingest(io.BytesIO(b"x" * (1024 * 1024 + 1)), "image/jpeg")

    def test_file_at_limit_accepted(self) -> None:
        ingestor = ImageIngestor(max_upload_bytes=16, max_dimension=0)

        asset = ingestor.ingest(io.BytesIO(b"x" * 16), "image/jpeg")

        assert asset.size_bytes == 16

    def test_unreadable_stream_raises_read_error(self) -> None:
        stream = MagicMock()
        stream.read.side_effect = OSError("disk gone")
        ingestor = ImageIngestor()

        with pytest.raises(ReadError, match="disk gone"):
            ingestor.ingest(stream, "image/png")

    def test_closed_stream_raises_read_error(self) -> None:
        stream = io.BytesIO(b"data")
        stream.close()
        ingestor = ImageIngestor()

        with pytest.raises(ReadError):
            ingestor.ingest(stream, "image/png")

    def test_undecodable_image_raises_read_error(self) -> None:
        ingestor = ImageIngestor(max_dimension=1024)

        with pytest.raises(ReadError, match="Could not decode image"):
            ingestor.ingest(io.BytesIO(b"definitely not a png"), "image/png")


class TestIngestEncoding:
    """Test base64 encoding and normalisation."""

    def test_encodes_raw_bytes_without_normalisation(self) -> None:
        payload = b"\x89PNG fake bytes"
        ingestor = ImageIngestor(max_dimension=0)

        asset = ingestor.ingest(io.BytesIO(payload), "image/PNG", filename="a.png")

        assert asset.media_type == "image/png"
        assert asset.filename == "a.png"
        assert asset.size_bytes == len(payload)
        assert base64.b64decode(asset.data) == payload
        assert asset.data_url.startswith("data:image/png;base64,")

    def test_small_image_kept_as_is(self, image_bytes) -> None:
        raw = image_bytes(size=(64, 48))
        ingestor = ImageIngestor(max_dimension=1024)

        asset = ingestor.ingest(io.BytesIO(raw), "image/png")

        assert asset.media_type == "image/png"
        assert base64.b64decode(asset.data) == raw

    def test_large_image_downscaled_to_jpeg(self, image_bytes) -> None:
        raw = image_bytes(size=(400, 200))
        ingestor = ImageIngestor(max_dimension=100)

        asset = ingestor.ingest(io.BytesIO(raw), "image/png")

        assert asset.media_type == "image/jpeg"
        img = Image.open(io.BytesIO(base64.b64decode(asset.data)))
        assert img.format == "JPEG"
        assert img.size == (100, 50)

    def test_transparent_image_flattened(self, image_bytes) -> None:
        raw = image_bytes(size=(300, 300), mode="RGBA", color=(0, 0, 0, 0))
        ingestor = ImageIngestor(max_dimension=150)

        asset = ingestor.ingest(io.BytesIO(raw), "image/png")

        img = Image.open(io.BytesIO(base64.b64decode(asset.data)))
        assert img.mode == "RGB"
        assert max(img.size) == 150
        # Transparent pixels become white
        r, g, b = img.getpixel((10, 10))
        assert min(r, g, b) > 240
