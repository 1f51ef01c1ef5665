"""Image ingestion: validate an uploaded file and encode it for the remote model.

Pure in-memory transformation. No network access, no disk writes, and no
knowledge of the pipeline state.
"""

import base64
import io
import logging
from typing import BinaryIO, Optional, Tuple

from PIL import Image

from caloriesnap.domain.meal.ingestion.entities import ImageAsset
from caloriesnap.domain.shared.errors import InvalidInputError, ReadError

logger = logging.getLogger(__name__)

# Maximum file size: 5MB
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024

DEFAULT_MAX_DIMENSION = 1024

JPEG_QUALITY = 85


class ImageIngestor:
    """
    Turns a user-selected file into an ImageAsset.

    Steps:
    1. Reject anything whose declared media type is not ``image/*``
    2. Read the payload (bounded by ``max_upload_bytes``)
    3. Optionally downscale oversized photos with Pillow
    4. Base64-encode into an immutable ImageAsset

    Example:
        >>> ingestor = ImageIngestor(max_dimension=0)
        >>> with open("lunch.png", "rb") as fh:
        ...     asset = ingestor.ingest(fh, "image/png", filename="lunch.png")
        >>> asset.data_url[:22]
        'data:image/png;base64,'
    """

    def __init__(
        self,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        max_dimension: int = DEFAULT_MAX_DIMENSION,
    ):
        """
        Initialize ingestor.

        Args:
            max_upload_bytes: Largest accepted upload in bytes
            max_dimension: Downscale bound in pixels (0 disables normalisation)
        """
        self.max_upload_bytes = max_upload_bytes
        self.max_dimension = max_dimension

    def ingest(
        self,
        file: BinaryIO,
        media_type: Optional[str],
        filename: Optional[str] = None,
    ) -> ImageAsset:
        """
        Validate and encode an uploaded file.

        Args:
            file: Readable binary stream with the upload
            media_type: Declared MIME type of the upload
            filename: Original filename (informational only)

        Returns:
            ImageAsset with base64 payload

        Raises:
            InvalidInputError: Not an image, empty, or too large
            ReadError: Stream could not be read or image could not be decoded
        """
        if not media_type or not media_type.lower().startswith("image/"):
            raise InvalidInputError(f"File is not an image: {media_type or 'unknown type'}")

        try:
            raw = file.read(self.max_upload_bytes + 1)
        except (OSError, ValueError) as e:
            raise ReadError(f"Could not read uploaded file: {e}") from e

        if not raw:
            raise InvalidInputError("Uploaded image is empty")

        if len(raw) > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes / (1024 * 1024)
            raise InvalidInputError(f"Image exceeds maximum size of {limit_mb:g}MB")

        media_type = media_type.lower()
        if self.max_dimension > 0:
            raw, media_type = self._normalize(raw, media_type)

        asset = ImageAsset(
            media_type=media_type,
            data=base64.b64encode(raw).decode("ascii"),
            filename=filename,
            size_bytes=len(raw),
        )

        logger.info(
            "Image ingested",
            extra={
                "file_name": filename,
                "media_type": asset.media_type,
                "size_bytes": asset.size_bytes,
            },
        )

        return asset

    def _normalize(self, raw: bytes, media_type: str) -> Tuple[bytes, str]:
        """Downscale images larger than ``max_dimension`` and re-encode as JPEG."""
        try:
            img: Image.Image = Image.open(io.BytesIO(raw))
            img.load()
        except (OSError, Image.DecompressionBombError) as e:
            raise ReadError(f"Could not decode image: {e}") from e

        width, height = img.size
        if width <= self.max_dimension and height <= self.max_dimension:
            return raw, media_type

        img.thumbnail((self.max_dimension, self.max_dimension), Image.Resampling.LANCZOS)

        # JPEG has no alpha: composite transparent images on white
        rgb_img: Image.Image
        if img.mode in ("RGBA", "LA", "P"):
            if img.mode == "P":
                img = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            rgb_img = background
        elif img.mode != "RGB":
            rgb_img = img.convert("RGB")
        else:
            rgb_img = img

        output = io.BytesIO()
        rgb_img.save(output, format="JPEG", quality=JPEG_QUALITY, optimize=True)

        logger.debug(
            "Image downscaled",
            extra={"original_size": (width, height), "new_size": rgb_img.size},
        )

        return output.getvalue(), "image/jpeg"
