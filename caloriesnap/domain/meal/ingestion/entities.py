"""ImageAsset entity - an uploaded meal photo ready for the remote model."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ImageAsset:
    """
    Entity: Encoded meal photo owned by a single pipeline run.

    Immutable. Created when the user selects a file and discarded when a
    newer upload starts another run.

    Example:
        ImageAsset(
            media_type="image/jpeg",
            data="/9j/4AAQSkZJRg...",
            filename="lunch.jpg",
            size_bytes=48213,
        )
    """

    media_type: str  # e.g. "image/jpeg"
    data: str  # base64 payload
    filename: Optional[str] = None
    size_bytes: int = 0  # size of the encoded image, before base64

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        if not self.media_type.startswith("image/"):
            raise ValueError(f"Media type must be an image, got {self.media_type}")

        if not self.data:
            raise ValueError("Image data cannot be empty")

    @property
    def data_url(self) -> str:
        """
        Embeddable data URL for the remote model.

        Example:
            >>> ImageAsset("image/png", "iVBORw0KGgo=").data_url
            'data:image/png;base64,iVBORw0KGgo='
        """
        return f"data:{self.media_type};base64,{self.data}"
