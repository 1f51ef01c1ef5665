"""Image ingestion for uploaded meal photos."""

from caloriesnap.domain.meal.ingestion.entities import ImageAsset
from caloriesnap.domain.meal.ingestion.ingestor import ImageIngestor

__all__ = ["ImageAsset", "ImageIngestor"]
