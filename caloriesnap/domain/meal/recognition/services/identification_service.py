"""Domain service for identifying food items in a meal photo.

This service delegates the actual analysis to a food identification provider
through the ports pattern and adds label cleanup and logging.
"""

import logging
from typing import Any, List

from caloriesnap.domain.meal.ingestion.entities import ImageAsset
from caloriesnap.domain.meal.recognition.ports.food_identifier import IFoodIdentifier
from caloriesnap.domain.shared.errors import SchemaViolationError

logger = logging.getLogger(__name__)


class FoodIdentificationService:
    """
    Domain service for food item identification.

    Delegates the remote call to an IFoodIdentifier (e.g., OpenAI client)
    while providing label cleanup and logging. Exactly one provider call is
    made per invocation; failures propagate unchanged.
    """

    def __init__(self, identifier: IFoodIdentifier):
        """
        Initialize identification service with a provider.

        Args:
            identifier: Implementation of IFoodIdentifier
        """
        self._identifier = identifier

    async def identify(self, asset: ImageAsset) -> List[str]:
        """
        Identify food items in an ingested photo.

        Args:
            asset: Encoded photo from the ImageIngestor

        Returns:
            Ordered, stripped food labels. May be empty.

        Raises:
            RemoteCallError: If the provider fails or answers off-schema

        Example:
            >>> service = FoodIdentificationService(openai_client)
            >>> await service.identify(asset)
            ['apple', 'toast']
        """
        logger.info(
            "Identifying food items",
            extra={"media_type": asset.media_type, "size_bytes": asset.size_bytes},
        )

        try:
            raw_items = await self._identifier.identify_food_items(asset.data_url)
        except Exception as e:
            logger.error(
                "Food identification failed",
                extra={"error": str(e)},
                exc_info=True,
            )
            raise

        items = self._clean_labels(raw_items)

        logger.info(
            "Identification complete",
            extra={"item_count": len(items), "dropped": len(raw_items) - len(items)},
        )

        return items

    def _clean_labels(self, raw_items: Any) -> List[str]:
        """Strip labels and drop blank ones, keeping order."""
        if not isinstance(raw_items, list) or not all(isinstance(i, str) for i in raw_items):
            raise SchemaViolationError(
                f"Expected a list of food labels, got {type(raw_items).__name__}"
            )

        return [item.strip() for item in raw_items if item.strip()]
