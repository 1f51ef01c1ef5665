"""Domain service for estimating calories of identified food items."""

import logging
from typing import Sequence

from caloriesnap.domain.meal.estimation.ports.calorie_estimator import ICalorieEstimator
from caloriesnap.domain.shared.errors import InvalidInputError, SchemaViolationError

logger = logging.getLogger(__name__)

ITEM_SEPARATOR = ", "


class CalorieEstimationService:
    """
    Domain service for calorie estimation.

    Joins the food items into one comma-separated string and makes a single
    call to an ICalorieEstimator.
    """

    def __init__(self, estimator: ICalorieEstimator):
        self._estimator = estimator

    async def estimate(self, items: Sequence[str]) -> str:
        """
        Estimate calories for a non-empty list of food items.

        Args:
            items: Food labels from identification

        Returns:
            Free-text calorie estimate

        Raises:
            InvalidInputError: If ``items`` is empty
            RemoteCallError: If the provider fails or answers off-schema

        Example:
            >>> await service.estimate(["apple", "toast"])
            'apple: 95 kcal, toast: 120 kcal'
        """
        if not items:
            raise InvalidInputError("Cannot estimate calories without food items")

        food_items = ITEM_SEPARATOR.join(items)

        logger.info(
            "Estimating calories",
            extra={"item_count": len(items), "food_items": food_items},
        )

        try:
            estimate = await self._estimator.estimate_calories(food_items)
        except Exception as e:
            logger.error(
                "Calorie estimation failed",
                extra={"food_items": food_items, "error": str(e)},
                exc_info=True,
            )
            raise

        if not isinstance(estimate, str):
            raise SchemaViolationError(
                f"Expected a text estimate, got {type(estimate).__name__}"
            )

        logger.info("Estimation complete", extra={"estimate_length": len(estimate)})

        return estimate
