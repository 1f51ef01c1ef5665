"""Port (interface) for calorie estimation providers."""

from typing import Protocol


class ICalorieEstimator(Protocol):
    """
    Interface for calorie estimation providers.

    Implementations receive the identified food items already joined into a
    single comma-separated string and return free text.
    """

    async def estimate_calories(self, food_items: str) -> str:
        """
        Estimate calories for each item in the list.

        Args:
            food_items: Comma-separated food labels (e.g., "apple, toast")

        Returns:
            Free-text estimate with a per-item breakdown

        Raises:
            RemoteCallError: Transport failure, timeout or schema violation

        Example:
            >>> text = await estimator.estimate_calories("apple, toast")
            >>> print(text)
            apple: 95 kcal, toast: 120 kcal
        """
        ...
