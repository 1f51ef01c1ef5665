"""Stub meal analysis provider for development and testing.

Returns deterministic results without calling external APIs.
"""

import base64
import hashlib
from typing import Dict, List

# Approximate kcal for a typical serving
STUB_CALORIES: Dict[str, int] = {
    "fried egg": 90,
    "toast": 120,
    "orange juice": 110,
    "spaghetti": 220,
    "tomato sauce": 70,
    "parmesan cheese": 80,
    "green salad": 35,
    "grilled chicken breast": 165,
    "white rice": 205,
    "apple": 95,
}

STUB_MEALS: List[List[str]] = [
    ["fried egg", "toast", "orange juice"],
    ["spaghetti", "tomato sauce", "parmesan cheese"],
    ["grilled chicken breast", "white rice", "green salad"],
]

DEFAULT_STUB_CALORIES = 150


class StubMealProvider:
    """
    Stub implementation of IFoodIdentifier and ICalorieEstimator.

    The photo's bytes pick one of a few canned meals, so the same image
    always yields the same items. A photo whose payload is a single repeated
    byte (e.g. a blank canvas) yields no food items.
    Supports async context manager protocol for lifespan compatibility.
    """

    async def __aenter__(self) -> "StubMealProvider":
        """Enter async context (no-op for stub)."""
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Exit async context (no-op for stub)."""
        return None

    async def identify_food_items(self, image_data_url: str) -> List[str]:
        """
        Pick a canned meal from the photo payload.

        Args:
            image_data_url: Photo as a base64 data URL

        Returns:
            Stub food labels
        """
        _, _, payload = image_data_url.partition(",")
        raw = base64.b64decode(payload or image_data_url, validate=False)

        if len(set(raw)) <= 1:
            return []

        digest = hashlib.sha256(raw).digest()
        return list(STUB_MEALS[digest[0] % len(STUB_MEALS)])

    async def estimate_calories(self, food_items: str) -> str:
        """
        Build a per-item breakdown from the stub calorie table.

        Args:
            food_items: Comma-separated food labels

        Returns:
            Text like "apple: 95 kcal, toast: 120 kcal. Total: 215 kcal"
        """
        labels = [label.strip() for label in food_items.split(",") if label.strip()]
        parts = []
        total = 0
        for label in labels:
            kcal = STUB_CALORIES.get(label.lower(), DEFAULT_STUB_CALORIES)
            total += kcal
            parts.append(f"{label}: {kcal} kcal")

        return f"{', '.join(parts)}. Total: {total} kcal"
