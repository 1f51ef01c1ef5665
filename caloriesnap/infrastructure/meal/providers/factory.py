"""Provider Factory for meal analysis.

Settings-based provider selection.
Strategy:
- VISION_PROVIDER=openai: real OpenAI client (requires OPENAI_API_KEY)
- VISION_PROVIDER=stub: deterministic stub (default)

Usage:
    from caloriesnap.infrastructure.meal.providers.factory import create_meal_provider

    provider = create_meal_provider(settings)  # stub or real based on settings
"""

from typing import Union

from caloriesnap.infrastructure.ai.openai.client import OpenAIMealClient
from caloriesnap.infrastructure.config import AppSettings
from caloriesnap.infrastructure.meal.providers.stub_provider import StubMealProvider

MealProvider = Union[OpenAIMealClient, StubMealProvider]


def create_meal_provider(settings: AppSettings) -> MealProvider:
    """Create the meal analysis provider selected by ``settings.vision_provider``.

    Values:
        - "openai": OpenAI API (requires OPENAI_API_KEY)
        - "stub": Stub provider (default)

    Returns:
        Provider implementing both IFoodIdentifier and ICalorieEstimator

    Raises:
        ValueError: Unknown provider, or openai selected without a key

    Example:
        # In .env (production):
        VISION_PROVIDER=openai
        OPENAI_API_KEY=sk-...

        # In .env.test (testing):
        VISION_PROVIDER=stub
    """
    mode = settings.vision_provider

    if mode == "openai":
        if not settings.openai_api_key:
            raise ValueError(
                "VISION_PROVIDER=openai but OPENAI_API_KEY not set. "
                "Set OPENAI_API_KEY in .env or use VISION_PROVIDER=stub"
            )
        return OpenAIMealClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            timeout=settings.openai_timeout_s,
        )

    if mode == "stub":
        return StubMealProvider()

    raise ValueError(f"Unknown VISION_PROVIDER {mode!r} (expected 'openai' or 'stub')")
