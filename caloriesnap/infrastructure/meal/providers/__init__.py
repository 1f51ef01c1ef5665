"""Meal analysis providers."""

from caloriesnap.infrastructure.meal.providers.factory import create_meal_provider
from caloriesnap.infrastructure.meal.providers.stub_provider import StubMealProvider

__all__ = ["create_meal_provider", "StubMealProvider"]
