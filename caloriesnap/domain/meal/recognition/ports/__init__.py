"""Recognition domain ports (interfaces)."""

from caloriesnap.domain.meal.recognition.ports.food_identifier import IFoodIdentifier

__all__ = ["IFoodIdentifier"]
