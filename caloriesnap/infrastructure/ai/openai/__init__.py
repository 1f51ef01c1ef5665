"""OpenAI client implementation for food identification and calorie estimation."""

from caloriesnap.infrastructure.ai.openai.client import OpenAIMealClient
from caloriesnap.infrastructure.ai.openai.models import (
    CalorieEstimateResponse,
    FoodIdentificationResponse,
)

__all__ = [
    "OpenAIMealClient",
    "CalorieEstimateResponse",
    "FoodIdentificationResponse",
]
