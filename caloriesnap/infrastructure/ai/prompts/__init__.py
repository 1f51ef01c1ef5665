"""Meal analysis prompts for OpenAI."""

from caloriesnap.infrastructure.ai.prompts.meal_analysis import (
    CALORIE_ESTIMATION_SYSTEM_PROMPT,
    FOOD_IDENTIFICATION_SYSTEM_PROMPT,
    build_estimation_messages,
    build_identification_messages,
)

__all__ = [
    "CALORIE_ESTIMATION_SYSTEM_PROMPT",
    "FOOD_IDENTIFICATION_SYSTEM_PROMPT",
    "build_estimation_messages",
    "build_identification_messages",
]
