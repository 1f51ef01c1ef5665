"""Pydantic models for OpenAI structured outputs.

These models define the schema for structured outputs from OpenAI API.
Used with chat.completions.parse() for native Pydantic support.
Wire names are camelCase (``foodItems``, ``estimatedCalories``).
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class FoodIdentificationResponse(BaseModel):
    """Root model for food identification."""

    model_config = ConfigDict(populate_by_name=True)

    food_items: List[str] = Field(
        ...,
        alias="foodItems",
        description="The list of identified food items.",
    )


class CalorieEstimateResponse(BaseModel):
    """Root model for calorie estimation."""

    model_config = ConfigDict(populate_by_name=True)

    estimated_calories: str = Field(
        ...,
        alias="estimatedCalories",
        description="A list of each food item, and its estimated calorie count.",
    )
