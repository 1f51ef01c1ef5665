"""Meal orchestrators."""

from caloriesnap.application.meal.orchestrators.pipeline_orchestrator import (
    MealPipelineOrchestrator,
)

__all__ = ["MealPipelineOrchestrator"]
