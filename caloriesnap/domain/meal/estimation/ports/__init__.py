"""Estimation domain ports (interfaces)."""

from caloriesnap.domain.meal.estimation.ports.calorie_estimator import ICalorieEstimator

__all__ = ["ICalorieEstimator"]
