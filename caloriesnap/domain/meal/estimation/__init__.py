"""Calorie estimation for identified food items."""
