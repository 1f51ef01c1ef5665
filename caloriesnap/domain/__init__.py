"""Domain layer for meal photo analysis.

Business rules for ingesting meal photos, identifying food items and
estimating calories, decoupled from the HTTP surface and the AI provider.
"""
