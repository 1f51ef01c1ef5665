"""Meal domain: ingestion, recognition, estimation and pipeline state."""
