"""
CalorieSnap meal photo analysis.

Structure:
- domain/: Business logic and domain models
- infrastructure/: External concerns (OpenAI, config, stub providers)
- application/: Pipeline orchestration and browser sessions
- api/: REST endpoints
"""

__version__ = "1.0.0"
