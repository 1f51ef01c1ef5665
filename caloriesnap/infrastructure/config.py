"""Configuration utilities for infrastructure layer.

Settings come from environment variables (optionally loaded from ``.env`` by
the app at startup) and are read once into an immutable AppSettings.
"""

import os
from dataclasses import dataclass
from typing import Optional

from caloriesnap import __version__

DEFAULT_OPENAI_MODEL = "gpt-4o-2024-08-06"


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def get_openai_api_key() -> Optional[str]:
    """
    Get OpenAI API key.

    Returns:
        Key from OPENAI_API_KEY, or None if not set
    """
    return os.getenv("OPENAI_API_KEY") or None


def mask_secret(secret: Optional[str]) -> Optional[str]:
    """
    Mask a credential for logging.

    Example:
        >>> mask_secret("sk-abcdef123456")
        'sk-a...3456'
    """
    if not secret:
        return None
    if len(secret) > 8:
        return secret[:4] + "..." + secret[-4:]
    return "***"


@dataclass(frozen=True)
class AppSettings:
    """Process-wide settings, read once at startup."""

    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_timeout_s: float = 30.0
    openai_temperature: float = 0.2
    vision_provider: str = "stub"
    max_upload_bytes: int = 5 * 1024 * 1024
    image_max_dimension: int = 1024
    max_sessions: int = 1000
    log_level: str = "INFO"
    app_version: str = __version__


def load_settings() -> AppSettings:
    """
    Read AppSettings from the environment.

    Environment variables:
        OPENAI_API_KEY, OPENAI_MODEL, OPENAI_TIMEOUT_S, OPENAI_TEMPERATURE,
        VISION_PROVIDER (openai | stub), MAX_UPLOAD_BYTES,
        IMAGE_MAX_DIMENSION (0 disables downscaling), MAX_SESSIONS,
        LOG_LEVEL, APP_VERSION

    Raises:
        ValueError: If a numeric variable cannot be parsed
    """
    return AppSettings(
        openai_api_key=get_openai_api_key(),
        openai_model=os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
        openai_timeout_s=_get_float("OPENAI_TIMEOUT_S", 30.0),
        openai_temperature=_get_float("OPENAI_TEMPERATURE", 0.2),
        vision_provider=os.getenv("VISION_PROVIDER", "stub").lower(),
        max_upload_bytes=_get_int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
        image_max_dimension=_get_int("IMAGE_MAX_DIMENSION", 1024),
        max_sessions=_get_int("MAX_SESSIONS", 1000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        app_version=os.getenv("APP_VERSION", __version__),
    )
