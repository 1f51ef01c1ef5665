"""
Domain exceptions.

Typed exceptions for explicit error handling across the meal pipeline.
"""

from __future__ import annotations


# ═══════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════


class DomainError(Exception):
    """
    Base exception for all domain errors.

    All domain-specific exceptions inherit from this.
    Allows catching all domain errors with single except clause.
    """

    pass


# ═══════════════════════════════════════════════════════════
# INPUT EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class InvalidInputError(DomainError):
    """
    Input rejected before any remote call.

    Raised when:
    - Uploaded file is not an image
    - Uploaded file is empty or larger than the upload limit
    - Calorie estimation requested with no food items

    Example:
        >>> raise InvalidInputError("File is not an image: application/pdf")
    """

    pass


class ReadError(DomainError):
    """
    Uploaded file could not be read or encoded.

    Raised when:
    - Reading the upload stream fails
    - Image bytes cannot be decoded for normalisation

    Example:
        >>> raise ReadError("Could not read uploaded file: broken pipe")
    """

    pass


# ═══════════════════════════════════════════════════════════
# EXTERNAL SERVICE EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class ExternalServiceError(DomainError):
    """
    External service call failed.

    Base class for all external service errors.
    """

    pass


class RemoteCallError(ExternalServiceError):
    """
    Call to the remote model failed.

    Raised when:
    - Network error or non-2xx response
    - Request timed out
    - Response does not match the expected schema

    Example:
        >>> raise RemoteCallError("OpenAI API failed: 503 Service Unavailable")
    """

    pass


class RemoteTimeoutError(RemoteCallError):
    """
    Remote model call timed out.

    Example:
        >>> raise RemoteTimeoutError("OpenAI request timed out after 30s")
    """

    pass


class SchemaViolationError(RemoteCallError):
    """
    Remote model answered with an unparseable or off-schema payload.

    Distinct from an empty (but valid) result.

    Example:
        >>> raise SchemaViolationError("Response missing 'foodItems'")
    """

    pass
