"""Shared domain primitives."""

from caloriesnap.domain.shared.errors import (
    DomainError,
    ExternalServiceError,
    InvalidInputError,
    ReadError,
    RemoteCallError,
    RemoteTimeoutError,
    SchemaViolationError,
)

__all__ = [
    "DomainError",
    "ExternalServiceError",
    "InvalidInputError",
    "ReadError",
    "RemoteCallError",
    "RemoteTimeoutError",
    "SchemaViolationError",
]
