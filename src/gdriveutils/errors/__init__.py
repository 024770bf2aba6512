"""Public error exports for gdriveutils."""

from __future__ import annotations

from .exceptions import (
    AggregateTransferError,
    AmbiguousIdentifierError,
    ApiError,
    AuthError,
    ConflictError,
    GDriveUtilsError,
    HttpErrorInfo,
    IdentifierError,
    IdentifierNotFoundError,
    InvalidArgumentError,
    InvalidIdentifierError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    UnsupportedTypeError,
    map_http_error,
)

__all__ = [
    "GDriveUtilsError",
    "InvalidStateError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "IdentifierError",
    "InvalidIdentifierError",
    "IdentifierNotFoundError",
    "AmbiguousIdentifierError",
    "UnsupportedTypeError",
    "AggregateTransferError",
    "HttpErrorInfo",
    "map_http_error",
]
