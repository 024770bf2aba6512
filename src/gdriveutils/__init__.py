"""gdriveutils public API."""

from __future__ import annotations

from gdriveutils.auth import OAuthClient
from gdriveutils.client import GoogleDriveUtils
from gdriveutils.config import DriveConfig
from gdriveutils.controller import GoogleDriveController, RetryPolicy
from gdriveutils.errors import (
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
from gdriveutils.models import (
    BatchRequest,
    BatchResponse,
    ByDescriptor,
    ById,
    ByPath,
    RemoteObject,
    TransferFailure,
)

__all__ = [
    # High-level
    "GoogleDriveUtils",
    "GoogleDriveController",
    "RetryPolicy",
    # Auth / config
    "DriveConfig",
    "OAuthClient",
    # Models
    "RemoteObject",
    "TransferFailure",
    "BatchRequest",
    "BatchResponse",
    "ById",
    "ByPath",
    "ByDescriptor",
    # Errors
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
