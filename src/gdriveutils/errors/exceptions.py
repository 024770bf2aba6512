"""Exception hierarchy and HTTP error mapping for gdriveutils."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Sequence

if TYPE_CHECKING:
    from gdriveutils.models.transfer import TransferFailure


class GDriveUtilsError(Exception):
    """
    Base exception for gdriveutils.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidStateError(GDriveUtilsError):
    """Raised when an operation is not possible in the current client state."""


# ----------------------------
# Transport (mapped from Drive API responses)
# ----------------------------
class AuthError(GDriveUtilsError):
    """Raised when OAuth authentication/refresh fails (or HTTP 401)."""


class PermissionError(GDriveUtilsError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class InvalidArgumentError(GDriveUtilsError):
    """Raised when request arguments are invalid (HTTP 400, etc.)."""


class NotFoundError(GDriveUtilsError):
    """Raised when a Drive resource is not found (HTTP 404)."""


class ConflictError(GDriveUtilsError):
    """Raised on HTTP 409/412, or when the target already exists on Drive."""


class RateLimitError(GDriveUtilsError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(GDriveUtilsError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NetworkError(GDriveUtilsError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(GDriveUtilsError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


# ----------------------------
# Identifier resolution
# ----------------------------
class IdentifierError(GDriveUtilsError):
    """Base class for errors caused by the identifier a caller passed in."""


class InvalidIdentifierError(IdentifierError):
    """Raised when an identifier descriptor has an unrecognized shape or key."""


class IdentifierNotFoundError(IdentifierError, NotFoundError):
    """Raised when no Drive object matches a name-based identifier."""


class AmbiguousIdentifierError(IdentifierError):
    """Raised when more than one Drive object matches a name-based identifier."""


# ----------------------------
# Transfers
# ----------------------------
class UnsupportedTypeError(GDriveUtilsError):
    """Raised when a file type cannot be uploaded or downloaded."""


class AggregateTransferError(GDriveUtilsError):
    """
    Raised once after a recursive upload/download when items failed.

    Attributes:
        failures: Every per-item failure, in the order they occurred.
    """

    def __init__(
        self,
        failures: Sequence["TransferFailure"],
        *,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.failures = list(failures)
        super().__init__(_format_failures(self.failures), details=details)


def _format_failures(failures: Sequence["TransferFailure"]) -> str:
    lines = [f"{len(failures)} item(s) failed to transfer:"]
    for failure in failures:
        line = f"  {failure.path}"
        if failure.file_id:
            line += f" (id: {failure.file_id})"
        line += f": {failure.error}"
        if failure.response is not None:
            line += f" [HTTP {failure.response.status_code}"
            if failure.response.message:
                line += f" {failure.response.message}"
            line += "]"
        lines.append(line)
    return "\n".join(lines)


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdriveutils exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GDriveUtilsError:
    """
    Map an HTTP error to a gdriveutils exception.

    Policy:
        - 400 -> InvalidArgumentError
        - 401 -> AuthError
        - 403 -> PermissionError, or QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - otherwise -> ApiError

    The mapped error keeps ``info`` under ``details["http"]`` so that transfer
    reports can show the remote status and text.
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
        "http": info,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
