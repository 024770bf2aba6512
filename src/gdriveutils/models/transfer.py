"""Per-item failure record for recursive transfers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gdriveutils.errors import GDriveUtilsError, HttpErrorInfo


@dataclass(frozen=True)
class TransferFailure:
    """One failed item of an upload/download walk."""

    path: str
    file_id: Optional[str]
    error: str
    response: Optional[HttpErrorInfo] = None

    @classmethod
    def from_exception(
        cls,
        path: str,
        exc: BaseException,
        *,
        file_id: Optional[str] = None,
    ) -> "TransferFailure":
        response = None
        if isinstance(exc, GDriveUtilsError):
            http = exc.details.get("http")
            if isinstance(http, HttpErrorInfo):
                response = http
        return cls(
            path=path,
            file_id=file_id,
            error=f"{exc.__class__.__name__}: {exc}",
            response=response,
        )
