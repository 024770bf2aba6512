"""Google Drive API controller: the single place remote calls are made."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from gdriveutils.auth import OAuthClient
from gdriveutils.config import DriveConfig
from gdriveutils.errors import (
    ApiError,
    AuthError,
    GDriveUtilsError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    RateLimitError,
    map_http_error,
)
from gdriveutils.models import RemoteObject
from gdriveutils.query import with_page_token
from gdriveutils.util.mime import FOLDER_MIME
from gdriveutils.util.throttle import Throttle

from .fields import FILE_FIELDS, GET_FIELDS

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Resources whose methods accept supportsAllDrives.
_ALL_DRIVES_RESOURCES: frozenset[str] = frozenset({"files", "permissions"})


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class GoogleDriveController:
    """
    Drive API controller.

    Every request goes through :meth:`call` (or the download loop), which
    applies the throttle, retries rate-limit/network/5xx failures with
    exponential backoff, and maps ``HttpError`` to gdriveutils exceptions.

    Notes:
        - `supports_all_drives` is applied to all files/permissions requests.
        - `credentials` is None when the controller wraps a pre-built service.
    """

    def __init__(
        self,
        service: Any,
        *,
        credentials: Optional[Any] = None,
        supports_all_drives: bool = True,
        retry_policy: Optional[RetryPolicy] = None,
        throttle: Optional[Throttle] = None,
    ) -> None:
        self._service = service
        self._credentials = credentials
        self._supports_all_drives = supports_all_drives
        self._retry_policy = retry_policy or RetryPolicy()
        self._throttle = throttle

    @classmethod
    def from_config(
        cls,
        config: DriveConfig,
        *,
        oauth_client: Optional[OAuthClient] = None,
    ) -> "GoogleDriveController":
        """Authenticate with ``config`` and build a controller around a live service."""
        client = oauth_client or OAuthClient(config)
        creds = client.get_credentials(ensure_valid=True)
        service = client.build_drive_service(creds)
        return cls(
            service,
            credentials=creds,
            supports_all_drives=config.supports_all_drives,
            retry_policy=RetryPolicy(config.max_retries, config.initial_delay_sec),
            throttle=Throttle(config.throttle_requests, config.throttle_interval_sec),
        )

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        supports_all_drives: bool = True,
    ) -> "GoogleDriveController":
        """Create controller from a pre-built Drive service (useful for tests)."""
        return cls(service, supports_all_drives=supports_all_drives)

    @property
    def credentials(self) -> Optional[Any]:
        return self._credentials

    # ----------------------------
    # Remote call primitive
    # ----------------------------
    def call(self, resource: str, method: str, **params: Any) -> Any:
        """
        Execute one Drive API request and return its parsed response data.

        Example:
            controller.call("files", "list", q="name = 'Reports'", fields="files(id)")
        """
        request = self._build_request(resource, method, params)
        return self._execute(request.execute)

    # ----------------------------
    # files resource helpers
    # ----------------------------
    def list_files(self, q: str, *, fields: Optional[str] = None) -> list[RemoteObject]:
        """Run ``files.list`` for ``q`` and follow every page."""
        page_fields = with_page_token(fields)
        results: list[RemoteObject] = []
        page_token: Optional[str] = None

        while True:
            params: dict[str, Any] = {"q": q, "fields": page_fields}
            if page_token:
                params["pageToken"] = page_token
            data = self.call("files", "list", **params)
            for f in data.get("files", []):
                results.append(RemoteObject.from_api(f))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return results

    def get(self, file_id: str, *, fields: str = GET_FIELDS) -> RemoteObject:
        data = self.call("files", "get", fileId=file_id, fields=fields)
        obj = RemoteObject.from_api(data)
        if not obj.file_id:
            obj.file_id = file_id
        return obj

    def update(
        self,
        file_id: str,
        *,
        body: Optional[dict[str, Any]] = None,
        add_parents: Optional[str] = None,
        remove_parents: Optional[str] = None,
        fields: str = FILE_FIELDS,
    ) -> RemoteObject:
        params: dict[str, Any] = {"fileId": file_id, "fields": fields}
        if body:
            params["body"] = body
        if add_parents:
            params["addParents"] = add_parents
        if remove_parents:
            params["removeParents"] = remove_parents
        data = self.call("files", "update", **params)
        return RemoteObject.from_api(data)

    def create_folder(self, name: str, parent_id: str) -> RemoteObject:
        body = {"name": name, "mimeType": FOLDER_MIME, "parents": [parent_id]}
        data = self.call("files", "create", body=body, fields=FILE_FIELDS)
        return RemoteObject.from_api(data)

    def upload_file(
        self,
        local_path: str,
        parent_id: str,
        *,
        mime_type: str,
        name: Optional[str] = None,
    ) -> RemoteObject:
        if not local_path or not isinstance(local_path, str):
            raise InvalidArgumentError("local_path must be a non-empty string")

        try:
            from googleapiclient.http import MediaFileUpload
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-api-python-client is not available",
                cause=exc,
            ) from exc

        filename = name if name is not None else os.path.basename(local_path)
        media = MediaFileUpload(local_path, mimetype=mime_type, resumable=True)
        body = {"name": filename, "mimeType": mime_type, "parents": [parent_id]}
        data = self.call("files", "create", body=body, media_body=media, fields=FILE_FIELDS)
        return RemoteObject.from_api(data)

    def download_file(self, file_id: str, local_path: str) -> None:
        """Stream the media body of ``file_id`` into ``local_path``."""
        try:
            from googleapiclient.http import MediaIoBaseDownload
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-api-python-client is not available",
                cause=exc,
            ) from exc

        request = self._build_request("files", "get_media", {"fileId": file_id})
        try:
            with open(local_path, "wb") as f:
                downloader = MediaIoBaseDownload(f, request)
                done = False
                while not done:
                    _, done = self._execute(downloader.next_chunk)
        except Exception:
            with contextlib.suppress(OSError):
                os.remove(local_path)
            raise

    def delete(self, file_id: str) -> None:
        self.call("files", "delete", fileId=file_id)

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_kwargs(self, resource: str, method: str) -> dict[str, Any]:
        if not self._supports_all_drives or resource not in _ALL_DRIVES_RESOURCES:
            return {}
        if method == "list":
            return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}
        return {"supportsAllDrives": True}

    def _build_request(self, resource: str, method: str, params: dict[str, Any]) -> Any:
        resource_factory = getattr(self._service, resource, None)
        if resource_factory is None:
            raise InvalidArgumentError("Unknown Drive resource", details={"resource": resource})
        method_factory = getattr(resource_factory(), method, None)
        if method_factory is None:
            raise InvalidArgumentError(
                "Unknown Drive method",
                details={"resource": resource, "method": method},
            )

        kwargs = {**self._common_kwargs(resource, method), **params}
        logger.debug("Drive request %s.%s %s", resource, method, _loggable(kwargs))
        return method_factory(**kwargs)

    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            if self._throttle is not None:
                self._throttle.wait()
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.debug(
                        "Retrying after %s (attempt %d/%d, sleeping %.1fs)",
                        mapped.__class__.__name__,
                        attempt + 1,
                        self._retry_policy.max_retries,
                        delay,
                    )
                    time.sleep(delay)
                    delay *= 2
                    continue
                if mapped is exc:
                    raise
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        if isinstance(exc, GDriveUtilsError):
            return exc

        try:
            from googleapiclient.errors import HttpError
        except Exception:  # pragma: no cover
            HttpError = None  # type: ignore[assignment]

        if HttpError is not None and isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


def _loggable(params: dict[str, Any]) -> dict[str, Any]:
    return {k: ("<media>" if k == "media_body" else v) for k, v in params.items()}


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        if isinstance(payload, dict):
            err = payload.get("error", {})
            if isinstance(err, dict):
                message = err.get("message") or None
                errors = err.get("errors") or []
                if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                    details["domain"] = errors[0].get("domain")
                    details["reason_detail"] = errors[0].get("reason")
                    if isinstance(errors[0].get("reason"), str):
                        reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
