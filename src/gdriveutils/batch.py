"""
Drive batch requests: several independent API calls in one HTTP round trip.

Wire format (``multipart/mixed``; each part wraps one HTTP request)::

    --END_OF_PART
    Content-Type: application/http
    Content-ID: <item-1>

    GET https://www.googleapis.com/drive/v3/files?q=...
    Authorization: Bearer ya29...
    Content-Type: application/json; charset=UTF-8

    --END_OF_PART--

The response mirrors it, one ``HTTP/1.1 <status> ...`` part per request, in
request order.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from email.message import Message
from email.parser import Parser
from typing import Any, Callable, Optional, Sequence

import requests

from gdriveutils.config import DEFAULT_BATCH_URL
from gdriveutils.errors import (
    ApiError,
    AuthError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    map_http_error,
)
from gdriveutils.models import BatchRequest, BatchResponse
from gdriveutils.util.throttle import Throttle

logger = logging.getLogger(__name__)

BATCH_BOUNDARY: str = "END_OF_PART"
MAX_BATCH_SIZE: int = 100

_CRLF = "\r\n"


@dataclass(frozen=True)
class ResponsePart:
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    data: Optional[Any] = None


class BatchExecutor:
    """
    Send up to 100 requests as one Drive batch call.

    Before the batch is built, the first request is sent on its own to check
    the bearer token; a 401 refreshes the credentials once and the new token
    is used for every part. The check is a real request, so a non-idempotent
    first request takes effect twice.
    """

    def __init__(
        self,
        credentials: Any,
        *,
        refresh: Optional[Callable[[Any], None]] = None,
        session: Optional[requests.Session] = None,
        batch_url: str = DEFAULT_BATCH_URL,
        throttle: Optional[Throttle] = None,
    ) -> None:
        self._credentials = credentials
        self._refresh = refresh
        self._session = session or requests.Session()
        self._batch_url = batch_url
        self._throttle = throttle

    def execute(self, batch_requests: Sequence[BatchRequest]) -> list[BatchResponse]:
        """
        Returns:
            One BatchResponse per request, in request order.

        Raises:
            InvalidArgumentError: more than MAX_BATCH_SIZE requests.
            AuthError: the token is rejected and cannot be refreshed.
            NetworkError / ApiError (and other mapped errors): the batch call
                itself failed.
        """
        batch_requests = list(batch_requests)
        if not batch_requests:
            return []
        if len(batch_requests) > MAX_BATCH_SIZE:
            raise InvalidArgumentError(
                f"A batch holds at most {MAX_BATCH_SIZE} requests",
                details={"count": len(batch_requests)},
            )

        self._check_token(batch_requests[0])

        body = encode_batch(batch_requests, self._authorization(), boundary=BATCH_BOUNDARY)
        headers = {"Content-Type": f"multipart/mixed; boundary={BATCH_BOUNDARY}"}
        logger.debug("Sending batch of %d request(s) to %s", len(batch_requests), self._batch_url)
        response = self._send("POST", self._batch_url, headers=headers, data=body.encode("utf-8"))
        if response.status_code >= 400:
            raise _response_error(response)

        parts = parse_batch_response(response.text, response.headers.get("Content-Type"))
        if len(parts) != len(batch_requests):
            raise ApiError(
                "Batch response does not match the requests sent",
                details={"requests": len(batch_requests), "responses": len(parts)},
            )
        return [
            BatchResponse(request=req, status=part.status, headers=part.headers, data=part.data)
            for req, part in zip(batch_requests, parts)
        ]

    def _authorization(self) -> str:
        return f"Bearer {self._credentials.token}"

    def _check_token(self, first: BatchRequest) -> None:
        response = self._send(
            first.method,
            first.url,
            headers={"Authorization": self._authorization()},
            json=first.data,
        )
        if response.status_code != 401:
            return
        if self._refresh is None:
            raise AuthError("Access token rejected and no refresh is configured")
        logger.debug("Token check got 401; refreshing access token")
        self._refresh(self._credentials)

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        if self._throttle is not None:
            self._throttle.wait()
        try:
            return self._session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise NetworkError("Network error", details={"url": url}, cause=exc) from exc


def encode_batch(
    batch_requests: Sequence[BatchRequest],
    authorization: str,
    *,
    boundary: str = BATCH_BOUNDARY,
) -> str:
    """Build the multipart/mixed body for ``batch_requests``."""
    chunks: list[str] = []
    for index, req in enumerate(batch_requests, start=1):
        lines = [
            f"--{boundary}",
            "Content-Type: application/http",
            f"Content-ID: <item-{index}>",
            "",
            f"{req.method.upper()} {req.url}",
            f"Authorization: {authorization}",
            "Content-Type: application/json; charset=UTF-8",
            "",
        ]
        if req.data is not None:
            lines.append(json.dumps(req.data))
        chunks.append(_CRLF.join(lines) + _CRLF)
    chunks.append(f"--{boundary}--{_CRLF}")
    return "".join(chunks)


def parse_batch_response(text: str, content_type: Optional[str] = None) -> list[ResponsePart]:
    """
    Split a multipart/mixed batch response into its parts.

    The boundary comes from the ``Content-Type`` header when given, otherwise
    from the first line of the body. The MIME structure is left to
    ``email.parser``.
    """
    boundary = None
    if content_type:
        envelope = Message()
        envelope["Content-Type"] = content_type
        boundary = envelope.get_boundary()
    if boundary is None:
        first_line = text.lstrip().split("\n", 1)[0].strip()
        if not first_line.startswith("--"):
            raise ApiError("Batch response has no multipart boundary")
        boundary = first_line[2:]

    header = f'Content-Type: multipart/mixed; boundary="{boundary}"{_CRLF}{_CRLF}'
    mime_response = Parser().parsestr(header + text.lstrip())
    if not mime_response.is_multipart():
        raise ApiError(
            "Batch response is not a multipart message",
            details={"boundary": boundary},
        )
    return [_parse_part(part.get_payload()) for part in mime_response.get_payload()]


def _parse_part(payload: str) -> ResponsePart:
    status_line, _, rest = payload.lstrip("\r\n").partition("\n")
    status_line = status_line.rstrip("\r")
    status_fields = status_line.split(" ", 2)
    try:
        if not status_fields[0].startswith("HTTP/"):
            raise ValueError(status_fields[0])
        status = int(status_fields[1])
    except (IndexError, ValueError) as exc:
        raise ApiError(
            "Malformed status line in batch response",
            details={"status_line": status_line},
            cause=exc,
        ) from exc

    message = Parser().parsestr(rest)
    headers = {name: value for name, value in message.items()}

    body = message.get_payload().strip()
    data: Optional[Any] = None
    if body:
        try:
            data = json.loads(body)
        except ValueError:
            data = body
    return ResponsePart(status=status, headers=headers, data=data)


def _response_error(response: requests.Response) -> Exception:
    message = None
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        message = payload["error"].get("message")
    info = HttpErrorInfo(
        status_code=response.status_code,
        reason=response.reason,
        message=message or response.text or None,
    )
    return map_http_error(info)
