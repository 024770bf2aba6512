"""Request/response records for Drive batch calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class BatchRequest:
    """
    One request inside a batch.

    Example:
        BatchRequest(
            url="https://www.googleapis.com/drive/v3/files?q=name%3D%27Reports%27",
            method="GET",
        )
    """

    url: str
    method: str = "GET"
    data: Optional[Any] = None


@dataclass(frozen=True)
class BatchResponse:
    """Parsed response part, paired with the request it answers."""

    request: BatchRequest
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    data: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300
