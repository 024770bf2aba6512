"""Public model exports for gdriveutils."""

from __future__ import annotations

from .batch import BatchRequest, BatchResponse
from .identifier import (
    PATH_SEPARATOR,
    ROOT_ID,
    ByDescriptor,
    ById,
    ByPath,
    Identifier,
    IdentifierLike,
    parse_identifier,
)
from .remote_object import RemoteObject
from .transfer import TransferFailure

__all__ = [
    "RemoteObject",
    "TransferFailure",
    "BatchRequest",
    "BatchResponse",
    "ById",
    "ByPath",
    "ByDescriptor",
    "Identifier",
    "IdentifierLike",
    "parse_identifier",
    "ROOT_ID",
    "PATH_SEPARATOR",
]
