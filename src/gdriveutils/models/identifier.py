"""Identifier variants accepted wherever a Drive object is referenced."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Union

from gdriveutils.errors import InvalidIdentifierError

ROOT_ID: str = "root"
PATH_SEPARATOR: str = "/"

_DESCRIPTOR_KEYS: dict[str, str] = {
    "file_id": "file_id",
    "file_name": "file_name",
    "parent_id": "parent_id",
    "parent_name": "parent_name",
    # camelCase spellings used by the Drive API itself
    "fileId": "file_id",
    "fileName": "file_name",
    "parentId": "parent_id",
    "parentName": "parent_name",
}


@dataclass(frozen=True)
class ById:
    """A Drive file id, trusted as-is."""

    file_id: str


@dataclass(frozen=True)
class ByPath:
    """Name segments resolved root-to-leaf, e.g. ``"Reports/2024/summary.csv"``."""

    segments: tuple[str, ...]

    @classmethod
    def from_string(cls, path: str) -> "ByPath":
        segments = tuple(s for s in path.split(PATH_SEPARATOR) if s)
        if not segments:
            raise InvalidIdentifierError(
                "Path identifier has no name segments",
                details={"path": path},
            )
        return cls(segments)

    def __str__(self) -> str:
        return PATH_SEPARATOR.join(self.segments)


@dataclass(frozen=True)
class ByDescriptor:
    """
    Structured identifier.

    ``file_id`` wins over ``file_name`` and ``parent_id`` wins over
    ``parent_name`` when both are set. A descriptor with no values (keys set to
    None count as absent) refers to the root; one holding only a parent refers
    to that parent. Empty strings are rejected.
    """

    file_id: Optional[str] = None
    file_name: Optional[str] = None
    parent_id: Optional[str] = None
    parent_name: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ByDescriptor":
        kwargs: dict[str, Optional[str]] = {}
        for key, value in mapping.items():
            field_name = _DESCRIPTOR_KEYS.get(key)
            if field_name is None:
                raise InvalidIdentifierError(
                    f"Invalid identifier key: {key!r}",
                    details={"key": key, "allowed": sorted(set(_DESCRIPTOR_KEYS.values()))},
                )
            if value is not None and not isinstance(value, str):
                raise InvalidIdentifierError(
                    f"Identifier value for {key!r} must be a string",
                    details={"key": key, "type": type(value).__name__},
                )
            if value is not None and not value.strip():
                raise InvalidIdentifierError(
                    f"Identifier value for {key!r} must not be empty",
                    details={"key": key},
                )
            kwargs[field_name] = value
        return cls(**kwargs)

    @property
    def has_parent(self) -> bool:
        return bool(self.parent_id or self.parent_name)

    @property
    def is_empty(self) -> bool:
        return not (self.file_id or self.file_name or self.has_parent)


Identifier = Union[ById, ByPath, ByDescriptor]
IdentifierLike = Union[Identifier, str, Mapping[str, Any], None]


def parse_identifier(
    value: IdentifierLike,
    *,
    bare: Literal["id", "name"] = "id",
) -> Identifier:
    """
    Turn a loose identifier into one of the variants.

    Args:
        value: A variant, a string, a descriptor mapping, or None (root).
        bare: How to read a string without a path separator: as a file id
            (``resolve_id``) or as a file name (``get_file_id``).

    Raises:
        InvalidIdentifierError: for unknown descriptor keys, empty strings,
            or unsupported types.
    """
    if value is None:
        return ByDescriptor()
    if isinstance(value, (ById, ByPath, ByDescriptor)):
        return value
    if isinstance(value, str):
        if not value.strip():
            raise InvalidIdentifierError("Identifier string must not be empty")
        if PATH_SEPARATOR in value:
            return ByPath.from_string(value)
        if bare == "name":
            return ByPath((value,))
        return ById(value)
    if isinstance(value, Mapping):
        return ByDescriptor.from_mapping(value)

    raise InvalidIdentifierError(
        "Identifier must be a string, a mapping or None",
        details={"type": type(value).__name__},
    )
