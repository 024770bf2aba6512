"""Data model for Drive items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from gdriveutils.util.mime import is_folder


@dataclass(slots=True)
class RemoteObject:
    """
    A file or folder on Drive.

    Notes:
        - Only the fields requested from the API are populated; the others keep
          their defaults (e.g. a ``fields="parents"`` fetch leaves ``name`` empty).
        - (name, parent) is not unique on Drive; only ``file_id`` is.
    """

    file_id: str
    name: str = ""
    mime_type: str = ""
    parents: list[str] = field(default_factory=list)

    trashed: bool = False
    size: Optional[int] = None

    @property
    def is_folder(self) -> bool:
        return is_folder(self.mime_type)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemoteObject":
        """Build from a Drive v3 ``files`` resource dict."""
        file_id = data.get("id")
        name = data.get("name", "")
        mime_type = data.get("mimeType", "")
        parents = data.get("parents", []) or []

        size = None
        if isinstance(data.get("size"), str) and data["size"].isdigit():
            size = int(data["size"])
        elif isinstance(data.get("size"), int):
            size = data["size"]

        return cls(
            file_id=file_id if isinstance(file_id, str) else "",
            name=name if isinstance(name, str) else "",
            mime_type=mime_type if isinstance(mime_type, str) else "",
            parents=list(parents) if isinstance(parents, list) else [],
            trashed=bool(data.get("trashed", False)),
            size=size,
        )
