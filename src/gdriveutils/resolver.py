"""Resolve loose identifiers (ids, names, paths, descriptors) to Drive ids."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from gdriveutils.controller import GoogleDriveController
from gdriveutils.controller.fields import GET_FIELDS
from gdriveutils.errors import (
    AmbiguousIdentifierError,
    IdentifierNotFoundError,
    InvalidArgumentError,
    InvalidIdentifierError,
)
from gdriveutils.models import (
    ROOT_ID,
    ByDescriptor,
    ById,
    ByPath,
    Identifier,
    IdentifierLike,
    RemoteObject,
    parse_identifier,
)
from gdriveutils.query import (
    DEFAULT_LIST_FIELDS,
    and_,
    name_clause,
    parent_clause,
    with_trashed_clause,
)

logger = logging.getLogger(__name__)


class IdentifierResolver:
    """
    Turns any identifier into exactly one Drive file id.

    Resolution never caches: every name lookup is a fresh ``files.list`` call.
    """

    def __init__(self, controller: GoogleDriveController) -> None:
        self._controller = controller

    # ----------------------------
    # Listing
    # ----------------------------
    def list_files(
        self,
        q: Optional[str] = None,
        *,
        fields: Optional[str] = None,
        trashed: Optional[bool] = False,
    ) -> list[RemoteObject]:
        """
        List objects matching ``q``.

        The ``trashed`` clause of ``q`` is replaced (or added) according to
        ``trashed``; ``fields`` defaults to ``files(name, id, mimeType)``.
        """
        query = with_trashed_clause(q, trashed)
        return self._controller.list_files(query, fields=fields or DEFAULT_LIST_FIELDS)

    def get_files(self, file_id: str, *, fields: str = GET_FIELDS) -> RemoteObject:
        if not file_id:
            raise InvalidArgumentError("File id not specified")
        return self._controller.get(file_id, fields=fields)

    def list_children(
        self,
        identifier: IdentifierLike,
        *,
        fields: Optional[str] = None,
    ) -> list[RemoteObject]:
        folder_id = self.resolve_id(identifier)
        return self.list_files(parent_clause(folder_id), fields=fields)

    # ----------------------------
    # Resolution
    # ----------------------------
    def resolve_id(self, identifier: IdentifierLike) -> str:
        """
        Resolve ``identifier`` to a file id.

        - None / empty descriptor -> "root"
        - bare string -> returned unchanged (trusted as an id)
        - "A/B/C" -> resolved segment by segment
        - descriptor -> file_id, or file_name scoped to an optional parent;
          a descriptor with only a parent resolves to that parent

        Raises:
            InvalidIdentifierError, IdentifierNotFoundError, AmbiguousIdentifierError
        """
        return self._resolve(parse_identifier(identifier, bare="id"))

    def get_file_id(self, identifier: IdentifierLike) -> str:
        """Like :meth:`resolve_id`, but a bare string is looked up as a name."""
        return self._resolve(parse_identifier(identifier, bare="name"))

    def get_file_name(self, file_id: str) -> str:
        return self.get_files(file_id, fields="name").name

    def get_mime(self, identifier: IdentifierLike) -> str:
        file_id = self.resolve_id(identifier)
        return self.get_files(file_id, fields="mimeType").mime_type

    def _resolve(self, identifier: Identifier) -> str:
        if isinstance(identifier, ById):
            return identifier.file_id
        if isinstance(identifier, ByPath):
            return self._resolve_path(identifier)
        if isinstance(identifier, ByDescriptor):
            return self._resolve_descriptor(identifier)
        raise InvalidIdentifierError(
            "Unsupported identifier variant",
            details={"type": type(identifier).__name__},
        )

    def _resolve_path(self, path: ByPath) -> str:
        if not path.segments:
            raise InvalidIdentifierError("Path identifier has no name segments")

        parent_id: Optional[str] = None
        for segment in path.segments:
            parent_id = self._find_unique(segment, parent_id, path=str(path))
        return parent_id  # type: ignore[return-value]

    def _resolve_descriptor(self, descriptor: ByDescriptor) -> str:
        if descriptor.file_id:
            return descriptor.file_id
        if descriptor.is_empty:
            return ROOT_ID

        parent_id: Optional[str] = None
        if descriptor.parent_id:
            parent_id = descriptor.parent_id
        elif descriptor.parent_name:
            parent_id = self.get_file_id(descriptor.parent_name)

        # A parent-only descriptor names the parent folder itself.
        if not descriptor.file_name:
            return parent_id  # type: ignore[return-value]

        return self._find_unique(descriptor.file_name, parent_id)

    def _find_unique(
        self,
        name: str,
        parent_id: Optional[str],
        *,
        path: Optional[str] = None,
    ) -> str:
        q = name_clause(name)
        if parent_id is not None:
            q = and_(q, parent_clause(parent_id))
        matches = self.list_files(q, fields="files(id)")
        found = check_unique(
            matches,
            details={"name": name, "parent_id": parent_id, "path": path},
        )
        logger.debug("Resolved %r (parent %s) -> %s", name, parent_id, found.file_id)
        return found.file_id


def check_unique(
    matches: Sequence[RemoteObject],
    *,
    details: Optional[dict] = None,
) -> RemoteObject:
    """
    Return the single element of ``matches``.

    Raises:
        IdentifierNotFoundError: when ``matches`` is empty.
        AmbiguousIdentifierError: when it holds more than one object.
    """
    details = {k: v for k, v in (details or {}).items() if v is not None}
    if not matches:
        raise IdentifierNotFoundError(
            "No files found matching identifiers specified",
            details=details,
        )
    if len(matches) > 1:
        raise AmbiguousIdentifierError(
            "Multiple files found. Consider specifying parent.",
            details={**details, "file_ids": [m.file_id for m in matches]},
        )
    return matches[0]
