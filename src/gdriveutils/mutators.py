"""Rename, move and delete Drive objects by any identifier."""

from __future__ import annotations

import logging

from gdriveutils.controller import GoogleDriveController
from gdriveutils.errors import InvalidArgumentError
from gdriveutils.models import IdentifierLike, RemoteObject
from gdriveutils.resolver import IdentifierResolver

logger = logging.getLogger(__name__)


class DriveMutator:
    def __init__(self, controller: GoogleDriveController, resolver: IdentifierResolver) -> None:
        self._controller = controller
        self._resolver = resolver

    def rename(self, identifier: IdentifierLike, new_name: str) -> RemoteObject:
        if not new_name:
            raise InvalidArgumentError("new_name must be a non-empty string")
        file_id = self._resolver.resolve_id(identifier)
        updated = self._controller.update(file_id, body={"name": new_name})
        logger.info("Renamed %s to %s", file_id, new_name)
        return updated

    def move(self, identifier: IdentifierLike, new_parent: IdentifierLike = None) -> RemoteObject:
        """
        Reparent an object under ``new_parent`` (default: root).

        Every current parent is removed in the same update call, so the object
        ends up with exactly one parent.
        """
        file_id = self._resolver.resolve_id(identifier)
        current = self._resolver.get_files(file_id, fields="parents")
        new_parent_id = self._resolver.resolve_id(new_parent)

        old_parents = [p for p in current.parents if p != new_parent_id]
        updated = self._controller.update(
            file_id,
            add_parents=new_parent_id,
            remove_parents=",".join(old_parents) or None,
        )
        logger.info("Moved %s to %s", file_id, new_parent_id)
        return updated

    def delete(self, identifier: IdentifierLike) -> None:
        """Permanently delete an object; Drive removes a folder's descendants too."""
        file_id = self._resolver.resolve_id(identifier)
        self._controller.delete(file_id)
        logger.info("%s has been deleted", file_id)
