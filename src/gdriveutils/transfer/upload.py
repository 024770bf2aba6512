"""Recursive upload of local files and directories."""

from __future__ import annotations

import logging
import os

from gdriveutils.controller import GoogleDriveController
from gdriveutils.errors import (
    AggregateTransferError,
    ConflictError,
    InvalidArgumentError,
    UnsupportedTypeError,
)
from gdriveutils.models import IdentifierLike, RemoteObject, TransferFailure
from gdriveutils.query import and_, mime_type_clause, name_clause, parent_clause
from gdriveutils.resolver import IdentifierResolver
from gdriveutils.util.mime import FOLDER_MIME, mime_type_for_path

from ._walk import ITEM_ERRORS, is_fatal, record_failure

logger = logging.getLogger(__name__)


class Uploader:
    """
    Upload a local file or directory tree under a Drive folder.

    Children are uploaded one at a time in sorted name order. A failing child
    is recorded and its siblings still run; all failures are raised together
    as one AggregateTransferError once the walk is done.

    Overwrite policy: an existing object with the same name, type and parent
    is deleted and then created again. Overwriting a folder deletes the whole
    remote folder first, so children that exist only on Drive are gone
    afterwards; the result mirrors the local tree. Without ``overwrite`` it is
    a ConflictError for that item.
    """

    def __init__(self, controller: GoogleDriveController, resolver: IdentifierResolver) -> None:
        self._controller = controller
        self._resolver = resolver

    def upload(
        self,
        local_path: str,
        parent: IdentifierLike = None,
        *,
        overwrite: bool = False,
    ) -> str:
        """
        Upload ``local_path`` (file or directory) under ``parent``.

        Returns:
            Id of the created top-level file/folder.

        Raises:
            InvalidArgumentError: if ``local_path`` does not exist.
            UnsupportedTypeError: if a top-level file has no mapped MIME type.
            AggregateTransferError: if any descendant failed; ``details["file_id"]``
                still holds the id of the created top-level folder.
        """
        if not local_path or not os.path.exists(local_path):
            raise InvalidArgumentError(
                "Local path does not exist",
                details={"local_path": local_path},
            )

        parent_id = self._resolver.resolve_id(parent)
        path = os.path.normpath(local_path)
        file_id, failures = self._upload_entry(path, parent_id, overwrite)
        if failures:
            raise AggregateTransferError(
                failures,
                details={"file_id": file_id, "local_path": path},
            )
        return file_id

    def make_folder(
        self,
        name: str,
        parent: IdentifierLike = None,
        *,
        overwrite: bool = False,
    ) -> str:
        """Create a folder named ``name`` under ``parent`` (default: root)."""
        if not name:
            raise InvalidArgumentError("Folder name must be a non-empty string")
        parent_id = self._resolver.resolve_id(parent)
        return self._create_folder(name, parent_id, overwrite).file_id

    # ----------------------------
    # Internals
    # ----------------------------
    def _upload_entry(
        self,
        path: str,
        parent_id: str,
        overwrite: bool,
    ) -> tuple[str, list[TransferFailure]]:
        if os.path.isdir(path):
            return self._upload_dir(path, parent_id, overwrite)
        if os.path.isfile(path):
            return self._upload_file(path, parent_id, overwrite), []
        raise UnsupportedTypeError(
            "Not a regular file or directory",
            details={"local_path": path},
        )

    def _upload_dir(
        self,
        path: str,
        parent_id: str,
        overwrite: bool,
    ) -> tuple[str, list[TransferFailure]]:
        folder = self._create_folder(os.path.basename(path), parent_id, overwrite)

        failures: list[TransferFailure] = []
        for child_name in sorted(os.listdir(path)):
            child_path = os.path.join(path, child_name)
            try:
                _, child_failures = self._upload_entry(child_path, folder.file_id, overwrite)
            except ITEM_ERRORS as exc:
                if is_fatal(exc):
                    raise
                failures.append(record_failure(child_path, exc))
                continue
            failures.extend(child_failures)

        return folder.file_id, failures

    def _upload_file(self, path: str, parent_id: str, overwrite: bool) -> str:
        mime_type = mime_type_for_path(path)
        name = os.path.basename(path)
        self._ensure_absent(name, mime_type, parent_id, overwrite)

        created = self._controller.upload_file(path, parent_id, mime_type=mime_type, name=name)
        logger.info("%s created (%s)", name, created.file_id)
        return created.file_id

    def _create_folder(self, name: str, parent_id: str, overwrite: bool) -> RemoteObject:
        self._ensure_absent(name, FOLDER_MIME, parent_id, overwrite)
        folder = self._controller.create_folder(name, parent_id)
        logger.info("Folder %s created (%s)", name, folder.file_id)
        return folder

    def _ensure_absent(
        self,
        name: str,
        mime_type: str,
        parent_id: str,
        overwrite: bool,
    ) -> None:
        q = and_(name_clause(name), mime_type_clause(mime_type), parent_clause(parent_id))
        existing = self._resolver.list_files(q, fields="files(id)")
        if not existing:
            return
        if not overwrite:
            raise ConflictError(
                "File already exists in drive",
                details={
                    "name": name,
                    "parent_id": parent_id,
                    "file_ids": [obj.file_id for obj in existing],
                },
            )
        for obj in existing:
            self._controller.delete(obj.file_id)
            logger.info("Deleted existing %s (%s) before overwrite", name, obj.file_id)
