"""Recursive download of Drive files and folders."""

from __future__ import annotations

import logging
import os

from gdriveutils.controller import GoogleDriveController
from gdriveutils.controller.fields import CHILD_LIST_FIELDS, GET_FIELDS
from gdriveutils.errors import AggregateTransferError, UnsupportedTypeError
from gdriveutils.models import IdentifierLike, RemoteObject, TransferFailure
from gdriveutils.query import parent_clause
from gdriveutils.resolver import IdentifierResolver
from gdriveutils.util.mime import is_google_app

from ._walk import ITEM_ERRORS, is_fatal, record_failure

logger = logging.getLogger(__name__)


class Downloader:
    """
    Download a Drive file, or a folder tree, into a local directory.

    Folders become local directories (existing ones are reused); files are
    written to ``<out_dir>/<name>``, replacing any local file of that name.
    """

    def __init__(self, controller: GoogleDriveController, resolver: IdentifierResolver) -> None:
        self._controller = controller
        self._resolver = resolver

    def download(self, identifier: IdentifierLike, out_dir: str = ".") -> None:
        """
        Raises:
            AggregateTransferError: if any item could not be downloaded.
        """
        file_id = self._resolver.resolve_id(identifier)
        root = self._resolver.get_files(file_id, fields=GET_FIELDS)

        out_dir = out_dir or "."
        os.makedirs(out_dir, exist_ok=True)

        failures = self._download_entry(root, out_dir)
        if failures:
            raise AggregateTransferError(
                failures,
                details={"file_id": file_id, "out_dir": out_dir},
            )

    def _download_entry(self, obj: RemoteObject, out_dir: str) -> list[TransferFailure]:
        target = os.path.join(out_dir, _local_name(obj.name))

        if obj.is_folder:
            try:
                os.makedirs(target, exist_ok=True)
                children = self._resolver.list_files(
                    parent_clause(obj.file_id),
                    fields=CHILD_LIST_FIELDS,
                )
            except ITEM_ERRORS as exc:
                if is_fatal(exc):
                    raise
                return [record_failure(target, exc, file_id=obj.file_id)]

            failures: list[TransferFailure] = []
            for child in children:
                failures.extend(self._download_entry(child, target))
            return failures

        try:
            self._download_file(obj, target)
        except ITEM_ERRORS as exc:
            if is_fatal(exc):
                raise
            return [record_failure(target, exc, file_id=obj.file_id)]
        return []

    def _download_file(self, obj: RemoteObject, target: str) -> None:
        if is_google_app(obj.mime_type):
            raise UnsupportedTypeError(
                "Google Workspace documents have no media to download",
                details={"file_id": obj.file_id, "mime_type": obj.mime_type},
            )
        self._controller.download_file(obj.file_id, target)
        logger.info("Downloaded %s", target)


def _local_name(name: str) -> str:
    for sep in (os.sep, os.altsep):
        if sep:
            name = name.replace(sep, "_")
    return name
