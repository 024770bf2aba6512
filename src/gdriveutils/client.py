"""GoogleDriveUtils: the public entry point for Drive file operations."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from gdriveutils.auth import OAuthClient
from gdriveutils.batch import BatchExecutor
from gdriveutils.config import DriveConfig
from gdriveutils.controller import GoogleDriveController
from gdriveutils.controller.fields import GET_FIELDS
from gdriveutils.errors import InvalidArgumentError, InvalidStateError
from gdriveutils.models import BatchRequest, BatchResponse, IdentifierLike, RemoteObject
from gdriveutils.mutators import DriveMutator
from gdriveutils.resolver import IdentifierResolver
from gdriveutils.transfer import Downloader, Uploader
from gdriveutils.util.throttle import Throttle


class GoogleDriveUtils:
    """
    Path-and-name oriented helpers over the Drive v3 API.

    Identifiers accepted by most methods:
        - None: the root of My Drive
        - "<file id>": used as-is
        - "Folder/Sub/file.txt": resolved one name at a time from any parent
        - {"file_name": ..., "parent_id" | "parent_name": ...} or {"file_id": ...}

    Build one with :meth:`open` (OAuth with a DriveConfig) or
    :meth:`from_controller` (an injected controller, e.g. in tests).
    """

    def __init__(
        self,
        controller: GoogleDriveController,
        *,
        oauth_client: Optional[OAuthClient] = None,
        config: Optional[DriveConfig] = None,
    ) -> None:
        self._controller = controller
        self._oauth_client = oauth_client
        self._config = config
        self._resolver = IdentifierResolver(controller)
        self._uploader = Uploader(controller, self._resolver)
        self._downloader = Downloader(controller, self._resolver)
        self._mutator = DriveMutator(controller, self._resolver)

    @classmethod
    def open(cls, config: Optional[DriveConfig] = None) -> "GoogleDriveUtils":
        """
        Authenticate and return a ready client.

        Runs the installed-app OAuth flow when ``config.token_file`` holds no
        usable token.

        Raises:
            AuthError: if credentials cannot be loaded, refreshed or obtained.
        """
        config = config or DriveConfig()
        oauth_client = OAuthClient(config)
        controller = GoogleDriveController.from_config(config, oauth_client=oauth_client)
        return cls(controller, oauth_client=oauth_client, config=config)

    @classmethod
    def from_controller(cls, controller: GoogleDriveController) -> "GoogleDriveUtils":
        """Create a client around an injected controller (useful for tests)."""
        return cls(controller)

    @property
    def controller(self) -> GoogleDriveController:
        return self._controller

    # ----------------------------
    # Lookup
    # ----------------------------
    def resolve_id(self, identifier: IdentifierLike = None) -> str:
        return self._resolver.resolve_id(identifier)

    def list_files(
        self,
        q: Optional[str] = None,
        *,
        fields: Optional[str] = None,
        trashed: Optional[bool] = False,
    ) -> list[RemoteObject]:
        """
        Run a raw Drive query, following every page.

        Args:
            trashed: False (default) lists live objects, True only trashed
                ones, None leaves ``q`` without a trashed clause.
        """
        return self._resolver.list_files(q, fields=fields, trashed=trashed)

    def get_files(self, file_id: str, *, fields: str = GET_FIELDS) -> RemoteObject:
        return self._resolver.get_files(file_id, fields=fields)

    def get_file_id(self, identifier: IdentifierLike) -> str:
        """Resolve ``identifier``; a bare string is treated as a file name."""
        return self._resolver.get_file_id(identifier)

    def get_file_name(self, file_id: str) -> str:
        return self._resolver.get_file_name(file_id)

    def get_mime(self, identifier: IdentifierLike) -> str:
        return self._resolver.get_mime(identifier)

    def list_children(
        self,
        identifier: IdentifierLike = None,
        *,
        fields: Optional[str] = None,
    ) -> list[RemoteObject]:
        """List the live children of a folder (default: root)."""
        return self._resolver.list_children(identifier, fields=fields)

    def update_files(self, file_id: str, **params: Any) -> Any:
        """
        Raw ``files.update`` for ``file_id``; ``params`` go to the API unchanged.

        Example:
            drive.update_files(file_id, body={"name": "New Name"}, fields="id, name")
        """
        if not file_id:
            raise InvalidArgumentError("File id not specified")
        return self._controller.call("files", "update", fileId=file_id, **params)

    # ----------------------------
    # Transfers
    # ----------------------------
    def make_folder(
        self,
        name: str,
        parent: IdentifierLike = None,
        *,
        overwrite: bool = False,
    ) -> str:
        return self._uploader.make_folder(name, parent, overwrite=overwrite)

    def upload(
        self,
        local_path: str,
        parent: IdentifierLike = None,
        *,
        overwrite: bool = False,
    ) -> str:
        """
        Upload a local file or directory tree; returns the new top-level id.

        Raises:
            AggregateTransferError: after the walk, if any descendant failed.
        """
        return self._uploader.upload(local_path, parent, overwrite=overwrite)

    def download(self, identifier: IdentifierLike, out_dir: str = ".") -> None:
        """
        Download a file, or a folder tree, into ``out_dir``.

        Raises:
            AggregateTransferError: after the walk, if any item failed.
        """
        self._downloader.download(identifier, out_dir)

    # ----------------------------
    # Mutations
    # ----------------------------
    def rename(self, identifier: IdentifierLike, new_name: str) -> RemoteObject:
        return self._mutator.rename(identifier, new_name)

    def move(self, identifier: IdentifierLike, new_parent: IdentifierLike = None) -> RemoteObject:
        return self._mutator.move(identifier, new_parent)

    def delete(self, identifier: IdentifierLike) -> None:
        self._mutator.delete(identifier)

    # ----------------------------
    # Batch
    # ----------------------------
    def batch(self, requests: Sequence[BatchRequest]) -> list[BatchResponse]:
        """
        Send up to 100 raw API requests in one multipart call.

        Raises:
            InvalidStateError: if the client has no OAuth credentials (built
                around a pre-made service).
        """
        if not requests:
            return []
        executor = self._batch_executor()
        return executor.execute(requests)

    def _batch_executor(self) -> BatchExecutor:
        credentials = self._controller.credentials
        if credentials is None:
            raise InvalidStateError("Batch requests need OAuth credentials. Use open().")

        refresh = self._oauth_client.refresh_credentials if self._oauth_client else None
        if self._config is None:
            return BatchExecutor(credentials, refresh=refresh)
        return BatchExecutor(
            credentials,
            refresh=refresh,
            batch_url=self._config.batch_url,
            throttle=Throttle(self._config.throttle_requests, self._config.throttle_interval_sec),
        )
