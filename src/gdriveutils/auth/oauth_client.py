"""OAuth credential handling for gdriveutils."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from gdriveutils.config import DriveConfig
from gdriveutils.errors import AuthError

logger = logging.getLogger(__name__)


class OAuthClient:
    """Load, refresh and persist OAuth credentials; build the Drive service."""

    def __init__(self, config: DriveConfig) -> None:
        self._config = config

    @property
    def config(self) -> DriveConfig:
        return self._config

    def get_credentials(self, ensure_valid: bool = True):
        """
        Return OAuth credentials for the configured scopes.

        Args:
            ensure_valid: If True, refresh an expired token, and run the
                installed-app flow when no usable token exists.

        Returns:
            google.oauth2.credentials.Credentials

        Raises:
            AuthError: on load/refresh/flow failures.
        """
        try:
            from google.oauth2.credentials import Credentials
            from google_auth_oauthlib.flow import InstalledAppFlow
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth and google-auth-oauthlib"},
                cause=exc,
            ) from exc

        token_file = self._config.token_file
        scopes = list(self._config.scopes)

        if os.path.exists(token_file):
            try:
                creds = Credentials.from_authorized_user_file(token_file, scopes=scopes)
            except Exception as exc:
                raise AuthError(
                    "Failed to load token_file",
                    details={"token_file": token_file},
                    cause=exc,
                ) from exc

            if not ensure_valid:
                return creds

            if not creds.valid and creds.refresh_token:
                self.refresh_credentials(creds)

            if creds.valid:
                return creds

        client_secrets = self._config.client_secrets_file
        logger.info("No usable token in %s; starting OAuth flow", token_file)
        try:
            flow = InstalledAppFlow.from_client_secrets_file(client_secrets, scopes=scopes)
            creds = flow.run_local_server(port=0)
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={
                    "client_secrets_file": client_secrets,
                    "token_file": token_file,
                },
                cause=exc,
            ) from exc
        self._save_credentials(creds)
        return creds

    def refresh_credentials(self, creds: Any) -> None:
        """Refresh ``creds`` in place and write them back to the token file."""
        try:
            from google.auth.transport.requests import Request
        except Exception as exc:  # pragma: no cover
            raise AuthError("google-auth is not available", cause=exc) from exc

        try:
            creds.refresh(Request())
        except Exception as exc:
            raise AuthError(
                "Failed to refresh OAuth credentials",
                details={"token_file": self._config.token_file},
                cause=exc,
            ) from exc
        logger.debug("Refreshed OAuth access token")
        self._save_credentials(creds)

    def build_drive_service(self, creds: Optional[Any] = None):
        """
        Build a Drive v3 service resource.

        Returns:
            googleapiclient.discovery.Resource
        """
        try:
            from googleapiclient.discovery import build
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-api-python-client is not available",
                details={"hint": "Install google-api-python-client"},
                cause=exc,
            ) from exc

        if creds is None:
            creds = self.get_credentials()
        try:
            return build("drive", "v3", credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc

    def _save_credentials(self, creds: Any) -> None:
        token_file = self._config.token_file
        token_dir = os.path.dirname(token_file)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)

        try:
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except Exception as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
