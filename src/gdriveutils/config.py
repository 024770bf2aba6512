"""Configuration for gdriveutils sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)
DEFAULT_BATCH_URL: str = "https://www.googleapis.com/batch/drive/v3"

ENV_PREFIX: str = "GDRIVEUTILS_"


@dataclass(frozen=True)
class DriveConfig:
    """
    Settings for one GoogleDriveUtils session.

    Attributes:
        client_secrets_file: OAuth client secrets JSON ("installed" app).
        token_file: Authorized-user token JSON; created/updated on refresh.
        scopes: OAuth scopes requested for the token.
        supports_all_drives: Send supportsAllDrives on every request.
        max_retries: Retries for rate-limit, network and 5xx failures.
        initial_delay_sec: First backoff delay; doubles on each retry.
        throttle_requests: Requests allowed per throttle interval (0 disables).
        throttle_interval_sec: Length of the throttle window.
        batch_url: Drive batch endpoint.
    """

    client_secrets_file: str = "credentials.json"
    token_file: str = "token.json"
    scopes: tuple[str, ...] = DEFAULT_SCOPES
    supports_all_drives: bool = True
    max_retries: int = 3
    initial_delay_sec: float = 1.0
    throttle_requests: int = 2
    throttle_interval_sec: float = 0.2
    batch_url: str = DEFAULT_BATCH_URL

    def __post_init__(self) -> None:
        for name in ("client_secrets_file", "token_file", "batch_url"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"DriveConfig.{name} must be a non-empty string")

        if not self.scopes or not all(isinstance(s, str) and s.strip() for s in self.scopes):
            raise ValueError("DriveConfig.scopes must be a non-empty sequence of strings")

        if self.max_retries < 0:
            raise ValueError("DriveConfig.max_retries must be >= 0")
        if self.initial_delay_sec < 0:
            raise ValueError("DriveConfig.initial_delay_sec must be >= 0")
        if self.throttle_requests < 0 or self.throttle_interval_sec < 0:
            raise ValueError("DriveConfig throttle settings must be >= 0")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DriveConfig":
        """
        Build a config from ``GDRIVEUTILS_*`` environment variables.

        Recognized: CLIENT_SECRETS, TOKEN_FILE, SCOPES (comma-separated),
        SUPPORTS_ALL_DRIVES, MAX_RETRIES, INITIAL_DELAY_SEC, THROTTLE_REQUESTS,
        THROTTLE_INTERVAL_SEC, BATCH_URL. Unset variables keep the defaults.
        """
        env = os.environ if environ is None else environ

        kwargs: dict[str, Any] = {}
        for env_name, (field_name, convert) in _ENV_FIELDS.items():
            raw = env.get(ENV_PREFIX + env_name, "").strip()
            if raw:
                kwargs[field_name] = convert(raw)

        return cls(**kwargs)


def _parse_bool(value: str) -> bool:
    return value.lower() in ("1", "true", "yes", "on")


def _parse_scopes(value: str) -> tuple[str, ...]:
    return tuple(s.strip() for s in value.split(",") if s.strip())


_ENV_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "CLIENT_SECRETS": ("client_secrets_file", str),
    "TOKEN_FILE": ("token_file", str),
    "SCOPES": ("scopes", _parse_scopes),
    "SUPPORTS_ALL_DRIVES": ("supports_all_drives", _parse_bool),
    "MAX_RETRIES": ("max_retries", int),
    "INITIAL_DELAY_SEC": ("initial_delay_sec", float),
    "THROTTLE_REQUESTS": ("throttle_requests", int),
    "THROTTLE_INTERVAL_SEC": ("throttle_interval_sec", float),
    "BATCH_URL": ("batch_url", str),
}
