"""Public auth exports for gdriveutils."""

from __future__ import annotations

from .oauth_client import OAuthClient

__all__ = ["OAuthClient"]
