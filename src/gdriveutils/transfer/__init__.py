"""Recursive upload/download walkers."""

from __future__ import annotations

from .download import Downloader
from .upload import Uploader

__all__ = ["Downloader", "Uploader"]
