from .mime import (
    FOLDER_MIME,
    MIME_TYPES_BY_EXT,
    is_folder,
    is_google_app,
    mime_type_for_path,
)
from .throttle import Throttle

__all__ = [
    "FOLDER_MIME",
    "MIME_TYPES_BY_EXT",
    "is_folder",
    "is_google_app",
    "mime_type_for_path",
    "Throttle",
]
