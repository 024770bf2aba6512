from __future__ import annotations

import os

from gdriveutils.errors import UnsupportedTypeError

FOLDER_MIME: str = "application/vnd.google-apps.folder"

# Upload types by lower-case file extension. Anything not listed is rejected.
MIME_TYPES_BY_EXT: dict[str, str] = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "xlsm": "application/vnd.ms-excel.sheet.macroEnabled.12",
    "xls": "application/vnd.ms-excel",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "doc": "application/msword",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "pptm": "application/vnd.ms-powerpoint.presentation.macroEnabled.12",
    "ppt": "application/vnd.ms-powerpoint",
    "txt": "text/plain",
    "md": "text/markdown",
    "html": "text/html",
    "htm": "text/html",
    "csv": "text/csv",
    "xml": "application/xml",
    "json": "application/json",
    "pdf": "application/pdf",
    "zip": "application/zip",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "svg": "image/svg+xml",
}

GOOGLE_APP_PREFIX: str = "application/vnd.google-apps."


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def is_google_app(mime_type: str) -> bool:
    """
    Returns True for Google Workspace types (Docs, Sheets, Slides, ...).

    These have no binary content and cannot be fetched with a media download.
    Folders are Google apps types too.
    """
    return mime_type.startswith(GOOGLE_APP_PREFIX)


def mime_type_for_path(path: str) -> str:
    """
    Look up the upload MIME type of a local file by its extension.

    Raises:
        UnsupportedTypeError: if the file has no extension or it is not mapped.
    """
    _, ext = os.path.splitext(os.path.basename(path))
    ext = ext[1:].lower()
    if not ext:
        raise UnsupportedTypeError(
            "File to be uploaded has no file extension",
            details={"local_path": path},
        )
    mime_type = MIME_TYPES_BY_EXT.get(ext)
    if mime_type is None:
        raise UnsupportedTypeError(
            f"No MIME type mapped for extension '.{ext}'",
            details={"local_path": path, "extension": ext},
        )
    return mime_type
