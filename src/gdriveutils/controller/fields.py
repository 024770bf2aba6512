"""Field definitions for Google Drive API responses."""

from __future__ import annotations

# files.get default (name, id, mimeType for every lookup)
GET_FIELDS: str = "name, id, mimeType"

# Returned by create/update calls.
FILE_FIELDS: str = "id, name, mimeType, parents"

# Child listing used by the download walker.
CHILD_LIST_FIELDS: str = "nextPageToken, files(name, id, mimeType)"
