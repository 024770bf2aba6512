from __future__ import annotations

import logging
from typing import Optional

from gdriveutils.errors import AuthError, GDriveUtilsError, IdentifierError
from gdriveutils.models import TransferFailure

logger = logging.getLogger(__name__)

# Errors a walk catches per item; anything else propagates unchanged.
ITEM_ERRORS: tuple[type[BaseException], ...] = (GDriveUtilsError, OSError)


def is_fatal(exc: BaseException) -> bool:
    """Failures that abort a whole walk instead of being recorded per item."""
    return isinstance(exc, (AuthError, IdentifierError))


def record_failure(
    path: str,
    exc: BaseException,
    *,
    file_id: Optional[str] = None,
) -> TransferFailure:
    failure = TransferFailure.from_exception(path, exc, file_id=file_id)
    logger.warning("Transfer of %s failed: %s", path, failure.error)
    return failure
