from __future__ import annotations

import logging
from contextlib import contextmanager

from ..core.constants import GENERIC_STORE_MESSAGE
from ..core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def store_guard(action: str):
    """Log database failures with full detail, re-raise them with a generic message."""
    try:
        yield
    except StoreUnavailableError as exc:
        logger.exception("store unavailable during %s", action)
        raise StoreUnavailableError(GENERIC_STORE_MESSAGE) from exc
