from __future__ import annotations

import functools
import logging
import time
from typing import Callable, TypeVar

from django.conf import settings
from django.db import InterfaceError, OperationalError, connection

from apps.core.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS = (OperationalError, InterfaceError)


def with_store_retry(func: Callable[..., T]) -> Callable[..., T]:
    """
    Retry ``func`` on transient database errors, then surface StoreUnavailable.

    Core writes are transactional or guarded by preconditions, so replaying a failed
    attempt cannot double-apply. Inside an enclosing atomic block the transaction is
    already broken, so the failure is surfaced immediately.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> T:
        attempts = max(1, int(getattr(settings, "STORE_RETRY_ATTEMPTS", 3)))
        backoff = float(getattr(settings, "STORE_RETRY_BACKOFF_SECONDS", 0.05))
        for attempt in range(1, attempts + 1):
            try:
                return func(*args, **kwargs)
            except TRANSIENT_ERRORS as exc:
                if connection.in_atomic_block or attempt == attempts:
                    logger.error(
                        "Store unavailable in %s after %s attempt(s): %s",
                        func.__qualname__,
                        attempt,
                        exc,
                    )
                    raise StoreUnavailable() from exc
                logger.warning(
                    "Transient store error in %s (attempt %s/%s): %s",
                    func.__qualname__,
                    attempt,
                    attempts,
                    exc,
                )
                if backoff > 0:
                    time.sleep(backoff * (2 ** (attempt - 1)))
        raise StoreUnavailable()  # pragma: no cover - loop always returns or raises

    return wrapper
