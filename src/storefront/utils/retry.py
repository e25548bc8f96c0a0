"""Retry helper for idempotent store operations."""

import time
from functools import wraps

import structlog
from sqlalchemy.exc import OperationalError

logger = structlog.get_logger(__name__)

RETRYABLE_ERRORS = (OperationalError, ConnectionError, TimeoutError)


def retry_on_failure(max_attempts=3, backoff=0.05, retry_on=RETRYABLE_ERRORS):
    """Retry ``fn`` on transient store errors with linear backoff.

    Only wrap operations that are safe to repeat.
    """

    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            attempt = 0
            while True:
                attempt += 1
                try:
                    return fn(*args, **kwargs)
                except retry_on as exc:
                    if attempt >= max_attempts:
                        raise
                    logger.warning(
                        "Retrying after transient failure",
                        operation=fn.__name__,
                        attempt=attempt,
                        error=str(exc),
                    )
                    time.sleep(backoff * attempt)

        return wrapper

    return deco
