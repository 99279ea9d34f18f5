from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("liftlog.domain")


class LiftLogError(Exception):
    """Base class for errors surfaced to callers of the service layer."""


class Unauthenticated(LiftLogError):
    """No authenticated principal, or it vanished mid-resolution."""


class ProfileIncomplete(LiftLogError):
    """The principal exists but has no usable email address."""


class StorageUnavailable(LiftLogError):
    """The database could not complete a read or write."""


class InvalidDateInput(LiftLogError, ValueError):
    """Malformed calendar date or unknown time zone."""


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        logger.warning(
            "domain_event event=storage_failure operation=%s error=%s",
            operation,
            type(exc).__name__,
        )
        raise StorageUnavailable(f"{operation} failed") from exc
