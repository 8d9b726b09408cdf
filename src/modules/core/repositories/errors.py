"""Storage-boundary errors.

Repositories translate every ``django.db.DatabaseError`` into a
``StorageError`` before it leaves the persistence layer, so the Service
Layer only ever sees one closed set of failure kinds:

- ``UNIQUE_VIOLATION``: a unique constraint rejected the write.  ``detail``
  carries the driver's diagnostic text (e.g. ``Key (slug)=(x) already exists.``).
- ``OTHER``: any other driver failure (connection loss, timeouts, bad SQL...).
"""

from __future__ import annotations

import enum
from contextlib import contextmanager
from typing import Iterator, Optional

from django.db import DatabaseError, IntegrityError

UNIQUE_VIOLATION_SQLSTATE = "23505"
MYSQL_DUPLICATE_ENTRY = 1062
SQLITE_UNIQUE_MESSAGE = "UNIQUE constraint failed"


class StorageErrorKind(enum.Enum):
    UNIQUE_VIOLATION = "unique_violation"
    OTHER = "other"


class StorageError(Exception):
    """A failure raised by the storage engine, already classified."""

    def __init__(self, kind: StorageErrorKind, detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    @property
    def is_unique_violation(self) -> bool:
        return self.kind is StorageErrorKind.UNIQUE_VIOLATION


def _sqlstate(exc: DatabaseError) -> Optional[str]:
    # psycopg 3 exposes ``sqlstate``; psycopg2 exposes ``pgcode``.
    cause = exc.__cause__
    return getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)


def _driver_code(exc: DatabaseError) -> Optional[int]:
    args = getattr(exc.__cause__, "args", None) or exc.args
    if args and isinstance(args[0], int):
        return args[0]
    return None


def is_unique_violation(exc: DatabaseError) -> bool:
    """Return ``True`` when *exc* signals a unique-constraint violation."""
    if not isinstance(exc, IntegrityError):
        return False
    if _sqlstate(exc) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    if _driver_code(exc) == MYSQL_DUPLICATE_ENTRY:
        return True
    return SQLITE_UNIQUE_MESSAGE in str(exc)


def error_detail(exc: DatabaseError) -> str:
    """Best human-readable detail the driver offers for *exc*."""
    diag = getattr(exc.__cause__, "diag", None)
    detail = getattr(diag, "message_detail", None)
    return detail or str(exc)


def translate(exc: DatabaseError) -> StorageError:
    """Map a Django database error onto the ``StorageError`` variant."""
    kind = (
        StorageErrorKind.UNIQUE_VIOLATION
        if is_unique_violation(exc)
        else StorageErrorKind.OTHER
    )
    return StorageError(kind, error_detail(exc))


@contextmanager
def storage_errors() -> Iterator[None]:
    """Re-raise any ``DatabaseError`` inside the block as ``StorageError``."""
    try:
        yield
    except DatabaseError as exc:
        raise translate(exc) from exc
