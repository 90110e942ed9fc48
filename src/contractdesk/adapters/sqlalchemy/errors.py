"""Translation of SQLAlchemy exceptions into persistence port errors."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError

from contractdesk.domain.ports.persistence import (
    PersistenceError,
    StorageUnavailableError,
    UniqueViolationError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

_UNIQUE_MARKERS = ("unique", "duplicate")


@contextmanager
def translated_errors() -> Iterator[None]:
    """Re-raise driver errors as port errors, keeping the original as cause."""

    try:
        yield
    except IntegrityError as exc:
        detail = str(exc.orig)
        if any(marker in detail.lower() for marker in _UNIQUE_MARKERS):
            raise UniqueViolationError(detail) from exc
        raise PersistenceError(detail) from exc
    except (OperationalError, InterfaceError) as exc:
        raise StorageUnavailableError(str(exc.orig)) from exc
    except DBAPIError as exc:
        raise PersistenceError(str(exc.orig)) from exc
