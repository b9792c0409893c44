"""Translate driver and connection failures into StoreUnavailableError."""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError

from medme_security.application.exceptions import StoreUnavailableError


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, OSError) as e:
        raise StoreUnavailableError(f"Audit store {operation} failed: {e}") from e
