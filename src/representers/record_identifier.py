"""
DOM and URL identifiers for record-backed models.

Works with SQLAlchemy mapped instances (the key is the instance identity,
so a record that has not been flushed has no key) and with any other object
exposing an ``id`` attribute.

    >>> dom_id(book)              # persisted Book with id 5
    'book_5'
    >>> dom_id(Book())            # not yet flushed
    'new_book'
    >>> dom_id(book, "edit")
    'edit_book_5'
    >>> dom_class(book, "edit")
    'edit_book'

Tags:
    sqlalchemy, dom-id, records, representers

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect as sa_inspect

from representers.paths import underscore

JOIN = "_"
NEW = "new"


def record_key(record: Any) -> tuple[Any, ...] | None:
    """Primary key of a record as a tuple, or None when it has none yet."""
    state = sa_inspect(record, raiseerr=False)
    if state is not None and hasattr(state, "identity"):
        return state.identity
    key = getattr(record, "id", None)
    return None if key is None else (key,)


def to_param(record: Any) -> str | None:
    """URL parameter for a record: its key joined with ``-``."""
    key = record_key(record)
    if key is None or all(part is None for part in key):
        return None
    return "-".join(str(part) for part in key)


def dom_class(record_or_class: Any, prefix: str | None = None) -> str:
    """Singular underscored class name, optionally prefixed."""
    cls = record_or_class if isinstance(record_or_class, type) else type(record_or_class)
    singular = underscore(cls.__name__)
    return f"{prefix}{JOIN}{singular}" if prefix else singular


def dom_id(record: Any, prefix: str | None = None) -> str:
    """Stable DOM element id derived from a record's class and key."""
    key = record_key(record)
    if key is None:
        return dom_class(record, prefix or NEW)
    record_id = JOIN.join(str(part) for part in key)
    return f"{dom_class(record, prefix)}{JOIN}{record_id}"


class RecordMixin:
    """Adds ``to_param`` to a declarative model.

    Example:
        class Book(RecordMixin, Base):
            __tablename__ = "books"
            id: Mapped[int] = mapped_column(primary_key=True)
    """

    @property
    def to_param(self) -> str | None:
        return to_param(self)


__all__ = [
    "record_key",
    "to_param",
    "dom_class",
    "dom_id",
    "RecordMixin",
]
