"""
Filter chains for model readers.

A filter is any single-argument callable.  It is named either by a string,
looked up on the representer instance when the reader is accessed, or given
directly as a callable.  Looking names up on the instance means a filter may
be a representer method with access to ``self.controller`` and therefore to
per-request state.

Filters run in the order they are declared; the first filter sees the raw
model value and the last one produces the reader's result::

    filter_through=["textilize", "h"]   ->   h(textilize(value))

Tags:
    filters, composition, representers

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Union

from representers.errors import DefinitionError

Filter = Union[str, Callable[[Any], Any]]


def normalize_filters(filter_through: Filter | Iterable[Filter] | None) -> tuple[Filter, ...]:
    """Turn a ``filter_through`` option into a tuple in declared order."""
    if filter_through is None:
        return ()
    if isinstance(filter_through, str) or callable(filter_through):
        filters: tuple[Any, ...] = (filter_through,)
    else:
        try:
            filters = tuple(filter_through)
        except TypeError as exc:
            raise DefinitionError(
                f"filter_through must be a name, a callable or a sequence of them, "
                f"got {type(filter_through).__name__}",
                cause=exc,
            ) from exc

    for item in filters:
        if not (isinstance(item, str) or callable(item)):
            raise DefinitionError(
                f"filter {item!r} is neither a name nor a callable"
            ).with_context(filters=[repr(f) for f in filters])
        if isinstance(item, str) and not item.isidentifier():
            raise DefinitionError(f"filter name {item!r} is not a valid identifier")
    return filters


def filter_name(item: Filter) -> str:
    """Readable name of a filter for logs and reprs."""
    if isinstance(item, str):
        return item
    return getattr(item, "__name__", repr(item))


class FilterChain:
    """An ordered, immutable sequence of filters, first-declared applied first."""

    __slots__ = ("filters",)

    def __init__(self, filter_through: Filter | Iterable[Filter] | None = None):
        self.filters = normalize_filters(filter_through)

    def resolve(self, owner: Any) -> list[Callable[[Any], Any]]:
        """Look up named filters on ``owner``, in application order.

        A missing name raises ``AttributeError`` from ``owner`` itself.
        """
        return [
            getattr(owner, item) if isinstance(item, str) else item
            for item in self.filters
        ]

    def apply(self, owner: Any, value: Any) -> Any:
        for fn in self.resolve(owner):
            value = fn(value)
        return value

    def __bool__(self) -> bool:
        return bool(self.filters)

    def __len__(self) -> int:
        return len(self.filters)

    def __repr__(self) -> str:
        names = ", ".join(filter_name(f) for f in self.filters)
        return f"FilterChain([{names}])"
