"""
Structured error types for the representer layer.

Runtime failures in a representer (a missing model attribute, a missing
filter, a missing template) are *not* wrapped: they surface as the
``AttributeError`` or ``jinja2.TemplateNotFound`` raised by the object that
failed.  The types here cover the two cases the layer owns itself:

- **DefinitionError:** the class-level DSL was misused (``model_reader()``
  with no field names, a filter that is neither a name nor a callable).
- **ConfigurationError:** settings or the controller cannot produce a usable
  view (no view paths, no template extensions).

Architecture:
    ::

        RepresenterError  (category, context, cause)
        ├── DefinitionError     (DEFINITION, also a TypeError)
        └── ConfigurationError  (CONFIG)

Examples:
    >>> error = DefinitionError("model_reader() needs at least one field")
    >>> error.with_context(representer="BookRepresenter").to_dict()["category"]
    'DEFINITION'

Tags:
    error-handling, exception-hierarchy, representers

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Categories for representer errors."""

    DEFINITION = "DEFINITION"  # DSL misuse at class-definition time
    CONFIG = "CONFIG"          # Missing or invalid settings
    INTERNAL = "INTERNAL"      # Bugs, unexpected state


class RepresenterError(Exception):
    """Base exception for errors raised by the representer layer itself.

    Carries a category, a free-form context dict for structured logging, and
    an optional chained cause.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> RepresenterError:
        """Add context fields fluently and return self."""
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging."""
        result: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


class DefinitionError(RepresenterError, TypeError):
    """The representer DSL was called with arguments it cannot use."""

    default_category = ErrorCategory.DEFINITION


class ConfigurationError(RepresenterError):
    """Settings or controller cannot produce a usable view."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "RepresenterError",
    "DefinitionError",
    "ConfigurationError",
]
