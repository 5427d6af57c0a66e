"""Default template helpers, included in every representer.

Each helper takes its value as the first argument, so it works as a
``filter_through`` step, a method on the representer (``self.h(value)``),
and in templates both as a call (``{{ h(text) }}``) and a filter
(``{{ text|h }}``).
"""

from __future__ import annotations

import re
from typing import Any

from markupsafe import Markup, escape

from representers.record_identifier import dom_class, dom_id

_PARAGRAPH_BREAK = re.compile(r"\r?\n\s*\r?\n")
_LINE_BREAK = re.compile(r"\r?\n")


def h(value: Any) -> Markup:
    """HTML-escape a value."""
    return escape(value)


def simple_format(value: Any) -> Markup:
    """Escape text, wrap paragraphs in ``<p>`` and turn newlines into ``<br />``."""
    text = str(escape("" if value is None else value)).strip()
    paragraphs = [p for p in _PARAGRAPH_BREAK.split(text) if p.strip()]
    return Markup("\n\n".join(
        "<p>" + _LINE_BREAK.sub("\n<br />", p) + "</p>" for p in paragraphs
    ))


def truncate(value: Any, length: int = 30, omission: str = "...") -> str:
    """Cut text to ``length`` characters, ending with ``omission`` when cut."""
    text = "" if value is None else str(value)
    if len(text) <= length:
        return text
    stop = max(length - len(omission), 0)
    return text[:stop] + omission


__all__ = ["h", "simple_format", "truncate", "dom_id", "dom_class"]
