"""
View rendering context for representers.

A ``View`` is built per render from the controller's view paths and format.
It wraps a Jinja2 ``Environment`` over those paths, carries the helpers the
representer exposes, and resolves a template path plus format into the
concrete file name::

    representers/book/show  +  html  ->  representers/book/show.html.j2
                                         representers/book/show.html.jinja2
                                         representers/book/show.html.jinja

The first candidate that exists on any view path is rendered.  A missing
template raises ``jinja2.TemplateNotFound`` and undefined template variables
raise ``jinja2.UndefinedError``.

Tags:
    jinja2, templates, view, representers

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from representers.errors import ConfigurationError
from representers.logging import get_logger

logger = get_logger(__name__)

DEFAULT_FORMAT = "html"
DEFAULT_EXTENSIONS = ("j2", "jinja2", "jinja")
DEFAULT_AUTOESCAPE_FORMATS = ("html", "htm", "xml")


class View:
    """Jinja2-backed rendering context scoped to one controller."""

    def __init__(
        self,
        view_paths: Iterable[str | Path],
        controller: Any = None,
        *,
        template_format: str = DEFAULT_FORMAT,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        autoescape_formats: Iterable[str] = DEFAULT_AUTOESCAPE_FORMATS,
    ):
        self.view_paths = [str(p) for p in view_paths]
        if not self.view_paths:
            raise ConfigurationError("a view needs at least one view path")
        if not extensions:
            raise ConfigurationError("a view needs at least one template extension")

        self.controller = controller
        self.template_format = template_format
        self.extensions = tuple(ext.lstrip(".") for ext in extensions)
        self.autoescape_formats = frozenset(f.lower() for f in autoescape_formats)

        self.env = Environment(
            loader=FileSystemLoader(self.view_paths),
            autoescape=self._autoescape,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals["controller"] = controller
        self.env.globals["view"] = self

    @classmethod
    def for_controller(cls, controller: Any) -> View:
        """Build a view from the controller's view-resolution configuration."""
        return cls(
            controller.view_paths,
            controller,
            template_format=getattr(controller, "template_format", DEFAULT_FORMAT),
            extensions=getattr(controller, "template_extensions", DEFAULT_EXTENSIONS),
            autoescape_formats=getattr(
                controller, "autoescape_formats", DEFAULT_AUTOESCAPE_FORMATS
            ),
        )

    def _autoescape(self, template_name: str | None) -> bool:
        # show.html.j2 -> ["html"]; banner.j2 has no format part and escapes
        if not template_name:
            return True
        parts = [p.lower() for p in template_name.rsplit("/", 1)[-1].split(".")[1:]]
        if parts and parts[-1] in self.extensions:
            parts = parts[:-1]
        if not parts:
            return True
        return any(part in self.autoescape_formats for part in parts)

    def extend(self, helpers: Mapping[str, Callable[..., Any]]) -> View:
        """Make helpers callable in templates, both as globals and as filters."""
        for name, fn in helpers.items():
            self.env.globals[name] = fn
            self.env.filters[name] = fn
        return self

    def template_names(self, partial: str) -> list[str]:
        """Candidate file names for a template path in the current format."""
        if any(partial.endswith(f".{ext}") for ext in self.extensions):
            return [partial]
        return [f"{partial}.{self.template_format}.{ext}" for ext in self.extensions]

    def find_template(self, partial: str) -> Template:
        return self.env.select_template(self.template_names(partial))

    def render(self, partial: str, locals: Mapping[str, Any] | None = None) -> str:
        """Render ``partial`` in the current format with the given locals."""
        template = self.find_template(partial)
        logger.debug(
            "template_selected",
            partial=partial,
            template=template.name,
            format=self.template_format,
        )
        return template.render(**dict(locals or {}))

    def __repr__(self) -> str:
        return f"View(view_paths={self.view_paths!r}, format={self.template_format!r})"
