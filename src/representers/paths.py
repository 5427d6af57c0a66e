"""
Template path resolution.

Maps a representer class to its default template directory and a view name
to the template path handed to the view.  Everything here is a pure function
over strings.

Convention:
    ::

        class name                           template directory
        ──────────                           ──────────────────
        Representers.Book                    representers/book
        myapp.representers.models:Book       representers/models/book
        myapp.representers.book:Book         representers/book
        class Book(..., representer_name="Admin.HTMLBook")   admin/html_book

    The template for ``render_as("show", "html")`` then lives at
    ``<view_path>/<template directory>/show.html.j2``.

Tags:
    templates, naming-convention, representers

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import posixpath
import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z\d]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")

# Module segment that roots the template directory
ROOT_SEGMENT = "representers"


def underscore(name: str) -> str:
    """Turn a dotted CamelCase name into a lowercase slash path.

    >>> underscore("Representers.Models.Book")
    'representers/models/book'
    >>> underscore("Admin.HTMLPage")
    'admin/html_page'
    """
    word = name.replace(".", "/")
    word = _ACRONYM_BOUNDARY.sub(r"\1_\2", word)
    word = _WORD_BOUNDARY.sub(r"\1_\2", word)
    return word.replace("-", "_").lower()


def qualified_name(cls: type) -> str:
    """Return the dotted name the template directory is derived from.

    The ``representer_name=`` class keyword wins.  Otherwise the module path
    is taken from its last ``representers`` segment and joined with the
    class ``__qualname__``; a final module segment that only repeats the
    class name (``representers/book.py`` defining ``Book``) is dropped.
    """
    explicit = cls.__dict__.get("_representer_name")
    if explicit:
        return explicit

    qualname = cls.__qualname__.rsplit(".<locals>.", 1)[-1]
    segments = cls.__module__.split(".")
    if ROOT_SEGMENT not in segments:
        return qualname

    root = len(segments) - 1 - segments[::-1].index(ROOT_SEGMENT)
    module_path = segments[root:]
    outer_class = qualname.split(".", 1)[0]
    if len(module_path) > 1 and module_path[-1] == underscore(outer_class):
        module_path = module_path[:-1]
    return ".".join(module_path + [qualname])


def representer_path(cls: type) -> str:
    """Default template directory for a representer class."""
    return underscore(qualified_name(cls))


def template_path(default_directory: str, name: str) -> str:
    """Join a view name onto the default directory.

    A name that already contains ``/`` is a specific path and is returned
    verbatim.
    """
    name = str(name)
    if "/" in name:
        return name
    return posixpath.join(default_directory, name)


__all__ = [
    "underscore",
    "qualified_name",
    "representer_path",
    "template_path",
]
