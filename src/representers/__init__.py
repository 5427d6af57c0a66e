"""
representers - view representers for FastAPI and Jinja2 applications.

A representer pairs a model with the controller of the current request and
renders it through templates found by naming convention:

- ``Representer``: filtered model readers, controller delegation, helpers,
  ``render_as``
- ``RecordRepresenter``: ``id``, ``to_param`` and ``dom_id`` for records
- ``Controller``: request-scoped context (view paths, format, CSRF token)
- ``install_representers``: middleware and error handling for a FastAPI app

Usage:
    from representers import Representer

    class BookRepresenter(Representer):
        pass

    BookRepresenter.model_reader("title", filter_through="h")
    html = BookRepresenter(book, controller).render_as("show")
"""

from representers.base import ControllerDelegate, ModelReader, Representer
from representers.controller import Controller, ViewContext
from representers.errors import ConfigurationError, DefinitionError, RepresenterError
from representers.filters import FilterChain
from representers.middleware import install_representers
from representers.record import RecordRepresenter
from representers.record_identifier import RecordMixin, dom_class, dom_id
from representers.settings import RepresenterSettings, get_settings
from representers.view import View

__version__ = "0.1.0"

__all__ = [
    # Representers
    "Representer",
    "RecordRepresenter",
    "ModelReader",
    "ControllerDelegate",
    "FilterChain",
    # Request context
    "Controller",
    "ViewContext",
    "View",
    "install_representers",
    # Records
    "RecordMixin",
    "dom_id",
    "dom_class",
    # Settings
    "RepresenterSettings",
    "get_settings",
    # Errors
    "RepresenterError",
    "DefinitionError",
    "ConfigurationError",
]
