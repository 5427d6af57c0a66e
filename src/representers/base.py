"""
Base class from which all representers inherit.

A representer sits between a model and the template that renders it.  It
pairs the model with the controller of the current request, exposes
read-only (optionally filtered) model attributes, forwards selected calls
to the controller, and renders templates found by naming convention.

Manifesto:
    Templates should not reach into models and request objects directly.
    A representer names exactly what a view may read, applies escaping and
    formatting once at the point of exposure, and keeps the lookup of
    "which template" out of the caller.

Architecture:
    ::

        model ──► Representer(model, context) ◄── controller (from context)
                      │
                      │  model_reader("price", filter_through=["textilize", "h"])
                      │      price -> h(textilize(model.price))
                      │  controller_method("current_user")
                      │      current_user -> controller.current_user
                      ▼
                  render_as("show", "html")
                      │
                      ▼
        View(controller.view_paths) + helpers
                      │
                      ▼
        <view_path>/representers/book/show.html.j2   (representer=self)

Features:
    - ``model_reader``: filtered delegation to model attributes
    - ``controller_method``: delegation to the controller
    - ``helper`` / ``helper_method``: functions for filters and templates
    - ``render_as``: convention-based template dispatch

Examples:
    >>> class BookRepresenter(Representer, representer_name="Representers.Book"):
    ...     def textilize(self, text):
    ...         return text.replace("*", "")
    >>> BookRepresenter.model_reader("title")
    >>> BookRepresenter.model_reader("price", filter_through=["textilize", "h"])
    >>> BookRepresenter.controller_method("current_user")
    >>> BookRepresenter.representer_path()
    'representers/book'

    The same accessors can be declared in the class body:

    >>> class AuthorRepresenter(Representer):
    ...     name = ModelReader(filter_through="h")
    ...     current_user = ControllerDelegate()

Guardrails:
    ❌ DON'T: Store request state on the representer
    ✅ DO: Ask the controller for it through ``controller_method``

    ❌ DON'T: Escape in the template what a reader already escapes
    ✅ DO: Put escaping in ``filter_through`` once

Tags:
    representer, presenter, view-model, templates, delegation

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Mapping
from types import ModuleType
from typing import Any, ClassVar

from representers import helpers as default_helpers
from representers import paths
from representers.errors import DefinitionError
from representers.filters import Filter, FilterChain, filter_name, normalize_filters
from representers.logging import get_logger
from representers.view import View

logger = get_logger(__name__)

RESERVED_NAMES = frozenset({"model", "controller"})


class ModelReader:
    """Read-only accessor for a model attribute, piped through filters."""

    def __init__(
        self,
        field: str | None = None,
        *,
        filter_through: Filter | Iterable[Filter] | None = None,
    ):
        self.field = field
        self.name = field
        self.chain = FilterChain(filter_through)

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        if self.field is None:
            self.field = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.chain.apply(instance, getattr(instance.model, self.field))

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(f"model reader {self.name!r} is read-only")

    def __repr__(self) -> str:
        return f"ModelReader({self.field!r}, {self.chain!r})"


class ControllerDelegate:
    """Forward attribute access to the representer's controller.

    Methods come back bound to the controller, so arguments and return
    values pass through unchanged; plain attributes are returned as-is.
    """

    def __init__(self, target: str | None = None):
        self.target = target
        self.name = target

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        if self.target is None:
            self.target = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return getattr(instance.controller, self.target)

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(f"controller delegate {self.name!r} is read-only")

    def __repr__(self) -> str:
        return f"ControllerDelegate({self.target!r})"


def _flatten_names(names: Iterable[Any]) -> list[str]:
    fields: list[str] = []
    for name in names:
        if isinstance(name, (list, tuple)):
            fields.extend(_flatten_names(name))
        else:
            fields.append(name)
    return fields


def _check_name(cls: type, name: Any, dsl: str) -> str:
    if not isinstance(name, str) or not name.isidentifier():
        raise DefinitionError(
            f"{dsl}() names must be identifiers, got {name!r}"
        ).with_context(representer=cls.__name__)
    if name in RESERVED_NAMES:
        raise DefinitionError(
            f"{dsl}() cannot redefine {name!r}"
        ).with_context(representer=cls.__name__)
    return name


def _install(cls: type, name: str, descriptor: Any) -> None:
    setattr(cls, name, descriptor)
    descriptor.__set_name__(cls, name)


def _public_callables(source: Any) -> dict[str, Callable[..., Any]]:
    """Helpers offered by a module, class or mapping."""
    if isinstance(source, Mapping):
        return {name: fn for name, fn in source.items() if callable(fn)}

    if isinstance(source, ModuleType):
        exported = getattr(source, "__all__", None)
        if exported is None:
            exported = [
                name for name, fn in vars(source).items()
                if not name.startswith("_")
                and callable(fn)
                and getattr(fn, "__module__", None) == source.__name__
            ]
        return {name: getattr(source, name) for name in exported if callable(getattr(source, name))}

    if inspect.isclass(source):
        return {
            name: getattr(source, name)
            for name in dir(source)
            if not name.startswith("_") and callable(getattr(source, name))
        }

    raise DefinitionError(
        f"helper() takes modules, classes or mappings, got {type(source).__name__}"
    )


class Representer:
    """Read-only proxy pairing a model with a request controller."""

    _helpers: ClassVar[dict[str, Callable[..., Any]]] = {}
    _installed_helpers: ClassVar[frozenset[str]] = frozenset()
    _helper_methods: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(cls, representer_name: str | None = None, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        cls._helpers = {}
        cls._installed_helpers = frozenset()
        cls._helper_methods = ()
        if representer_name is not None:
            cls._representer_name = representer_name

    def __init__(self, model: Any, context: Any):
        """Create a representer for ``model``.

        ``context`` is usually a controller.  Anything exposing its own
        ``controller`` (a view, another representer) is unwrapped to that.
        """
        self._model = model
        self._controller = self._extract_controller(context)

    @property
    def model(self) -> Any:
        return self._model

    @property
    def controller(self) -> Any:
        return self._controller

    # ── Class-level DSL ──────────────────────────────────────────────────

    @classmethod
    def model_reader(
        cls,
        *names: str | Iterable[str],
        filter_through: Filter | Iterable[Filter] | None = None,
    ) -> None:
        """Define readers that delegate to model attributes.

        ``filter_through`` is a filter or list of filters (names resolved on
        the representer, or callables) applied in declared order::

            model_reader("foobar")                                  # model.foobar
            model_reader("foobar", filter_through="h")              # h(model.foobar)
            model_reader("foobar", filter_through=["textilize", "h"])  # h(textilize(...))
        """
        fields = [_check_name(cls, name, "model_reader") for name in _flatten_names(names)]
        if not fields:
            raise DefinitionError("model_reader() needs at least one field name").with_context(
                representer=cls.__name__
            )
        filters = normalize_filters(filter_through)
        for field in fields:
            _install(cls, field, ModelReader(field, filter_through=filters))
        logger.debug(
            "model_reader_defined",
            representer=cls.__name__,
            fields=fields,
            filters=[filter_name(f) for f in filters],
        )

    @classmethod
    def controller_method(cls, *names: str | Iterable[str]) -> None:
        """Delegate the named methods to the controller.

        After ``controller_method("current_user")``, ``self.current_user()``
        calls ``self.controller.current_user()``.
        """
        methods = [_check_name(cls, name, "controller_method") for name in _flatten_names(names)]
        for method in methods:
            _install(cls, method, ControllerDelegate(method))
        logger.debug("controller_method_defined", representer=cls.__name__, methods=methods)

    @classmethod
    def helper(cls, *modules: Any) -> None:
        """Include helper functions in the representer and its templates.

        Helpers become static methods on the class (so they can be named in
        ``filter_through``) unless the class defines that name itself, and
        globals and filters in rendered templates.  A later helper with the
        same name replaces an earlier one.
        """
        installed = set(cls._installed_helpers)
        for module in modules:
            for name, fn in _public_callables(module).items():
                cls._helpers[name] = fn
                if name not in cls.__dict__ or name in installed:
                    setattr(cls, name, staticmethod(fn))
                    installed.add(name)
        cls._installed_helpers = frozenset(installed)
        logger.debug("helpers_included", representer=cls.__name__, helpers=sorted(cls._helpers))

    @classmethod
    def helper_method(cls, *names: str) -> None:
        """Expose representer attributes as callables in templates."""
        for name in names:
            _check_name(cls, name, "helper_method")
        cls._helper_methods = cls._helper_methods + tuple(
            n for n in names if n not in cls._helper_methods
        )

    @classmethod
    def helper_registry(cls) -> dict[str, Callable[..., Any]]:
        """Helpers of this class and its ancestors, nearest class winning.

        Read along the MRO on every call, so helpers added to a parent after
        a subclass exists still reach the subclass.
        """
        registry: dict[str, Callable[..., Any]] = {}
        for klass in reversed(cls.__mro__):
            registry.update(klass.__dict__.get("_helpers", {}))
        return registry

    @classmethod
    def helper_method_names(cls) -> tuple[str, ...]:
        names: dict[str, None] = {}
        for klass in reversed(cls.__mro__):
            names.update(dict.fromkeys(klass.__dict__.get("_helper_methods", ())))
        return tuple(names)

    @classmethod
    def representer_path(cls) -> str:
        """Template directory for this representer, e.g. ``representers/models/book``."""
        return paths.representer_path(cls)

    # ── Rendering ────────────────────────────────────────────────────────

    def render_as(self, view_name: str, format: str | None = None) -> str:
        """Render ``view_name`` from this representer's template directory.

        With templates::

            templates/representers/book/summary.html.j2
            templates/representers/book/summary.text.j2

        ``render_as("summary", "html")`` renders the first and
        ``render_as("summary", "text")`` the second.  The template sees this
        representer as ``representer``.
        """
        view = self.view_instance()
        if format:
            view.template_format = str(format).lower()

        template = self.template_path(view_name)
        logger.debug(
            "representer_render",
            representer=type(self).__name__,
            template=template,
            format=view.template_format,
        )
        return view.render(template, {"representer": self})

    def helpers(self) -> dict[str, Callable[..., Any]]:
        """Helpers and bound helper methods available to templates."""
        available = self.helper_registry()
        for name in self.helper_method_names():
            available[name] = self._bound_helper(name)
        return available

    def view_instance(self) -> View:
        """Build a view over the controller's view paths, with helpers."""
        return View.for_controller(self.controller).extend(self.helpers())

    def template_path(self, name: str) -> str:
        return paths.template_path(self.representer_path(), name)

    # ── Internals ────────────────────────────────────────────────────────

    def _bound_helper(self, name: str) -> Callable[..., Any]:
        def call(*args: Any, **kwargs: Any) -> Any:
            return getattr(self, name)(*args, **kwargs)

        call.__name__ = name
        return call

    @staticmethod
    def _extract_controller(context: Any) -> Any:
        if hasattr(context, "controller"):
            return context.controller
        return context

    def __repr__(self) -> str:
        return f"<{type(self).__name__} model={self._model!r}>"


Representer.controller_method(
    "logger",
    "form_authenticity_token",
    "protect_against_forgery",
    "request_forgery_protection_token",
    "url_for",
)
Representer.helper_method(
    "form_authenticity_token",
    "protect_against_forgery",
    "request_forgery_protection_token",
    "url_for",
)
Representer.helper(default_helpers)
