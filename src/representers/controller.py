"""
Request-scoped controller context.

A representer needs a handful of things from the request that is rendering
it: where templates live, which format to render, a logger, and the
forgery-protection token.  ``ViewContext`` names exactly that capability
set; ``Controller`` implements it over a Starlette ``Request``.

Manifesto:
    Representers stay framework-light.  They only ever talk to their
    controller through the attributes in ``ViewContext``, so a test can hand
    them any object with those attributes and a FastAPI route hands them a
    ``Controller``.

Usage:
    from representers.deps import ControllerDep

    @app.get("/books/{book_id}")
    def show_book(book_id: int, controller: ControllerDep):
        book = load_book(book_id)
        return controller.render(BookRepresenter(book, controller), "show")

Tags:
    controller, request-context, fastapi, csrf, representers

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import secrets
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from starlette.requests import Request
from starlette.responses import Response

from representers.logging import get_logger
from representers.settings import RepresenterSettings, get_settings

if TYPE_CHECKING:
    from representers.base import Representer

MEDIA_TYPES: dict[str, str] = {
    "html": "text/html",
    "htm": "text/html",
    "xml": "application/xml",
    "json": "application/json",
    "text": "text/plain",
    "txt": "text/plain",
    "csv": "text/csv",
    "js": "application/javascript",
}


@runtime_checkable
class ViewContext(Protocol):
    """What a representer may ask of its controller."""

    view_paths: list[Path]
    template_format: str
    logger: Any

    def form_authenticity_token(self) -> str: ...

    def protect_against_forgery(self) -> bool: ...

    def request_forgery_protection_token(self) -> str: ...


class Controller:
    """Controller for one request: settings, logger and forgery token."""

    def __init__(
        self,
        request: Request,
        settings: RepresenterSettings | None = None,
        *,
        template_format: str | None = None,
    ):
        self.request = request
        self.settings = settings or get_settings()
        self.template_format = (
            template_format
            or request.query_params.get("format")
            or self.settings.default_format
        ).lower()

        request_id = getattr(request.state, "request_id", None)
        self.logger = get_logger("representers.controller").bind(
            request_id=request_id,
            path=request.url.path,
        )

    # ── View resolution ──────────────────────────────────────────────────

    @property
    def view_paths(self) -> list[Path]:
        return list(self.settings.view_paths)

    @property
    def template_extensions(self) -> list[str]:
        return list(self.settings.template_extensions)

    @property
    def autoescape_formats(self) -> list[str]:
        return list(self.settings.autoescape_formats)

    # ── Forgery protection ───────────────────────────────────────────────

    def form_authenticity_token(self) -> str:
        """Token for this session, reused from the cookie or generated once."""
        token = getattr(self.request.state, "csrf_token", None)
        if token is None:
            token = self.request.cookies.get(self.settings.csrf_cookie_name)
            if not token:
                token = secrets.token_urlsafe(32)
                self.request.state.csrf_token_issued = True
                self.logger.debug("csrf_token_issued")
            self.request.state.csrf_token = token
        return token

    def protect_against_forgery(self) -> bool:
        return self.settings.csrf_protection

    def request_forgery_protection_token(self) -> str:
        return self.settings.csrf_field_name

    def verified_request(self, submitted: str | None) -> bool:
        """Whether a submitted form token matches this session's token."""
        if not self.protect_against_forgery():
            return True
        if not submitted:
            return False
        return secrets.compare_digest(submitted, self.form_authenticity_token())

    # ── Routing ──────────────────────────────────────────────────────────

    def url_for(self, name: str, /, **path_params: Any) -> str:
        return str(self.request.url_for(name, **path_params))

    # ── Rendering ────────────────────────────────────────────────────────

    def render(
        self,
        representer: Representer,
        view_name: str,
        format: str | None = None,
        status_code: int = 200,
    ) -> Response:
        """Render a representer view into a response."""
        fmt = (format or self.template_format).lower()
        content = representer.render_as(view_name, fmt)
        response = Response(
            content=content,
            status_code=status_code,
            media_type=MEDIA_TYPES.get(fmt, "text/html"),
        )
        if getattr(self.request.state, "csrf_token_issued", False):
            response.set_cookie(
                self.settings.csrf_cookie_name,
                self.request.state.csrf_token,
                httponly=True,
                samesite="lax",
            )
        return response

    def __repr__(self) -> str:
        return f"Controller(path={self.request.url.path!r}, format={self.template_format!r})"
