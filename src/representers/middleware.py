"""
Middleware and error handling for apps that render representers.

``install_representers(app)`` wires everything onto a FastAPI app:

- ``RequestIDMiddleware``: gives every request an ``X-Request-ID`` and binds
  it to the logging context for the request's duration.
- ``template_not_found_handler``: turns ``jinja2.TemplateNotFound`` into an
  RFC 7807 problem response (status 500) and logs the missing names.
- settings on ``app.state.representer_settings`` for the dependencies in
  :mod:`representers.deps`, and optionally the ``representers`` logger
  configured from them.

Tags:
    middleware, request-id, error-handling, fastapi, representers

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from jinja2 import TemplateNotFound
from pydantic import BaseModel, Field
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from representers.logging import LogContext, configure_logging, get_logger
from representers.settings import RepresenterSettings, get_settings

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a unique request ID to every request/response cycle."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        with LogContext(request_id=request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class ProblemDetail(BaseModel):
    """RFC 7807 problem details body."""

    type: str = Field(default="about:blank", description="Error type URI")
    title: str = Field(description="Short human-readable error summary")
    status: int = Field(description="HTTP status code")
    detail: str = Field(default="", description="Human-readable explanation of the error")
    instance: str = Field(default="", description="URI of the failing request")
    templates: list[str] = Field(
        default_factory=list,
        description="Template names that were tried (debug only)",
    )


def problem_response(
    *,
    status: int,
    title: str,
    detail: str = "",
    instance: str = "",
    templates: list[str] | None = None,
) -> JSONResponse:
    """Build a RFC 7807 JSON error response."""
    body = ProblemDetail(
        title=title,
        status=status,
        detail=detail,
        instance=instance,
        templates=templates or [],
    )
    return JSONResponse(
        status_code=status,
        content=body.model_dump(),
        media_type="application/problem+json",
    )


async def template_not_found_handler(request: Request, exc: TemplateNotFound) -> JSONResponse:
    """A representer asked for a template that no view path provides."""
    tried = [str(n) for n in getattr(exc, "templates", None) or [exc.name]]
    logger.error("template_not_found", templates=tried, path=request.url.path)

    settings = getattr(request.app.state, "representer_settings", None) or get_settings()
    if not settings.debug:
        return problem_response(
            status=500,
            title="Template Not Found",
            detail="The page could not be rendered.",
            instance=str(request.url),
        )
    return problem_response(
        status=500,
        title="Template Not Found",
        detail=f"Template not found: {', '.join(tried)}",
        instance=str(request.url),
        templates=tried,
    )


def install_representers(
    app: FastAPI,
    settings: RepresenterSettings | None = None,
    *,
    configure_logs: bool = False,
) -> FastAPI:
    """Wire representer settings, middleware and error handling onto ``app``.

    With ``configure_logs`` the ``representers`` logger gets a console or JSON
    handler from the settings; otherwise the host's logging setup applies.
    """
    settings = settings or get_settings()
    app.state.representer_settings = settings

    if configure_logs:
        configure_logging(level=settings.log_level, json_format=settings.log_json)

    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(TemplateNotFound, template_not_found_handler)
    logger.debug(
        "representers_installed",
        view_paths=[str(p) for p in settings.view_paths],
        default_format=settings.default_format,
    )
    return app
