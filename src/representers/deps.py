"""
FastAPI dependency injection for representers.

Usage in routes::

    from representers.deps import ControllerDep

    @router.get("/books/{book_id}")
    def show(book_id: int, controller: ControllerDep):
        return controller.render(BookRepresenter(load(book_id), controller), "show")

Settings are a process singleton; the controller is built per request.
Applications that pass their own settings to ``install_representers`` have
them picked up from ``app.state``.

Tags:
    fastapi, dependency-injection, controller, representers

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from representers.controller import Controller
from representers.settings import RepresenterSettings, get_settings


def request_settings(request: Request) -> RepresenterSettings:
    """Settings installed on the app, or the cached process settings."""
    settings = getattr(request.app.state, "representer_settings", None)
    return settings if settings is not None else get_settings()


def get_controller(
    request: Request,
    settings: Annotated[RepresenterSettings, Depends(request_settings)],
) -> Controller:
    """Build the :class:`Controller` for the current request."""
    return Controller(request, settings)


SettingsDep = Annotated[RepresenterSettings, Depends(request_settings)]
ControllerDep = Annotated[Controller, Depends(get_controller)]

__all__ = [
    "request_settings",
    "get_controller",
    "SettingsDep",
    "ControllerDep",
]
