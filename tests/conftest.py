"""
Shared pytest fixtures and configuration for representers tests.

This module provides:
- Paths to the fixture templates
- A stub controller implementing the ViewContext capability set
- Settings pointing at the fixture templates
"""

import logging
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Ensure the package is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from representers.logging import clear_context, get_logger  # noqa: E402
from representers.settings import RepresenterSettings, get_settings  # noqa: E402

TEMPLATES = Path(__file__).parent / "fixtures" / "templates"


class StubController:
    """Minimal controller: view paths, format, logger and delegated methods."""

    def __init__(self, view_paths=None, template_format="html"):
        self.view_paths = list(view_paths or [TEMPLATES])
        self.template_format = template_format
        self.logger = get_logger("representers.tests.controller")
        self.calls = []

    def form_authenticity_token(self):
        return "tok-123"

    def protect_against_forgery(self):
        return True

    def request_forgery_protection_token(self):
        return "authenticity_token"

    def current_user(self):
        return "alice"

    def greet(self, name, punctuation="!"):
        self.calls.append((name, punctuation))
        return f"hello {name}{punctuation}"


@pytest.fixture(scope="session")
def templates_path():
    """Root of the fixture templates."""
    return TEMPLATES


@pytest.fixture
def controller():
    return StubController()


@pytest.fixture
def book():
    """A plain model with the attributes the book templates read."""
    return SimpleNamespace(id=1, title="Dune <Deluxe>", price="9.99", author="Frank Herbert")


@pytest.fixture
def settings():
    return RepresenterSettings(view_paths=[TEMPLATES], debug=True)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings are an lru_cache singleton; reset between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_representers_logging():
    """configure_logging() attaches a handler to the ``representers`` logger."""
    yield
    clear_context()
    logger = logging.getLogger("representers")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
