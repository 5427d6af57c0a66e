"""Settings for the representer layer.

All values can be overridden via environment variables prefixed with
``REPRESENTERS_`` or from a ``.env`` file.  List values are read as JSON::

    REPRESENTERS_VIEW_PATHS='["app/templates", "vendor/templates"]'
    REPRESENTERS_DEFAULT_FORMAT=html

Tags:
    settings, configuration, pydantic, environment, representers

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RepresenterSettings(BaseSettings):
    """Configuration for template lookup, forgery protection and logging.

    Fields
    ──────
    view_paths          : Template roots searched in order
    default_format      : Format used when the request names none
    template_extensions : Engine extensions tried after ``<name>.<format>``
    autoescape_formats  : Formats whose templates are HTML-escaped
    csrf_protection     : Whether forms must carry an authenticity token
    csrf_field_name     : Form field carrying the token
    csrf_cookie_name    : Cookie that stores the token between requests
    """

    model_config = SettingsConfigDict(
        env_prefix="REPRESENTERS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Templates ────────────────────────────────────────────────
    view_paths: list[Path] = Field(
        default_factory=lambda: [Path("templates")],
        description="Template roots searched in order",
    )
    default_format: str = Field(default="html", description="Default template format")
    template_extensions: list[str] = Field(
        default_factory=lambda: ["j2", "jinja2", "jinja"],
        description="Template engine extensions, in lookup order",
    )
    autoescape_formats: list[str] = Field(
        default_factory=lambda: ["html", "htm", "xml"],
        description="Formats rendered with HTML autoescaping",
    )

    # ── Forgery protection ───────────────────────────────────────
    csrf_protection: bool = True
    csrf_field_name: str = "authenticity_token"
    csrf_cookie_name: str = "csrf_token"

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool | None = None

    @field_validator("template_extensions")
    @classmethod
    def _strip_leading_dots(cls, value: list[str]) -> list[str]:
        return [ext.lstrip(".") for ext in value if ext.strip(".")]

    @field_validator("default_format")
    @classmethod
    def _lower_format(cls, value: str) -> str:
        return value.strip().lower()


@lru_cache(maxsize=1)
def get_settings() -> RepresenterSettings:
    """Cached settings, loaded once per process."""
    return RepresenterSettings()
