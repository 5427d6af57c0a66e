"""
CLI: ``representers`` — inspect where a representer looks for templates.

    representers path myapp.representers.book:BookRepresenter
    representers templates myapp.representers.book:BookRepresenter -p app/templates

Modules are imported relative to ``--app-dir`` (the current directory by
default), the way ``uvicorn`` finds an application.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from representers import __version__
from representers.base import Representer
from representers.logging import configure_logging
from representers.settings import get_settings

app = typer.Typer(
    name="representers",
    help="representers — template lookup for view representers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"representers {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    app_dir: Path = typer.Option(
        Path("."), "--app-dir", help="Directory to import representer modules from."
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Level for representers logging on stderr."),
) -> None:
    """representers CLI: where representers look for their templates."""
    import_root = str(app_dir.resolve())
    if import_root not in sys.path:
        sys.path.insert(0, import_root)
    configure_logging(level=log_level, json_format=False, add_timestamp=False, stream=sys.stderr)


def load_representer(target: str) -> type[Representer]:
    """Import ``module:Class`` (or ``module.Class``) and check it is a representer."""
    module_name, sep, attr = target.partition(":")
    if not sep:
        module_name, _, attr = target.rpartition(".")
    if not module_name or not attr:
        raise typer.BadParameter(f"expected MODULE:CLASS, got {target!r}")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"cannot import {module_name!r}: {exc}") from exc

    for part in attr.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            raise typer.BadParameter(f"{attr!r} not found in {module_name!r}")

    if not (isinstance(obj, type) and issubclass(obj, Representer)):
        raise typer.BadParameter(f"{target!r} is not a Representer subclass")
    return obj


@app.command("path")
def show_path(
    target: str = typer.Argument(..., help="Representer as MODULE:CLASS"),
) -> None:
    """Print the template directory of a representer."""
    cls = load_representer(target)
    typer.echo(cls.representer_path())


@app.command("templates")
def list_templates(
    target: str = typer.Argument(..., help="Representer as MODULE:CLASS"),
    view_path: list[Path] = typer.Option(
        None, "--view-path", "-p", help="Template root (repeatable; defaults to settings)"
    ),
) -> None:
    """List templates found for a representer on the view paths."""
    cls = load_representer(target)
    settings = get_settings()
    roots = view_path or list(settings.view_paths)
    directory = cls.representer_path()
    extensions = tuple(f".{ext}" for ext in settings.template_extensions)

    table = Table(title=f"{cls.__name__} → {directory}")
    table.add_column("View")
    table.add_column("Format")
    table.add_column("File")

    found = 0
    for root in roots:
        folder = Path(root) / directory
        if not folder.is_dir():
            continue
        for file in sorted(folder.iterdir()):
            if not file.is_file() or not file.name.endswith(extensions):
                continue
            parts = file.name.split(".")
            view_name = parts[0]
            fmt = parts[1] if len(parts) > 2 else ""
            table.add_row(view_name, fmt, str(file))
            found += 1

    if not found:
        err_console.print(f"[yellow]No templates under {directory} in: {', '.join(map(str, roots))}[/yellow]")
        raise typer.Exit(1)
    console.print(table)


if __name__ == "__main__":
    app()
