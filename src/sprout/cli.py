"""Command line interface for Sprout."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Annotated

import typer

from . import __version__
from . import log as sprout_log
from .commands.init import init_project as init_cmd
from .models import PACKAGE_MANAGER_VALUES

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Create new Python projects from templates.",
)


def _validate_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in sprout_log.LEVEL_NAMES:
        raise typer.BadParameter(
            "expected one of: " + ", ".join(sprout_log.LEVEL_NAMES)
        )
    return normalized


def _validate_package_manager(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in PACKAGE_MANAGER_VALUES:
        raise typer.BadParameter(
            "expected one of: " + ", ".join(PACKAGE_MANAGER_VALUES)
        )
    return normalized


@app.callback()
def main_callback(
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="log verbosity (trace|debug|info|success|warning|error)",
            callback=_validate_log_level,
        ),
    ] = None,
    no_color: Annotated[
        bool, typer.Option("--no-color", help="disable colored output")
    ] = False,
) -> None:
    """Create new Python projects from templates."""
    if log_level is not None:
        sprout_log.set_level(log_level)
    if no_color:
        sprout_log.set_no_color(True)


@app.command("init")
def init_command(
    project_name: Annotated[str, typer.Argument(help="name of the new project")],
    template: Annotated[
        str | None,
        typer.Option(
            "--template",
            help="external template (package spec, URL, or local directory)",
        ),
    ] = None,
    version: Annotated[
        str | None,
        typer.Option(
            "--version",
            help="default template version (defaults to latest)",
        ),
    ] = None,
    package_manager: Annotated[
        str | None,
        typer.Option(
            "--package-manager",
            help="dependency installer (auto|uv|pip)",
            callback=_validate_package_manager,
        ),
    ] = None,
) -> None:
    """Initialize a new project from a template."""
    # The init service resolves --version from the raw argv.
    del version
    exit_code = init_cmd(
        SimpleNamespace(
            project_name=project_name,
            template=template,
            package_manager=package_manager,
        )
    )
    if exit_code:
        raise typer.Exit(code=exit_code)


@app.command("version")
def version_command() -> None:
    """Print the installed Sprout version."""
    typer.echo(__version__)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
