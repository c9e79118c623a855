"""Version command for lazymake CLI.

This module provides the `lazymake version` command that displays version information.
"""

import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Annotated

import typer

from lazymake import __version__


def get_version() -> str:
    """Get the installed lazymake version.

    Returns:
        The distribution version, or the package's own version string when
        running from an uninstalled checkout.
    """
    try:
        return version("lazymake")
    except PackageNotFoundError:
        return __version__


def version_command(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show detailed version information",
        ),
    ] = False,
) -> None:
    """Show lazymake version information."""
    lazymake_version = get_version()

    if not verbose:
        typer.echo(f"lazymake {lazymake_version}")
        return

    typer.echo(f"lazymake version: {lazymake_version}")
    typer.echo(f"Python version: {sys.version}")
    typer.echo(f"Python executable: {sys.executable}")

    # Show key dependency versions
    typer.echo("\nDependencies:")
    for dep in ("pydantic", "typer", "pyyaml", "structlog"):
        try:
            typer.echo(f"  {dep}: {version(dep)}")
        except PackageNotFoundError:
            typer.echo(f"  {dep}: not found")
