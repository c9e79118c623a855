"""Init command for lazymake CLI.

This module provides the `lazymake init` command that writes a starter
.lazymake.yaml configuration file.

Exit codes:
    0: Success
    2: Output file exists (without --force)
    3: Write error
"""

from pathlib import Path
from typing import Annotated

import typer

from lazymake.config import CONFIG_FILENAME, DEFAULT_CONFIG_TEMPLATE


def init_command(
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Output path for the configuration file",
        ),
    ] = Path(CONFIG_FILENAME),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing configuration file",
        ),
    ] = False,
) -> None:
    """Create a starter .lazymake.yaml in the current directory."""
    if output.exists() and not force:
        typer.echo(f"Error: {output} already exists. Use --force to overwrite.", err=True)
        raise typer.Exit(2)

    try:
        output.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error: Failed to write {output}: {e}", err=True)
        raise typer.Exit(3) from e

    typer.echo(f"Created {output}")
