"""Shared loading steps for CLI commands.

Every analysis command resolves configuration first, then parses the
Makefile. Failures are reported on stderr and turned into exit codes here
so the commands themselves only deal with successful input.
"""

from pathlib import Path
from typing import Annotated

import typer

from lazymake.config import LazymakeSettings, load_merged_settings
from lazymake.errors import ConfigError, LazymakeError
from lazymake.parser import Target, parse

EXIT_ANALYSIS_ERROR = 1
EXIT_CONFIG_ERROR = 2

# Reusable parameter declarations
MakefileArgument = Annotated[
    Path | None,
    typer.Argument(
        help="Path to the Makefile (default: the configured makefile)",
        show_default=False,
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to a .lazymake.yaml (default: ./.lazymake.yaml)",
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Output as JSON",
    ),
]


def load_config(config: Path | None) -> LazymakeSettings:
    """Load merged settings, exiting with status 2 on failure."""
    try:
        return load_merged_settings(config)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from e


def load_targets(makefile: Path | None, settings: LazymakeSettings) -> tuple[Path, list[Target]]:
    """Parse the Makefile, exiting with status 1 on failure.

    Returns:
        Tuple of (makefile_path, targets).
    """
    path = makefile if makefile is not None else Path(settings.makefile)
    try:
        return path, parse(path)
    except LazymakeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_ANALYSIS_ERROR) from e
