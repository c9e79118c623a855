"""lazymake CLI entry point.

This module provides the main Typer application and entry point for the
`lazymake` CLI.

Usage:
    lazymake list [MAKEFILE] [options]     - List targets with safety badges
    lazymake graph [MAKEFILE] [options]    - Show the dependency tree
    lazymake check [MAKEFILE] [options]    - Report dangerous targets
    lazymake rules [options]               - Show built-in safety rules
    lazymake init [options]                - Create .lazymake.yaml
    lazymake version [options]             - Show version information

Exit codes:
    0: Success
    1: Makefile could not be read, cyclic graph, or critical targets found
    2: Configuration error
"""

import logging
import sys
from typing import Annotated

import structlog
import typer

from lazymake.cli.commands import check, graph, init, rules, targets, version

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="lazymake",
    help="lazymake - Makefile target browser, dependency graph and safety checker",
    no_args_is_help=True,
)


def setup_logging(level: str = "WARNING") -> None:
    """Configure stdlib logging and route structlog through it.

    Log output goes to stderr so command output on stdout stays parseable.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


@app.callback()
def main_callback(
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG, INFO, WARNING, ERROR)",
            envvar="LAZYMAKE_LOG_LEVEL",
        ),
    ] = "WARNING",
) -> None:
    """lazymake - Makefile target browser, dependency graph and safety checker."""
    setup_logging(log_level)


# Register commands
app.command(name="list")(targets.list_command)
app.command(name="graph")(graph.graph_command)
app.command(name="check")(check.check_command)
app.command(name="rules")(rules.rules_command)
app.command(name="init")(init.init_command)
app.command(name="version")(version.version_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
