"""Check command for lazymake CLI.

This module provides the `lazymake check` command that reports targets whose
recipes contain dangerous commands.

Exit codes:
    0: No critical targets
    1: Makefile unreadable, or at least one target is critical
    2: Configuration error
"""

import json
from collections import Counter

import typer

from lazymake.cli.loading import (
    EXIT_ANALYSIS_ERROR,
    ConfigOption,
    JsonOption,
    MakefileArgument,
    load_config,
    load_targets,
)
from lazymake.safety import Checker, SafetyCheckResult


def check_command(
    makefile: MakefileArgument = None,
    config: ConfigOption = None,
    json_output: JsonOption = False,
) -> None:
    """Check Makefile recipes for dangerous commands.

    Exits with status 1 when any target is critical, so the command can gate
    CI pipelines.
    """
    settings = load_config(config)
    path, targets = load_targets(makefile, settings)

    results = Checker(settings.safety).check_all_targets(targets)
    has_critical = any(result.requires_confirmation for result in results.values())

    if json_output:
        data = {name: result.to_dict() for name, result in results.items()}
        typer.echo(json.dumps(data, indent=2))
    elif not settings.safety.enabled:
        typer.echo("Safety checks are disabled in configuration.")
    elif not results:
        typer.echo(f"No dangerous commands found in {path}")
    else:
        _display_results(results)

    if has_critical:
        raise typer.Exit(EXIT_ANALYSIS_ERROR)


def _display_results(results: dict[str, SafetyCheckResult]) -> None:
    """Display each dangerous target with its matches."""
    for index, result in enumerate(results.values()):
        if index > 0:
            typer.echo()

        suffix = " (requires confirmation)" if result.requires_confirmation else ""
        typer.echo(f"{result.target_name}: {result.danger_level}{suffix}")

        for match in result.matches:
            typer.echo(f"  [{match.severity}] {match.rule.id}")
            typer.echo(f"    Command: {match.matched_line}")
            if match.rule.description:
                typer.echo(f"    Why: {match.rule.description}")
            if match.rule.suggestion:
                typer.echo(f"    Suggestion: {match.rule.suggestion}")

    counts = Counter(result.danger_level for result in results.values())
    summary = ", ".join(
        f"{counts[level]} {str(level).lower()}" for level in sorted(counts, reverse=True)
    )
    typer.echo()
    typer.echo(f"{len(results)} dangerous target(s): {summary}")
