"""List command for lazymake CLI.

This module provides the `lazymake list` command that shows every target with
its description, dependency count and safety badge.
"""

import json
from typing import Any

import typer

from lazymake.cli.loading import (
    ConfigOption,
    JsonOption,
    MakefileArgument,
    load_config,
    load_targets,
)
from lazymake.parser import CommentType, Target
from lazymake.safety import Checker, SafetyCheckResult


def list_command(
    makefile: MakefileArgument = None,
    config: ConfigOption = None,
    json_output: JsonOption = False,
) -> None:
    """List Makefile targets with descriptions and safety badges."""
    settings = load_config(config)
    path, targets = load_targets(makefile, settings)
    results = Checker(settings.safety).check_all_targets(targets)

    if json_output:
        typer.echo(json.dumps(_build_list_data(targets, results), indent=2))
        return

    if not targets:
        typer.echo(f"No targets found in {path}")
        return

    _display_targets(targets, results)


def _build_list_data(
    targets: list[Target], results: dict[str, SafetyCheckResult]
) -> list[dict[str, Any]]:
    data = []
    for target in targets:
        entry = target.to_dict()
        result = results.get(target.name)
        entry["danger_level"] = str(result.danger_level) if result else None
        data.append(entry)
    return data


_COMMENT_MARKS = {
    CommentType.NONE: "",
    CommentType.SINGLE: "#",
    CommentType.DOUBLE: "##",
}


def _display_targets(targets: list[Target], results: dict[str, SafetyCheckResult]) -> None:
    """Display targets as an aligned table."""
    name_width = max(len("TARGET"), *(len(t.name) for t in targets))
    badge_width = len("CRITICAL")

    typer.echo(f"{'TARGET':<{name_width}}  {'SAFETY':<{badge_width}}  DEPS  DOC  DESCRIPTION")
    for target in targets:
        result = results.get(target.name)
        badge = str(result.danger_level) if result else ""
        mark = _COMMENT_MARKS[target.comment_type]
        typer.echo(
            f"{target.name:<{name_width}}  {badge:<{badge_width}}  "
            f"{len(target.dependencies):>4}  {mark:<3}  {target.description}".rstrip()
        )
