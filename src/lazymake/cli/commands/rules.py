"""Rules command for lazymake CLI.

This module provides the `lazymake rules` command that lists the built-in
safety rules, for use in the `enabled_rules` configuration setting.
"""

import json

import typer

from lazymake.cli.loading import JsonOption
from lazymake.safety import BUILTIN_RULES


def rules_command(
    json_output: JsonOption = False,
) -> None:
    """Show the built-in safety rules."""
    if json_output:
        typer.echo(json.dumps([rule.to_dict() for rule in BUILTIN_RULES], indent=2))
        return

    id_width = max(len(rule.id) for rule in BUILTIN_RULES)
    for rule in BUILTIN_RULES:
        typer.echo(f"{rule.id:<{id_width}}  {str(rule.severity):<8}  {rule.description}")
