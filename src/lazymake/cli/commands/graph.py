"""Graph command for lazymake CLI.

This module provides the `lazymake graph` command that renders the target
dependency tree with execution order, critical path and parallelism markers.

Exit codes:
    0: Success
    1: Makefile unreadable, unknown --target, or circular dependency
    2: Configuration error, or --depth without --target
"""

import json
from typing import Annotated

import typer

from lazymake.cli.loading import (
    EXIT_ANALYSIS_ERROR,
    ConfigOption,
    JsonOption,
    MakefileArgument,
    load_config,
    load_targets,
)
from lazymake.graph import (
    PLACEHOLDER_DESCRIPTION,
    Graph,
    TreeRenderer,
    build_graph,
    render_legend,
)


def graph_command(
    makefile: MakefileArgument = None,
    config: ConfigOption = None,
    target: Annotated[
        str | None,
        typer.Option(
            "--target",
            "-t",
            help="Only show the dependencies of this target",
        ),
    ] = None,
    depth: Annotated[
        int,
        typer.Option(
            "--depth",
            "-d",
            help="Maximum dependency depth, requires --target (-1 = unlimited)",
        ),
    ] = -1,
    no_order: Annotated[
        bool,
        typer.Option("--no-order", help="Hide execution order numbers"),
    ] = False,
    no_critical: Annotated[
        bool,
        typer.Option("--no-critical", help="Hide critical path markers"),
    ] = False,
    no_parallel: Annotated[
        bool,
        typer.Option("--no-parallel", help="Hide parallel markers"),
    ] = False,
    json_output: JsonOption = False,
) -> None:
    """Show the dependency graph of the Makefile as a tree."""
    if target is None and depth != -1:
        raise typer.BadParameter("requires --target", param_hint="'--depth'")

    settings = load_config(config)
    _, targets = load_targets(makefile, settings)

    graph = build_graph(targets)

    if target is not None:
        if graph.get_node(target) is None:
            typer.echo(f"Error: Unknown target: {target}", err=True)
            raise typer.Exit(EXIT_ANALYSIS_ERROR)
        graph = graph.get_subgraph(target, depth)

    if json_output:
        data = graph.to_dict()
        data["execution_levels"] = {str(k): v for k, v in graph.execution_levels().items()}
        typer.echo(json.dumps(data, indent=2))
        if graph.has_cycle:
            raise typer.Exit(EXIT_ANALYSIS_ERROR)
        return

    renderer = TreeRenderer(
        show_order=not no_order,
        show_critical=not no_critical,
        show_parallel=not no_parallel,
    )
    typer.echo(graph.render_tree(renderer), nl=False)

    if graph.has_cycle:
        raise typer.Exit(EXIT_ANALYSIS_ERROR)

    if not graph.nodes:
        return

    legend = render_legend(renderer.show_order, renderer.show_critical, renderer.show_parallel)
    if legend:
        typer.echo()
        typer.echo(legend)

    _display_missing(graph)


def _display_missing(graph: Graph) -> None:
    """List dependencies that have no target definition."""
    if not graph.missing_deps:
        return

    typer.echo()
    typer.echo("Missing dependencies:")
    for name, deps in graph.missing_deps.items():
        for dep in deps:
            typer.echo(f"  {name} → {dep} {PLACEHOLDER_DESCRIPTION}")
