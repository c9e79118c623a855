"""ASCII tree rendering for dependency graphs.

Output uses box-drawing characters:

    └── all [3] ★
        ├── build [2] ★ ∥
        │   └── deps [1] ★
        └── test [2] ★ ∥
            └── deps (see above)

Each node is expanded once; later encounters of the same node (shared
dependencies in a diamond) print a back-reference instead, so graphs with
shared subtrees render in linear size. Only nodes present in the graph are
shown, so a depth-limited subgraph stops at its boundary. A cyclic graph
renders only a warning with the cycle path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lazymake.graph.builder import Graph, Node

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "

ORDER_MARK = "[{}]"
CRITICAL_MARK = "★"
PARALLEL_MARK = "∥"


@dataclass(frozen=True)
class TreeRenderer:
    """Controls which annotations appear in a rendered tree.

    Attributes:
        show_order: Show execution order numbers ``[1] [2] [3]``.
        show_critical: Show the critical path marker ``★``.
        show_parallel: Show the parallel marker ``∥``.
    """

    show_order: bool = False
    show_critical: bool = False
    show_parallel: bool = False


def render_tree(graph: Graph, renderer: TreeRenderer) -> str:
    """Render a graph as an ASCII tree, one tree per root.

    Args:
        graph: The graph to render.
        renderer: Annotation options.

    Returns:
        The rendered text, ending with a newline.
    """
    if graph.has_cycle:
        return (
            "⚠️  Circular dependency detected!\n"
            f"Cycle: {' → '.join(graph.cycle_nodes)}\n"
            "\n"
            "Fix the circular dependency in your Makefile before visualizing the graph.\n"
        )

    if not graph.nodes:
        return "No targets found in Makefile.\n"

    lines: list[str] = []
    visited: set[str] = set()

    for index, root in enumerate(graph.roots):
        if index > 0:
            lines.append("")

        # (node, prefix, is_last); children pushed in reverse to keep order
        stack: list[tuple[Node, str, bool]] = [(root, "", True)]
        while stack:
            node, prefix, is_last = stack.pop()
            connector = LAST_BRANCH if is_last else BRANCH

            if node.name in visited:
                lines.append(f"{prefix}{connector}{node.name} (see above)")
                continue
            visited.add(node.name)

            lines.append(f"{prefix}{connector}{format_node(node, renderer)}")

            child_prefix = prefix + (SPACE if is_last else PIPE)
            deps = [dep for dep in node.dependencies if dep.name in graph.nodes]
            for i in range(len(deps) - 1, -1, -1):
                stack.append((deps[i], child_prefix, i == len(deps) - 1))

    return "\n".join(lines) + "\n"


def format_node(node: Node, renderer: TreeRenderer) -> str:
    """Build the display string for one node.

    Examples:
        "build"
        "build [2] ★ ∥"
        "build [2] ★ ∥ — Build the app"
    """
    parts = [node.name]

    if renderer.show_order and node.order > 0:
        parts.append(ORDER_MARK.format(node.order))
    if renderer.show_critical and node.is_critical:
        parts.append(CRITICAL_MARK)
    if renderer.show_parallel and node.can_parallel:
        parts.append(PARALLEL_MARK)

    result = " ".join(parts)
    if node.target.description:
        result += f" — {node.target.description}"
    return result


def render_legend(show_order: bool, show_critical: bool, show_parallel: bool) -> str:
    """Explain the annotation symbols; empty when no annotation is shown."""
    parts = []
    if show_order:
        parts.append("[N] = execution order")
    if show_critical:
        parts.append(f"{CRITICAL_MARK} = critical path")
    if show_parallel:
        parts.append(f"{PARALLEL_MARK} = can run in parallel")

    if not parts:
        return ""
    return "Legend: " + ", ".join(parts)
