"""Dependency graph building, analysis and rendering.

Modules:
    - builder: Node, Graph and build_graph() with cycle, order, critical path
      and parallelism analysis
    - render: TreeRenderer, render_tree() and render_legend()
"""

from lazymake.graph.builder import (
    PLACEHOLDER_DESCRIPTION,
    Graph,
    Node,
    NodeKind,
    build_graph,
    detect_cycle,
)
from lazymake.graph.render import TreeRenderer, render_legend, render_tree

__all__ = [
    "PLACEHOLDER_DESCRIPTION",
    "Graph",
    "Node",
    "NodeKind",
    "TreeRenderer",
    "build_graph",
    "detect_cycle",
    "render_legend",
    "render_tree",
]
