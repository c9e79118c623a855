"""Dependency graph construction and analysis.

This module builds a node/edge graph from parsed targets and annotates it
with execution analysis.

Construction phases (in order):
    1. Node creation, one per target
    2. Edge wiring; unknown dependency names become placeholder nodes
    3. Cycle detection (three-color DFS)
    4. Topological leveling (Kahn's algorithm, one Order value per BFS round)
    5. Critical path marking (every node on any longest chain)
    6. Parallelism marking (nodes sharing a level inside a dependency chain)
    7. Root identification (nodes nothing depends on)

Phases 4-6 only run on acyclic graphs; on a cyclic graph the order,
critical and parallel annotations stay at their zero values.

All traversals use explicit stacks, so very long dependency chains are safe.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog

from lazymake.parser import Target

if TYPE_CHECKING:
    from lazymake.graph.render import TreeRenderer

logger = structlog.get_logger()

PLACEHOLDER_DESCRIPTION = "(external or file dependency)"

# Depth used for "unlimited" subgraph extraction
UNLIMITED_DEPTH = 999_999


class NodeKind(str, Enum):
    """Whether a node wraps a parsed target or stands in for a missing one."""

    REAL = "real"
    PLACEHOLDER = "placeholder"


@dataclass(eq=False)
class Node:
    """A single target in the dependency graph.

    Attributes:
        target: The wrapped target. For placeholders this is a synthesized
            target with no dependencies or recipe.
        kind: REAL for parsed targets, PLACEHOLDER for unresolved names.
        dependencies: Outgoing edges, the nodes that must run before this one.
        dependents: Incoming edges, the nodes whose dependencies include this one.
        order: Topological level starting at 1; 0 means unassigned.
        is_critical: Whether the node lies on a longest dependency chain.
        can_parallel: Whether the node can run alongside others at its level.
    """

    target: Target
    kind: NodeKind = NodeKind.REAL
    dependencies: list[Node] = field(default_factory=list)
    dependents: list[Node] = field(default_factory=list)
    order: int = 0
    is_critical: bool = False
    can_parallel: bool = False

    @property
    def name(self) -> str:
        return self.target.name

    @property
    def is_placeholder(self) -> bool:
        return self.kind is NodeKind.PLACEHOLDER

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary, referencing neighbours by name."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "description": self.target.description,
            "dependencies": [dep.name for dep in self.dependencies],
            "dependents": [dep.name for dep in self.dependents],
            "order": self.order,
            "is_critical": self.is_critical,
            "can_parallel": self.can_parallel,
        }

    def __repr__(self) -> str:
        return f"Node({self.name!r}, kind={self.kind.value}, order={self.order})"


@dataclass
class Graph:
    """The complete dependency graph.

    Attributes:
        nodes: Target name to node, including placeholders.
        roots: Nodes with no dependents; nothing is gated on them.
        has_cycle: Whether a circular dependency was found.
        cycle_nodes: The cycle as a closed walk (first element equals last).
        missing_deps: Target name to the dependency names it could not resolve.
    """

    nodes: dict[str, Node] = field(default_factory=dict)
    roots: list[Node] = field(default_factory=list)
    has_cycle: bool = False
    cycle_nodes: list[str] = field(default_factory=list)
    missing_deps: dict[str, list[str]] = field(default_factory=dict)

    def get_node(self, name: str) -> Node | None:
        """Look up a node by target name."""
        return self.nodes.get(name)

    def get_subgraph(self, target_name: str, max_depth: int = -1) -> Graph:
        """Extract the part of the graph reachable from one target.

        Performs a BFS along dependency edges. The returned graph shares Node
        objects with this graph and inherits its cycle information.

        Args:
            target_name: The target to center the subgraph on.
            max_depth: How many dependency hops to follow. 0 returns only the
                target itself; a negative value means unlimited.

        Returns:
            The subgraph, or an empty graph if the target is unknown.
        """
        if max_depth < 0:
            max_depth = UNLIMITED_DEPTH

        root = self.nodes.get(target_name)
        if root is None:
            return Graph()

        subgraph = Graph(
            roots=[root],
            has_cycle=self.has_cycle,
            cycle_nodes=list(self.cycle_nodes),
        )

        queue: deque[tuple[Node, int]] = deque([(root, 0)])
        while queue:
            node, depth = queue.popleft()
            if node.name in subgraph.nodes:
                continue
            subgraph.nodes[node.name] = node

            if depth < max_depth:
                for dep in node.dependencies:
                    if dep.name not in subgraph.nodes:
                        queue.append((dep, depth + 1))

        return subgraph

    def execution_levels(self) -> dict[int, list[str]]:
        """Group target names by their Order value (acyclic graphs only)."""
        levels: dict[int, list[str]] = {}
        for node in self.nodes.values():
            if node.order > 0:
                levels.setdefault(node.order, []).append(node.name)
        return dict(sorted(levels.items()))

    def critical_nodes(self) -> list[Node]:
        """Return the nodes marked as lying on a critical path."""
        return [node for node in self.nodes.values() if node.is_critical]

    def render_tree(self, renderer: TreeRenderer | None = None) -> str:
        """Render the graph as an ASCII tree. See lazymake.graph.render."""
        from lazymake.graph.render import TreeRenderer, render_tree

        return render_tree(self, renderer or TreeRenderer())

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "nodes": [node.to_dict() for node in self.nodes.values()],
            "roots": [node.name for node in self.roots],
            "has_cycle": self.has_cycle,
            "cycle": list(self.cycle_nodes),
            "missing_deps": {k: list(v) for k, v in self.missing_deps.items()},
        }


# =============================================================================
# Construction
# =============================================================================


def build_graph(targets: list[Target]) -> Graph:
    """Construct and analyze the dependency graph for parsed targets.

    Never fails: unknown dependency names become placeholder nodes and are
    reported in ``missing_deps``, and a cyclic graph is returned with
    ``has_cycle`` set.

    Args:
        targets: Parsed targets. A later definition of the same name replaces
            an earlier one.

    Returns:
        The analyzed graph.
    """
    graph = Graph()

    for target in targets:
        graph.nodes[target.name] = Node(target=target)

    _wire_edges(graph)

    graph.has_cycle, graph.cycle_nodes = detect_cycle(graph)

    if graph.has_cycle:
        logger.warning("dependency_cycle_detected", cycle=" → ".join(graph.cycle_nodes))
    else:
        _assign_execution_order(graph)
        _mark_critical_path(graph)
        _mark_parallel_opportunities(graph)

    graph.roots = [node for node in graph.nodes.values() if not node.dependents]

    logger.debug(
        "graph_built",
        nodes=len(graph.nodes),
        roots=len(graph.roots),
        missing=sum(len(v) for v in graph.missing_deps.values()),
        has_cycle=graph.has_cycle,
    )
    return graph


def _wire_edges(graph: Graph) -> None:
    """Link every node to its dependencies, creating placeholders as needed."""
    for node in list(graph.nodes.values()):
        for dep_name in node.target.dependencies:
            dep = graph.nodes.get(dep_name)

            if dep is None:
                dep = Node(
                    target=Target(name=dep_name, description=PLACEHOLDER_DESCRIPTION),
                    kind=NodeKind.PLACEHOLDER,
                )
                graph.nodes[dep_name] = dep

            if dep in node.dependencies:
                continue

            if dep.is_placeholder:
                graph.missing_deps.setdefault(node.name, []).append(dep_name)

            node.dependencies.append(dep)
            dep.dependents.append(node)


def detect_cycle(graph: Graph) -> tuple[bool, list[str]]:
    """Find a circular dependency using a three-color depth-first search.

    Returns:
        Tuple of (has_cycle, cycle). The cycle is a closed walk such as
        ``["A", "B", "C", "A"]``; it is empty when there is no cycle.
    """
    white, gray, black = 0, 1, 2
    color: dict[str, int] = dict.fromkeys(graph.nodes, white)
    parent: dict[str, str] = {}

    for start in graph.nodes:
        if color[start] != white:
            continue

        color[start] = gray
        stack = [(start, iter(graph.nodes[start].dependencies))]

        while stack:
            name, deps = stack[-1]
            advanced = False

            for dep in deps:
                if color[dep.name] == gray:
                    return True, _reconstruct_cycle(dep.name, name, parent)
                if color[dep.name] == white:
                    parent[dep.name] = name
                    color[dep.name] = gray
                    stack.append((dep.name, iter(dep.dependencies)))
                    advanced = True
                    break

            if not advanced:
                color[name] = black
                stack.pop()

    return False, []


def _reconstruct_cycle(cycle_start: str, cycle_end: str, parent: dict[str, str]) -> list[str]:
    """Walk parent links from cycle_end back to cycle_start and close the loop."""
    path: list[str] = []
    current = cycle_end
    while current != cycle_start:
        path.append(current)
        current = parent[current]

    return [cycle_start, *reversed(path), cycle_start]


def _assign_execution_order(graph: Graph) -> None:
    """Kahn's algorithm; every node dequeued in the same round shares an Order."""
    in_degree = {name: len(node.dependencies) for name, node in graph.nodes.items()}
    queue = deque(node for node in graph.nodes.values() if not node.dependencies)

    order = 0
    while queue:
        order += 1
        for _ in range(len(queue)):
            node = queue.popleft()
            node.order = order

            for dependent in node.dependents:
                in_degree[dependent.name] -= 1
                if in_degree[dependent.name] == 0:
                    queue.append(dependent)


def _compute_depths(graph: Graph) -> dict[str, int]:
    """Longest dependency chain below each node (0 for leaves)."""
    depth: dict[str, int] = {}

    for start in graph.nodes.values():
        if start.name in depth:
            continue

        stack = [start]
        while stack:
            node = stack[-1]
            if node.name in depth:
                stack.pop()
                continue

            pending = [dep for dep in node.dependencies if dep.name not in depth]
            if pending:
                stack.extend(pending)
                continue

            stack.pop()
            depth[node.name] = (
                1 + max(depth[dep.name] for dep in node.dependencies)
                if node.dependencies
                else 0
            )

    return depth


def _mark_critical_path(graph: Graph) -> None:
    """Mark every node lying on any longest dependency chain.

    Standalone targets are never critical: with no edges at all the maximum
    depth is zero and nothing is marked.
    """
    depth = _compute_depths(graph)
    max_depth = max(depth.values(), default=0)
    if max_depth == 0:
        return

    stack = [
        node
        for node in graph.nodes.values()
        if depth[node.name] == max_depth and node.dependencies
    ]
    for node in stack:
        node.is_critical = True

    while stack:
        node = stack.pop()
        for dep in node.dependencies:
            if dep.is_critical or dep.is_placeholder:
                continue
            if depth[dep.name] == depth[node.name] - 1:
                dep.is_critical = True
                stack.append(dep)


def _mark_parallel_opportunities(graph: Graph) -> None:
    """Mark nodes that share a level with other nodes inside a chain.

    Only nodes with at least one dependency are grouped, so independent
    standalone targets are never labelled parallel.
    """
    groups: dict[int, list[Node]] = {}
    for node in graph.nodes.values():
        if node.dependencies:
            groups.setdefault(node.order, []).append(node)

    for group in groups.values():
        if len(group) > 1:
            for node in group:
                node.can_parallel = True
