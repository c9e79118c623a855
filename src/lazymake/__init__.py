"""lazymake - Makefile analysis engine and terminal tool.

Parses Makefile targets, builds an analyzed dependency graph (cycles,
execution order, critical path, parallelism) and flags dangerous recipe
commands with context-aware severity.

Example:
    from lazymake import Checker, build_graph, parse

    targets = parse("Makefile")
    graph = build_graph(targets)
    print(graph.render_tree())
    dangerous = Checker().check_all_targets(targets)
"""

from lazymake.errors import (
    ConfigError,
    ErrorCode,
    FileError,
    LazymakeError,
    RuleCompileError,
    ScanError,
)
from lazymake.parser import CommentType, Target, parse, parse_lines, parse_string
from lazymake.graph import Graph, Node, NodeKind, TreeRenderer, build_graph
from lazymake.safety import Checker, SafetyCheckResult, SafetyConfig, Severity
from lazymake.config import LazymakeSettings, load_merged_settings, load_settings

__version__ = "0.1.0"

__all__ = [
    "Checker",
    "CommentType",
    "ConfigError",
    "ErrorCode",
    "FileError",
    "Graph",
    "LazymakeError",
    "LazymakeSettings",
    "Node",
    "NodeKind",
    "RuleCompileError",
    "SafetyCheckResult",
    "SafetyConfig",
    "ScanError",
    "Severity",
    "Target",
    "TreeRenderer",
    "__version__",
    "build_graph",
    "load_merged_settings",
    "load_settings",
    "parse",
    "parse_lines",
    "parse_string",
]
