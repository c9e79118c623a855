"""CLI commands for lazymake.

This package contains the implementation of CLI commands:
    - targets: List targets (`lazymake list`)
    - graph: Render the dependency graph
    - check: Run safety checks
    - rules: Show the built-in safety rules
    - init: Create a .lazymake.yaml
    - version: Show version information
"""
