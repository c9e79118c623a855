"""lazymake CLI module.

This module provides the command-line interface for lazymake, enabling users to:
    - List Makefile targets with `lazymake list`
    - Visualize the dependency graph with `lazymake graph`
    - Find dangerous recipes with `lazymake check`
    - Browse the built-in safety rules with `lazymake rules`
    - Create a configuration file with `lazymake init`
"""
