"""Dangerous command detection for Makefile recipes.

Modules:
    - rules: Severity, Rule and result types
    - builtin_rules: The built-in rule catalog
    - context: Context-aware severity adjustment
    - config: SafetyConfig and RuleConfig models
    - checker: The Checker that ties them together
"""

from lazymake.safety.builtin_rules import BUILTIN_RULES, get_builtin_rule
from lazymake.safety.checker import Checker
from lazymake.safety.config import RuleConfig, SafetyConfig
from lazymake.safety.context import adjust_severity
from lazymake.safety.rules import (
    CompiledRule,
    MatchResult,
    Rule,
    SafetyCheckResult,
    Severity,
)

__all__ = [
    "BUILTIN_RULES",
    "Checker",
    "CompiledRule",
    "MatchResult",
    "Rule",
    "RuleConfig",
    "SafetyCheckResult",
    "SafetyConfig",
    "Severity",
    "adjust_severity",
    "get_builtin_rule",
]
