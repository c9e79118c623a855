"""Context-aware severity adjustment.

A rule's base severity is lowered when the surrounding context makes the
command less alarming: cleanup targets are expected to delete things,
interactive commands prompt before acting, and development targets rarely
touch production. Adjustments only ever lower a severity.
"""

from __future__ import annotations

import re

from lazymake.parser import Target
from lazymake.safety.rules import Rule, Severity

CLEAN_KEYWORDS = (
    "clean",
    "distclean",
    "purge",
    "reset",
    "nuke",
    "remove",
    "delete",
    "wipe",
    "clear",
)

DEV_KEYWORDS = (
    "dev",
    "develop",
    "development",
    "test",
    "testing",
    "local",
    "localhost",
    "docker",
    "compose",
    "demo",
    "example",
    "sample",
)

PRODUCTION_KEYWORDS = ("prod", "production", "master", "main", "live", "release")

CRITICAL_SYSTEM_KEYWORDS = (
    "db",
    "database",
    "prod",
    "production",
    "schema",
    "migration",
    "backup",
    "restore",
)

_INTERACTIVE_FLAG = re.compile(r"\s+-\w*i\w*(\s|$)|--interactive")
_PRODUCTION_WORDS = [re.compile(rf"\b{re.escape(kw)}\b") for kw in PRODUCTION_KEYWORDS]


def adjust_severity(target: Target, rule: Rule, matched_line: str) -> Severity:
    """Compute the final severity of a rule match from its context.

    Adjustments apply in order, each lowering by at most one step:

    1. Cleanup targets (``clean``, ``purge``, ...) are downgraded unless the
       target name or command mentions databases, production or backups.
    2. Commands with an interactive flag (``-i``, ``--interactive``) are
       downgraded.
    3. Development targets (``dev``, ``test``, ``local``, ...) have CRITICAL
       lowered to WARNING unless the command mentions production.

    Args:
        target: The target whose recipe matched.
        rule: The matching rule.
        matched_line: The recipe line that matched.

    Returns:
        The adjusted severity, never higher than ``rule.severity``.
    """
    severity = rule.severity

    if is_clean_target(target.name) and not affects_critical_systems(target.name, matched_line):
        severity = severity.downgrade()

    if has_interactive_flag(matched_line):
        severity = severity.downgrade()

    if (
        is_development_target(target.name)
        and not contains_production_keywords(matched_line)
        and severity is Severity.CRITICAL
    ):
        severity = Severity.WARNING

    return severity


def is_clean_target(name: str) -> bool:
    """Whether the target name looks like a cleanup target."""
    lower = name.lower()
    return any(kw in lower for kw in CLEAN_KEYWORDS)


def has_interactive_flag(line: str) -> bool:
    """Whether the command prompts before acting (``rm -i``, ``--interactive``)."""
    return _INTERACTIVE_FLAG.search(line) is not None


def is_development_target(name: str) -> bool:
    """Whether the target name suggests a development or test environment."""
    lower = name.lower()
    return any(kw in lower for kw in DEV_KEYWORDS)


def contains_production_keywords(line: str) -> bool:
    """Whether the command mentions production as a whole word."""
    lower = line.lower()
    return any(pattern.search(lower) for pattern in _PRODUCTION_WORDS)


def affects_critical_systems(name: str, line: str) -> bool:
    """Whether the target name or command touches databases, production or backups."""
    combined = f"{name} {line}".lower()
    return any(kw in combined for kw in CRITICAL_SYSTEM_KEYWORDS)
