"""Safety rule types and check results.

Classes:
    - Severity: Ordered danger level (INFO < WARNING < CRITICAL)
    - Rule: An immutable rule definition (ID, severity, regex patterns, text)
    - CompiledRule: A rule together with its compiled patterns
    - MatchResult: One rule matching one target
    - SafetyCheckResult: Every match for a target plus its overall danger level
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from lazymake.errors import RuleCompileError


class Severity(IntEnum):
    """Danger level of a matched rule.

    INFO is logged only, WARNING is shown to the user, and CRITICAL asks for
    confirmation before the target runs.
    """

    INFO = 0
    WARNING = 1
    CRITICAL = 2

    def __str__(self) -> str:
        return self.name

    def downgrade(self) -> Severity:
        """Return the next lower severity (INFO stays INFO)."""
        return Severity(max(self.value - 1, Severity.INFO.value))

    @classmethod
    def parse(cls, value: str) -> Severity:
        """Parse a severity name such as ``"critical"`` or ``"WARNING"``.

        Raises:
            ValueError: If the name is not a known severity.
        """
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {value!r}") from None


@dataclass(frozen=True)
class Rule:
    """Defines patterns that identify a dangerous recipe command.

    Attributes:
        id: Unique identifier such as ``"rm-rf-root"``.
        severity: Base severity before context adjustment.
        patterns: Regular expressions, OR-matched against each recipe line.
        description: User-facing explanation of the danger.
        suggestion: Safer alternative or precaution.
    """

    id: str
    severity: Severity
    patterns: tuple[str, ...]
    description: str = ""
    suggestion: str = ""

    def compile(self) -> CompiledRule:
        """Compile the rule's patterns.

        Raises:
            RuleCompileError: If any pattern is not a valid regular expression.
        """
        compiled = []
        for pattern in self.patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise RuleCompileError(self.id, pattern, cause=e) from e
        return CompiledRule(rule=self, compiled_patterns=tuple(compiled))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "id": self.id,
            "severity": str(self.severity),
            "patterns": list(self.patterns),
            "description": self.description,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class CompiledRule:
    """A rule whose patterns have been compiled."""

    rule: Rule
    compiled_patterns: tuple[re.Pattern[str], ...]

    @property
    def id(self) -> str:
        return self.rule.id

    def match(self, recipe: list[str]) -> str | None:
        """Return the first recipe line matching any pattern, or None."""
        for line in recipe:
            for pattern in self.compiled_patterns:
                if pattern.search(line):
                    return line
        return None


@dataclass(frozen=True)
class MatchResult:
    """A rule match for a specific target.

    Attributes:
        target: Name of the target that matched.
        rule: The rule that matched.
        matched_line: The recipe line that triggered the rule.
        severity: Final severity after context adjustment.
    """

    target: str
    rule: Rule
    matched_line: str
    severity: Severity

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "rule_id": self.rule.id,
            "base_severity": str(self.rule.severity),
            "severity": str(self.severity),
            "matched_line": self.matched_line,
            "description": self.rule.description,
            "suggestion": self.rule.suggestion,
        }


@dataclass(frozen=True)
class SafetyCheckResult:
    """The complete safety check for one dangerous target.

    Safe targets have no result at all, so a present result always has at
    least one match.

    Attributes:
        target_name: The checked target.
        danger_level: Highest adjusted severity across all matches.
        matches: Every rule that matched, in rule order.
    """

    target_name: str
    danger_level: Severity
    matches: tuple[MatchResult, ...] = field(default_factory=tuple)

    @property
    def is_dangerous(self) -> bool:
        return bool(self.matches)

    @property
    def requires_confirmation(self) -> bool:
        """Whether running the target should be blocked pending confirmation."""
        return self.danger_level is Severity.CRITICAL

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "target": self.target_name,
            "danger_level": str(self.danger_level),
            "requires_confirmation": self.requires_confirmation,
            "matches": [match.to_dict() for match in self.matches],
        }
