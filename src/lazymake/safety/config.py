"""Safety configuration models.

Models:
    - RuleConfig: A user-defined rule as written in .lazymake.yaml
    - SafetyConfig: Settings consumed by the Checker
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import BaseModel, Field, field_validator

from lazymake.safety.rules import Rule, Severity

logger = structlog.get_logger()


class RuleConfig(BaseModel):
    """A custom safety rule.

    Attributes:
        id: Unique identifier for the rule.
        severity: ``critical``, ``warning`` or ``info`` (case-insensitive).
            Missing or unknown values fall back to ``warning``.
        patterns: Regular expressions matched against each recipe line.
        description: Explanation shown when the rule matches.
        suggestion: Safer alternative shown when the rule matches.

    Example:
        custom_rules:
          - id: prod-deploy
            severity: critical
            patterns: ["deploy.*--env=prod"]
            description: Deploys to production
    """

    id: str
    severity: Severity = Severity.WARNING
    patterns: list[str] = Field(default_factory=list)
    description: str = ""
    suggestion: str = ""

    @field_validator("severity", mode="before")
    @classmethod
    def parse_severity(cls, value: Any) -> Severity:
        if isinstance(value, Severity):
            return value
        if value is None:
            return Severity.WARNING
        try:
            return Severity.parse(str(value))
        except ValueError:
            logger.warning("unknown_rule_severity", severity=value, fallback="WARNING")
            return Severity.WARNING

    def to_rule(self) -> Rule:
        """Convert to an immutable Rule."""
        return Rule(
            id=self.id,
            severity=self.severity,
            patterns=tuple(self.patterns),
            description=self.description,
            suggestion=self.suggestion,
        )


class SafetyConfig(BaseModel):
    """Settings for dangerous command detection.

    Attributes:
        enabled: Whether safety checks run at all.
        enabled_rules: Built-in rule IDs to use; empty means all of them.
        exclude_targets: Target names that are never checked.
        custom_rules: Additional user-defined rules, always active.
    """

    enabled: bool = True
    enabled_rules: list[str] = Field(default_factory=list)
    exclude_targets: list[str] = Field(default_factory=list)
    custom_rules: list[RuleConfig] = Field(default_factory=list)
