"""Safety checker that evaluates target recipes against compiled rules."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from lazymake.errors import RuleCompileError
from lazymake.parser import Target
from lazymake.safety.builtin_rules import BUILTIN_RULES
from lazymake.safety.config import SafetyConfig
from lazymake.safety.context import adjust_severity
from lazymake.safety.rules import CompiledRule, MatchResult, Rule, SafetyCheckResult

logger = structlog.get_logger()


class Checker:
    """Checks targets for dangerous recipe commands.

    Rules are compiled once at construction. A rule with an invalid pattern
    is dropped with a logged warning; the remaining rules still apply.

    Args:
        config: Safety settings. Defaults to all built-in rules enabled.
        catalog: The built-in rules to draw from, filtered by
            ``config.enabled_rules``.

    Example:
        >>> checker = Checker(SafetyConfig(exclude_targets=["clean"]))
        >>> result = checker.check_target(target)
        >>> if result and result.requires_confirmation:
        ...     ...
    """

    def __init__(
        self,
        config: SafetyConfig | None = None,
        catalog: Sequence[Rule] = BUILTIN_RULES,
    ) -> None:
        self.config = config or SafetyConfig()
        self._excluded = frozenset(self.config.exclude_targets)
        self._rules: list[CompiledRule] = []

        if self.config.enabled:
            enabled = set(self.config.enabled_rules)
            for rule in catalog:
                if enabled and rule.id not in enabled:
                    continue
                self._add_rule(rule)

        for custom in self.config.custom_rules:
            self._add_rule(custom.to_rule())

        logger.debug("safety_checker_ready", rules=len(self._rules), enabled=self.config.enabled)

    def _add_rule(self, rule: Rule) -> None:
        try:
            self._rules.append(rule.compile())
        except RuleCompileError as e:
            logger.warning("rule_skipped", rule_id=e.rule_id, pattern=e.pattern, error=str(e.cause))

    @property
    def rules(self) -> list[Rule]:
        """The active rules, in evaluation order."""
        return [compiled.rule for compiled in self._rules]

    def check_target(self, target: Target) -> SafetyCheckResult | None:
        """Check one target's recipe.

        Returns:
            The result when at least one rule matched; None when checks are
            disabled, the target is excluded, its recipe is empty, or nothing
            matched.
        """
        if not self.config.enabled:
            return None
        if target.name in self._excluded:
            return None
        if not target.recipe:
            return None

        matches = []
        for compiled in self._rules:
            line = compiled.match(target.recipe)
            if line is None:
                continue
            matches.append(
                MatchResult(
                    target=target.name,
                    rule=compiled.rule,
                    matched_line=line,
                    severity=adjust_severity(target, compiled.rule, line),
                )
            )

        if not matches:
            return None

        return SafetyCheckResult(
            target_name=target.name,
            danger_level=max(match.severity for match in matches),
            matches=tuple(matches),
        )

    def check_all_targets(self, targets: Iterable[Target]) -> dict[str, SafetyCheckResult]:
        """Check every target, returning results for dangerous ones only.

        A later target with the same name replaces an earlier one.
        """
        results: dict[str, SafetyCheckResult] = {}
        for target in targets:
            result = self.check_target(target)
            if result is None:
                results.pop(target.name, None)
            else:
                results[target.name] = result
        return results
