"""Rule base classes.

A rule computes a value for the current target (``execute``), wraps it in a
:class:`RuleResult` (``create_result``) and attaches every declared
:class:`ValueResult` whose ``match_value`` equals the computed value.
Boolean rules additionally control whether the rest of the run continues.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..context import RuleContext
from ..exceptions import check_not_none
from ..results import RuleResult, ValueResult

logger = logging.getLogger(__name__)


def values_match(match_value: Any, value: Any) -> bool:
    """Check whether a declared match value selects a computed value.

    Both None, or both non-None and equal. A boolean never matches a
    non-boolean, so ``True`` does not select a value result declared for ``1``.
    """
    if match_value is None or value is None:
        return match_value is None and value is None
    if isinstance(match_value, bool) != isinstance(value, bool):
        return False
    return bool(match_value == value)


def default_rule_name(rule_type: type) -> str:
    """Derive a rule name from its class: ``LengthRule`` -> ``Length``."""
    name = rule_type.__name__
    if name.lower().endswith("rule") and len(name) > 4:
        return name[:-4]
    return name


class Rule(ABC):
    """Base class for all rules."""

    def __init__(self):
        self._value_results: list[ValueResult] = []

    @property
    def name(self) -> str:
        """Rule name reported in results."""
        return default_rule_name(type(self))

    @property
    def value_results(self) -> list[ValueResult]:
        """Declared outcomes, selected by the computed value."""
        return self._value_results

    def validate(self, context: RuleContext) -> RuleResult | None:
        """Evaluate the rule.

        Args:
            context: Context of the current rule visit

        Returns:
            Rule result with the matching value results attached, or None if
            ``create_result`` declined to create one

        Raises:
            InvalidArgumentError: If context is None
        """
        check_not_none(context, "context")
        context.rule = self

        value = self.execute(context)
        result = self.create_result(context, value)
        if result is None:
            return None

        result.value_results.extend(self.select_value_results(context, result.value))
        return result

    @abstractmethod
    def execute(self, context: RuleContext) -> Any:
        """Compute the rule value for the current target."""

    def create_result(self, context: RuleContext, value: Any) -> RuleResult | None:
        check_not_none(context, "context")
        return RuleResult(self.name, value)

    def select_value_results(self, context: RuleContext, value: Any) -> list[ValueResult]:
        """Select the declared value results matching a computed value."""
        check_not_none(context, "context")
        return [
            value_result
            for value_result in self.value_results
            if value_result is not None and values_match(value_result.match_value, value)
        ]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class BooleanRule(Rule):
    """Base class for rules computing a boolean outcome.

    After evaluation the rule assigns the validator context's continue flag:
    a False outcome halts the rest of the run unless
    ``continue_validation_when_false`` is set, and any other outcome sets the
    flag back to True. A rule producing no result leaves the flag untouched.

    Args:
        continue_validation_when_false: Keep validating after a False outcome
    """

    def __init__(self, continue_validation_when_false: bool = False):
        super().__init__()
        self.continue_validation_when_false = continue_validation_when_false

    def validate(self, context: RuleContext) -> RuleResult | None:
        result = super().validate(context)
        if result is None:
            return None

        halted = result.value is False and not self.continue_validation_when_false
        context.validator_context.continue_validation = not halted
        if halted:
            logger.debug(
                f"Rule {self.name} failed on target "
                f"{context.target_context.target.name!r}; halting validation"
            )
        return result

    @abstractmethod
    def execute(self, context: RuleContext) -> bool:
        """Compute the boolean outcome for the current target."""


__all__ = ["Rule", "BooleanRule", "values_match", "default_rule_name"]
