"""Structural rules: groups, conditionals, custom callbacks and delegation.

These rules walk children or hand off to callbacks instead of computing a
value, so their leaf hooks raise :class:`LeafNotImplementedError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..context import RuleContext, ValidatorContext
from ..exceptions import LeafNotImplementedError, NotSupportedError, check_not_none
from ..results import GroupRuleResult, RuleResult, ValidatorRuleResult, ValueResult
from .base import Rule

logger = logging.getLogger(__name__)

RuleCondition = Callable[[RuleContext], bool]
RuleCallback = Callable[[RuleContext], "RuleResult | None"]


class GroupRule(Rule):
    """Named container of rules evaluated in order.

    Args:
        name: Group name reported in results
    """

    def __init__(self, name: str | None):
        super().__init__()
        self._name = name or ""
        self._rules: list[Rule | None] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def rules(self) -> list[Rule | None]:
        return self._rules

    def validate(self, context: RuleContext) -> RuleResult | None:
        check_not_none(context, "context")
        context.rule = self

        result = self.create_result(context, None)
        if result is None:
            return None

        target_context = context.target_context
        validator_context = target_context.validator_context
        for rule in self._rules:
            if not validator_context.continue_validation:
                return result

            if rule is None:
                continue

            rule_result = rule.validate(RuleContext(None, target_context))
            if rule_result is None:
                continue

            if validator_context.accepts(rule_result):
                result.rule_results.append(rule_result)

        return result

    def execute(self, context: RuleContext) -> Any:
        raise LeafNotImplementedError(self, "execute")

    def create_result(self, context: RuleContext, value: Any) -> GroupRuleResult | None:
        check_not_none(context, "context")
        return GroupRuleResult(self.name)

    def select_value_results(self, context: RuleContext, value: Any) -> list[ValueResult]:
        raise LeafNotImplementedError(self, "select_value_results")


class ConditionalRule(Rule):
    """Transparent wrapper evaluating another rule only under a condition.

    The name and value results are those of the wrapped rule.

    Args:
        rule: Wrapped rule
        condition: Predicate over the current :class:`RuleContext`
    """

    def __init__(self, rule: Rule, condition: RuleCondition):
        check_not_none(rule, "rule")
        check_not_none(condition, "condition")
        super().__init__()
        self._rule = rule
        self._condition = condition

    @property
    def rule(self) -> Rule:
        return self._rule

    @rule.setter
    def rule(self, value: Rule) -> None:
        check_not_none(value, "rule")
        self._rule = value

    @property
    def condition(self) -> RuleCondition:
        return self._condition

    @condition.setter
    def condition(self, value: RuleCondition) -> None:
        check_not_none(value, "condition")
        self._condition = value

    @property
    def name(self) -> str:
        return self._rule.name

    @property
    def value_results(self) -> list[ValueResult]:
        return self._rule.value_results

    def validate(self, context: RuleContext) -> RuleResult | None:
        raise NotSupportedError(
            f"{type(self).__name__} cannot be validated directly",
            context={"type": type(self).__name__},
        )

    def execute(self, context: RuleContext) -> Any:
        raise LeafNotImplementedError(self, "execute")

    def create_result(self, context: RuleContext, value: Any) -> RuleResult | None:
        raise LeafNotImplementedError(self, "create_result")

    def select_value_results(self, context: RuleContext, value: Any) -> list[ValueResult]:
        raise LeafNotImplementedError(self, "select_value_results")


class IfRule(ConditionalRule):
    """Evaluates the wrapped rule when the condition holds."""

    def validate(self, context: RuleContext) -> RuleResult | None:
        check_not_none(context, "context")
        return self.rule.validate(context) if self.condition(context) else None


class IfNotRule(ConditionalRule):
    """Evaluates the wrapped rule when the condition does not hold."""

    def validate(self, context: RuleContext) -> RuleResult | None:
        check_not_none(context, "context")
        return self.rule.validate(context) if not self.condition(context) else None


class CustomRule(Rule):
    """Rule whose whole result is built by a callback.

    The callback receives the :class:`RuleContext` and returns a
    :class:`RuleResult` (usually a ``CustomRuleResult``) or None. This rule's
    value results are still selected against the returned result's value.
    The callback is responsible for setting ``context.rule`` if it needs it.

    Example:
        ```python
        def even(context):
            value = context.target_value()
            return CustomRuleResult("Even", value is None or value % 2 == 0)

        target.rules.append(CustomRule(even))
        ```
    """

    def __init__(self, rule_validator: RuleCallback):
        super().__init__()
        check_not_none(rule_validator, "rule_validator")
        self._rule_validator = rule_validator

    @property
    def rule_validator(self) -> RuleCallback:
        return self._rule_validator

    @rule_validator.setter
    def rule_validator(self, value: RuleCallback) -> None:
        check_not_none(value, "rule_validator")
        self._rule_validator = value

    def validate(self, context: RuleContext) -> RuleResult | None:
        check_not_none(context, "context")

        result = self._rule_validator(context)
        if result is None:
            return None

        result.value_results.extend(
            value_result
            for value_result in Rule.select_value_results(self, context, result.value)
            if value_result is not None
        )
        return result

    def execute(self, context: RuleContext) -> Any:
        raise LeafNotImplementedError(self, "execute")

    def create_result(self, context: RuleContext, value: Any) -> RuleResult | None:
        raise LeafNotImplementedError(self, "create_result")


class ValidatorRule(Rule):
    """Delegates validation of the target value to the validator of its type.

    The validator is resolved through the provider by the value's runtime
    type. The nested run gets its own :class:`ValidatorContext` whose parent is
    the current one and whose flags are copied from it, so a halt inside the
    nested run does not leak out. A None value or an unregistered type yields
    a result without a nested validator result.
    """

    @property
    def name(self) -> str:
        return "Validator"

    def validate(self, context: RuleContext) -> RuleResult | None:
        check_not_none(context, "context")
        context.rule = self

        result = self.create_result(context, None)
        if result is None:
            return None

        value = context.target_value()
        if value is None:
            return result

        validator_context = context.validator_context
        provider = validator_context.validator_provider
        validator = provider.get_validator(type(value))
        if validator is None:
            logger.debug(f"No validator registered for {type(value).__name__}; skipping delegation")
            return result

        if not provider.is_cached:
            validator.setup()

        logger.debug(f"Delegating {type(value).__name__} to {type(validator).__name__}")
        result.validator_result = validator.validate(
            ValidatorContext(
                value,
                None,
                provider,
                validator_context,
                validator_context.continue_validation,
                validator_context.ignore_empty_results,
            )
        )
        return result

    def execute(self, context: RuleContext) -> Any:
        raise LeafNotImplementedError(self, "execute")

    def create_result(self, context: RuleContext, value: Any) -> ValidatorRuleResult | None:
        check_not_none(context, "context")
        return ValidatorRuleResult(self.name, None)

    def select_value_results(self, context: RuleContext, value: Any) -> list[ValueResult]:
        raise LeafNotImplementedError(self, "select_value_results")


__all__ = [
    "GroupRule",
    "ConditionalRule",
    "IfRule",
    "IfNotRule",
    "CustomRule",
    "ValidatorRule",
]
