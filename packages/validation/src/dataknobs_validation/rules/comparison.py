"""Comparison rules.

:class:`ComparisonRule` compares the target value with an operand supplied by
a callback, and :class:`TargetComparisonRule` compares it with the value of
another target. Item targets on either side are treated as sets of values:
an :class:`AnyOfTarget` side is existentially quantified, any other side
universally.

Example:
    ```python
    rule = ComparisonRule.with_value(18, Comparison.GREATER_THAN_OR_EQUAL)
    rule.name
    # 'GreaterThanOrEqual'
    ```
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from ..context import RuleContext
from ..exceptions import InvalidArgumentError, check_not_none
from ..results import ComparisonRuleResult, RuleResult
from ..targets import AnyOfTarget, ItemTarget, Target
from .base import BooleanRule

OtherValueProvider = Callable[[RuleContext], Any]
Comparer = Callable[[Any, Any], bool]


class Comparison(Enum):
    """Comparison operators; the value doubles as the rule name."""

    EQUAL = "Equal"
    NOT_EQUAL = "NotEqual"
    LESS_THAN = "LessThan"
    LESS_THAN_OR_EQUAL = "LessThanOrEqual"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_OR_EQUAL = "GreaterThanOrEqual"


_OPERATORS: dict[Comparison, Comparer] = {
    Comparison.EQUAL: operator.eq,
    Comparison.NOT_EQUAL: operator.ne,
    Comparison.LESS_THAN: operator.lt,
    Comparison.LESS_THAN_OR_EQUAL: operator.le,
    Comparison.GREATER_THAN: operator.gt,
    Comparison.GREATER_THAN_OR_EQUAL: operator.ge,
}


def is_orderable(value: Any) -> bool:
    """Check whether the type of value defines an ordering.

    Plain objects, dicts and other types whose ``<`` only returns
    ``NotImplemented`` are not orderable.
    """
    try:
        return type(value).__lt__(value, value) is not NotImplemented
    except TypeError:
        return False


def get_comparer(comparison: Comparison) -> Comparer:
    """Get a predicate ``(value, other) -> bool`` for an operator.

    The left operand must be orderable; pairs that are not, or that cannot
    be compared with each other, evaluate to False instead of raising. This
    holds for ``Equal`` and ``NotEqual`` too.

    Raises:
        InvalidArgumentError: If comparison is not a :class:`Comparison`
    """
    try:
        compare = _OPERATORS[Comparison(comparison)]
    except ValueError as e:
        raise InvalidArgumentError(
            f"Unknown comparison: {comparison!r}",
            context={"comparison": comparison},
        ) from e

    def comparer(value: Any, other: Any) -> bool:
        if not is_orderable(value):
            return False
        try:
            return bool(compare(value, other))
        except TypeError:
            return False

    return comparer


class ComparisonRule(BooleanRule):
    """Compares the target value with an operand from a callback.

    A None target value passes; a None operand fails.

    Args:
        other_value_provider: Callable receiving the :class:`RuleContext` and
            returning the operand
        comparison: Operator to apply
        continue_validation_when_false: Keep validating after a failure

    Raises:
        InvalidArgumentError: If the provider is None or the operator unknown
    """

    def __init__(
        self,
        other_value_provider: OtherValueProvider,
        comparison: Comparison,
        continue_validation_when_false: bool = False,
    ):
        super().__init__(continue_validation_when_false)
        check_not_none(other_value_provider, "other_value_provider")
        self._comparer = get_comparer(comparison)
        self._comparison = Comparison(comparison)
        self._other_value_provider = other_value_provider

    @classmethod
    def with_value(
        cls,
        other_value: Any,
        comparison: Comparison,
        continue_validation_when_false: bool = False,
    ) -> ComparisonRule:
        """Create a rule comparing with a fixed operand."""
        return cls(lambda context: other_value, comparison, continue_validation_when_false)

    @property
    def comparison(self) -> Comparison:
        return self._comparison

    @comparison.setter
    def comparison(self, value: Comparison) -> None:
        self._comparer = get_comparer(value)
        self._comparison = Comparison(value)

    @property
    def other_value_provider(self) -> OtherValueProvider:
        return self._other_value_provider

    @other_value_provider.setter
    def other_value_provider(self, value: OtherValueProvider) -> None:
        check_not_none(value, "other_value_provider")
        self._other_value_provider = value

    @property
    def name(self) -> str:
        return self._comparison.value

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        value = context.target_value()
        if value is None:
            return True

        other_value = self._other_value_provider(context)
        if other_value is None:
            return False

        return self._comparer(value, other_value)

    def create_result(self, context: RuleContext, value: Any) -> RuleResult | None:
        check_not_none(context, "context")
        return ComparisonRuleResult(self.name, value, other_value=self._other_value_provider(context))


def _as_values(target: Target, value: Any) -> list[Any] | None:
    if isinstance(target, ItemTarget):
        if not isinstance(value, Iterable):
            return None
        return list(value)
    return [value]


class TargetComparisonRule(ComparisonRule):
    """Compares the target value with the value of another target.

    The other target is evaluated against the same object, so it can be
    any target built for the validated type (see ``member_target`` and
    friends in :mod:`dataknobs_validation.builders`).

    Quantifiers by side:

    ======================  ====================  ====================
    target \\ other          AnyOfTarget           other
    ======================  ====================  ====================
    AnyOfTarget             any / any             any / all
    other                   all / any             all / all
    ======================  ====================  ====================

    Args:
        other_target: Target producing the operand
        comparison: Operator to apply
        continue_validation_when_false: Keep validating after a failure
    """

    def __init__(
        self,
        other_target: Target,
        comparison: Comparison,
        continue_validation_when_false: bool = False,
    ):
        check_not_none(other_target, "other_target")
        super().__init__(
            lambda context: self.other_target.get_value(context.target_context),
            comparison,
            continue_validation_when_false,
        )
        self._other_target = other_target

    @property
    def other_target(self) -> Target:
        return self._other_target

    @other_target.setter
    def other_target(self, value: Target) -> None:
        check_not_none(value, "other_target")
        self._other_target = value

    @property
    def name(self) -> str:
        return f"{self.comparison.value}ToTarget"

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        target = context.target_context.target
        value = context.target_value()
        if value is None:
            return True

        values = _as_values(target, value)
        if values is None:
            return False

        other_value = self._other_target.get_value(context.target_context)
        if other_value is None:
            return False

        other_values = _as_values(self._other_target, other_value)
        if other_values is None:
            return False

        comparer = self._comparer
        outer = any if isinstance(target, AnyOfTarget) else all
        inner = any if isinstance(self._other_target, AnyOfTarget) else all
        return outer(inner(comparer(v, o) for o in other_values) for v in values)


__all__ = [
    "Comparison",
    "get_comparer",
    "is_orderable",
    "ComparisonRule",
    "TargetComparisonRule",
]
