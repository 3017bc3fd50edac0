"""Targets: named extraction points of the validated object.

A target extracts a value from the object under validation and owns an
ordered list of rules evaluated against that value. Structural targets
organize other targets instead:

- :class:`ObjectTarget` yields the whole object.
- :class:`MemberTarget` yields a member through an accessor function.
- :class:`AnyOfTarget` / :class:`EachOfTarget` yield the items of a
  collection member; their rules run once per item.
- :class:`GroupTarget` groups child targets under one name.
- :class:`IfTarget` / :class:`IfNotTarget` guard another target with a
  predicate over the :class:`TargetContext`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from .context import RuleContext, TargetContext
from .exceptions import LeafNotImplementedError, NotSupportedError, check_not_none
from .results import GroupTargetResult, ItemTargetResult, TargetResult

if TYPE_CHECKING:
    from .rules import Rule

ItemsSelector = Callable[[Any, TargetContext], Any]
TargetCondition = Callable[[TargetContext], bool]


class Target(ABC):
    """Base class for all targets.

    Args:
        name: Target name reported in results; may be empty for whole-object
            targets
    """

    def __init__(self, name: str | None = None):
        self._name = name or ""
        self._rules: list[Rule | None] = []

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def rules(self) -> list[Rule | None]:
        """Ordered rules evaluated against this target's value."""
        return self._rules

    @abstractmethod
    def get_value(self, context: TargetContext) -> Any:
        """Extract the value to validate.

        Args:
            context: Context of the current target visit

        Returns:
            Extracted value
        """

    def validate(self, context: TargetContext) -> TargetResult | None:
        """Validate the extracted value against every rule.

        Rules run in declaration order. The validator context's
        ``continue_validation`` flag is checked before each rule; once it is
        cleared, the result accumulated so far is returned.

        Args:
            context: Context of the current target visit

        Returns:
            Target result, or None if ``create_result`` declined to create one

        Raises:
            InvalidArgumentError: If context is None
        """
        check_not_none(context, "context")
        context.target = self

        result = self.create_result(context)
        if result is None:
            return None

        validator_context = context.validator_context
        for rule in self.rules:
            if not validator_context.continue_validation:
                return result

            if rule is None:
                continue

            rule_result = rule.validate(RuleContext(None, context))
            if rule_result is None:
                continue

            if validator_context.accepts(rule_result):
                result.rule_results.append(rule_result)

        return result

    def create_result(self, context: TargetContext) -> TargetResult | None:
        """Create the result node for this target."""
        check_not_none(context, "context")
        return TargetResult(self.name, self.get_value(context))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, rules={len(self.rules)})"


class ObjectTarget(Target):
    """Target yielding the whole object under validation."""

    def __init__(self, name: str | None = ""):
        super().__init__(name)

    def get_value(self, context: TargetContext) -> Any:
        check_not_none(context, "context")
        return context.validator_context.object


class MemberTarget(Target):
    """Target yielding a member of the object through an accessor.

    Args:
        name: Member name reported in results
        member: Callable receiving the validated object and returning the
            member value

    Raises:
        InvalidArgumentError: If member is None
    """

    def __init__(self, name: str | None, member: Callable[[Any], Any]):
        super().__init__(name)
        check_not_none(member, "member")
        self._member = member

    @property
    def member(self) -> Callable[[Any], Any]:
        return self._member

    @member.setter
    def member(self, value: Callable[[Any], Any]) -> None:
        check_not_none(value, "member")
        self._member = value

    def get_value(self, context: TargetContext) -> Any:
        check_not_none(context, "context")
        return self._member(context.validator_context.object)


class ItemTarget(MemberTarget):
    """Base class for targets over the items of a collection member.

    The value of an item target is the selected items, so target comparisons
    can treat it as a set of values. Validation runs the target's rules once
    per item, each time through a one-off :class:`MemberTarget` bound to that
    item.

    Args:
        name: Member name reported in results
        member: Accessor returning the collection
        items_selector: Optional callable ``(items, context) -> items`` that
            filters or transforms the collection before validation
    """

    def __init__(
        self,
        name: str | None,
        member: Callable[[Any], Any],
        items_selector: ItemsSelector | None = None,
    ):
        super().__init__(name, member)
        self._items_selector = items_selector or (lambda items, context: items)

    @property
    def items_selector(self) -> ItemsSelector:
        return self._items_selector

    @items_selector.setter
    def items_selector(self, value: ItemsSelector) -> None:
        check_not_none(value, "items_selector")
        self._items_selector = value

    def get_value(self, context: TargetContext) -> Any:
        check_not_none(context, "context")
        return self._items_selector(super().get_value(context), context)

    def validate(self, context: TargetContext) -> TargetResult | None:
        """Validate every item with this target's rules.

        Every item is evaluated regardless of the continue flag; rules inside
        an item still honour it.

        Returns:
            Item target result, or None if the selected items are None or
            not iterable
        """
        check_not_none(context, "context")

        result = self.create_result(context)
        if result is None:
            return None

        items = self.get_value(context)
        if items is None or not isinstance(items, Iterable):
            return None

        validator_context = context.validator_context
        for item in items:
            item_target = MemberTarget(self.name, lambda obj, item=item: item)
            item_target.rules.extend(self.rules)

            item_result = item_target.validate(TargetContext(None, validator_context))
            if item_result is None:
                continue

            if validator_context.accepts(item_result):
                result.item_results.append(item_result)

        return result

    def create_result(self, context: TargetContext) -> ItemTargetResult | None:
        check_not_none(context, "context")
        return ItemTargetResult(self.name)


class AnyOfTarget(ItemTarget):
    """Item target with existential semantics in target comparisons."""


class EachOfTarget(ItemTarget):
    """Item target with universal semantics in target comparisons."""


class GroupTarget(Target):
    """Organizational container of child targets.

    Args:
        name: Group name reported in results
    """

    def __init__(self, name: str | None):
        super().__init__(name)
        self._targets: list[Target | None] = []

    @property
    def targets(self) -> list[Target | None]:
        return self._targets

    def get_value(self, context: TargetContext) -> list[Target | None]:
        check_not_none(context, "context")
        return self._targets

    def validate(self, context: TargetContext) -> TargetResult | None:
        check_not_none(context, "context")
        context.target = self

        result = self.create_result(context)
        if result is None:
            return None

        validator_context = context.validator_context
        for target in self._targets:
            if not validator_context.continue_validation:
                return result

            if target is None:
                continue

            target_result = target.validate(TargetContext(None, validator_context))
            if target_result is None:
                continue

            if validator_context.accepts(target_result):
                result.target_results.append(target_result)

        return result

    def create_result(self, context: TargetContext) -> GroupTargetResult | None:
        check_not_none(context, "context")
        return GroupTargetResult(self.name)


class ConditionalTarget(Target):
    """Transparent wrapper validating another target only under a condition.

    The name and rules are those of the wrapped target. Only the ``If`` and
    ``IfNot`` variants can be validated.

    Args:
        target: Wrapped target
        condition: Predicate over the current :class:`TargetContext`

    Raises:
        InvalidArgumentError: If target or condition is None
    """

    def __init__(self, target: Target, condition: TargetCondition):
        check_not_none(target, "target")
        check_not_none(condition, "condition")
        super().__init__(target.name)
        self._target = target
        self._condition = condition

    @property
    def target(self) -> Target:
        return self._target

    @target.setter
    def target(self, value: Target) -> None:
        check_not_none(value, "target")
        self._target = value

    @property
    def condition(self) -> TargetCondition:
        return self._condition

    @condition.setter
    def condition(self, value: TargetCondition) -> None:
        check_not_none(value, "condition")
        self._condition = value

    @property
    def name(self) -> str:
        return self._target.name

    @name.setter
    def name(self, value: str) -> None:
        self._target.name = value

    @property
    def rules(self) -> list[Rule | None]:
        return self._target.rules

    def get_value(self, context: TargetContext) -> Any:
        raise LeafNotImplementedError(self, "get_value")

    def validate(self, context: TargetContext) -> TargetResult | None:
        raise NotSupportedError(
            f"{type(self).__name__} cannot be validated directly",
            context={"type": type(self).__name__},
        )

    def create_result(self, context: TargetContext) -> TargetResult | None:
        raise LeafNotImplementedError(self, "create_result")


class IfTarget(ConditionalTarget):
    """Validates the wrapped target when the condition holds."""

    def validate(self, context: TargetContext) -> TargetResult | None:
        check_not_none(context, "context")
        return self.target.validate(context) if self.condition(context) else None


class IfNotTarget(ConditionalTarget):
    """Validates the wrapped target when the condition does not hold."""

    def validate(self, context: TargetContext) -> TargetResult | None:
        check_not_none(context, "context")
        return self.target.validate(context) if not self.condition(context) else None


__all__ = [
    "Target",
    "ObjectTarget",
    "MemberTarget",
    "ItemTarget",
    "AnyOfTarget",
    "EachOfTarget",
    "GroupTarget",
    "ConditionalTarget",
    "IfTarget",
    "IfNotTarget",
]
