"""Fluent builders used by :meth:`Validator.configure`.

Builders are thin handles: each one remembers the list it edits and the
position of its element in that list, so wrapping an element (``if_``) or
moving it into a group (``in_group``) simply replaces or relocates the list
entry. Handles are positional; declare an element and finish configuring it
before declaring the next one in the same list.

Example:
    ```python
    class AccountValidator(Validator[Account]):
        def configure(self, builder):
            builder.member("email").required().with_error("Messages", "EmailRequired") \\
                .is_email().with_error("Messages", "EmailInvalid")

            builder.member("password").has_length(min=8, continue_on_failure=True) \\
                .with_error("Messages", "PasswordTooShort")

            builder.member("confirmation") \\
                .is_equal_to(member_target("password")) \\
                .with_error("Messages", "PasswordMismatch")

            builder.any_of("addresses").has_validator()
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Union

from .exceptions import InvalidArgumentError, check_not_none
from .results import ValueResult
from .rules import (
    Comparison,
    ComparisonRule,
    CreditCardRule,
    ConditionalRule,
    CustomRule,
    DigitsRule,
    EmailRule,
    GroupRule,
    IfNotRule,
    IfRule,
    LengthRule,
    RangeRule,
    RegexRule,
    RequiredRule,
    Rule,
    SafeTextRule,
    TargetComparisonRule,
    UriKind,
    UriRule,
    ValidatorRule,
)
from .rules.structural import RuleCallback, RuleCondition
from .targets import (
    AnyOfTarget,
    ConditionalTarget,
    EachOfTarget,
    GroupTarget,
    IfNotTarget,
    IfTarget,
    ItemsSelector,
    MemberTarget,
    ObjectTarget,
    Target,
    TargetCondition,
)

if TYPE_CHECKING:
    from .validator import Validator

Accessor = Union[str, Callable[[Any], Any]]


def path_accessor(path: str) -> Callable[[Any], Any]:
    """Build an accessor reading a dotted attribute/key path.

    Each segment reads a mapping key when the current value is a mapping and
    an attribute otherwise. A missing segment, or a None along the way,
    yields None.

    Example:
        ```python
        city = path_accessor("address.city")
        city({"address": {"city": "Kyiv"}})
        # 'Kyiv'
        ```
    """
    if not path:
        raise InvalidArgumentError("path must not be empty", context={"argument": "path"})
    segments = path.split(".")

    def accessor(obj: Any) -> Any:
        value = obj
        for segment in segments:
            if value is None:
                return None
            if isinstance(value, Mapping):
                value = value.get(segment)
            else:
                value = getattr(value, segment, None)
        return value

    accessor.__name__ = path
    return accessor


def resolve_accessor(accessor: Accessor, name: str | None = None) -> tuple[str, Callable[[Any], Any]]:
    """Normalize an accessor and derive the target name.

    Returns:
        ``(name, callable)``; the name defaults to the path for string
        accessors and to the function name for named callables
    """
    check_not_none(accessor, "accessor")
    if isinstance(accessor, str):
        return (name if name is not None else accessor), path_accessor(accessor)
    if not callable(accessor):
        raise InvalidArgumentError(
            f"accessor must be a path or a callable, got {type(accessor).__name__}",
            context={"argument": "accessor"},
        )
    if name is None:
        name = getattr(accessor, "__name__", "")
        if name == "<lambda>":
            name = ""
    return name, accessor


def object_target(name: str = "") -> ObjectTarget:
    """Create a detached target yielding the whole object."""
    return ObjectTarget(name)


def member_target(accessor: Accessor, name: str | None = None) -> MemberTarget:
    """Create a detached member target, e.g. as a comparison operand."""
    return MemberTarget(*resolve_accessor(accessor, name))


def any_of_target(
    accessor: Accessor,
    items_selector: ItemsSelector | None = None,
    name: str | None = None,
) -> AnyOfTarget:
    """Create a detached any-of item target."""
    target_name, member = resolve_accessor(accessor, name)
    return AnyOfTarget(target_name, member, items_selector)


def each_of_target(
    accessor: Accessor,
    items_selector: ItemsSelector | None = None,
    name: str | None = None,
) -> EachOfTarget:
    """Create a detached each-of item target."""
    target_name, member = resolve_accessor(accessor, name)
    return EachOfTarget(target_name, member, items_selector)


class TargetListBuilder:
    """Declares targets into a list of targets."""

    def __init__(self, targets: list[Target | None]):
        check_not_none(targets, "targets")
        self._targets = targets

    @property
    def targets(self) -> list[Target | None]:
        return self._targets

    def target(self, target: Target) -> TargetBuilder:
        """Add an already built target."""
        check_not_none(target, "target")
        self._targets.append(target)
        return TargetBuilder(self._targets, len(self._targets) - 1)

    def object(self, name: str = "") -> TargetBuilder:
        """Declare a target for the whole object."""
        return self.target(object_target(name))

    def member(self, accessor: Accessor, name: str | None = None) -> TargetBuilder:
        """Declare a target for a member of the object."""
        return self.target(member_target(accessor, name))

    def any_of(
        self,
        accessor: Accessor,
        items_selector: ItemsSelector | None = None,
        name: str | None = None,
    ) -> TargetBuilder:
        """Declare a target over the items of a collection member."""
        return self.target(any_of_target(accessor, items_selector, name))

    def each_of(
        self,
        accessor: Accessor,
        items_selector: ItemsSelector | None = None,
        name: str | None = None,
    ) -> TargetBuilder:
        """Declare a target over the items of a collection member."""
        return self.target(each_of_target(accessor, items_selector, name))

    def group(self, name: str) -> GroupTargetBuilder:
        """Declare a named group of targets."""
        self._targets.append(GroupTarget(name))
        return GroupTargetBuilder(self._targets, len(self._targets) - 1)


class ValidatorBuilder(TargetListBuilder):
    """Root builder handed to :meth:`Validator.configure`."""

    def __init__(self, validator: Validator):
        check_not_none(validator, "validator")
        super().__init__(validator.targets)
        self._validator = validator

    @property
    def validator(self) -> Validator:
        return self._validator


class _TargetHandle:
    def __init__(self, targets: list[Target | None], index: int):
        self._targets = targets
        self._index = index

    def _wrap_target(self, wrapper: Callable[[Target], Target]) -> None:
        self._targets[self._index] = wrapper(self._targets[self._index])

    def _move_target_to_group(self, name: str) -> None:
        group = _find_named(self._targets, GroupTarget, name, exclude=self._index)
        target = self._targets.pop(self._index)
        group.targets.append(target)
        self._targets = group.targets
        self._index = len(group.targets) - 1


class GroupTargetBuilder(_TargetHandle, TargetListBuilder):
    """Declares targets inside a target group."""

    def __init__(self, targets: list[Target | None], index: int):
        _TargetHandle.__init__(self, targets, index)
        self._group: GroupTarget = self._targets[index]

    @property
    def targets(self) -> list[Target | None]:
        return self._group.targets

    def target(self, target: Target) -> TargetBuilder:
        check_not_none(target, "target")
        self._group.targets.append(target)
        return TargetBuilder(self._group.targets, len(self._group.targets) - 1)

    def group(self, name: str) -> GroupTargetBuilder:
        self._group.targets.append(GroupTarget(name))
        return GroupTargetBuilder(self._group.targets, len(self._group.targets) - 1)

    def if_(self, condition: TargetCondition) -> GroupTargetBuilder:
        """Validate the group only when the condition holds."""
        self._wrap_target(lambda target: IfTarget(target, condition))
        return self

    def if_not(self, condition: TargetCondition) -> GroupTargetBuilder:
        """Validate the group only when the condition does not hold."""
        self._wrap_target(lambda target: IfNotTarget(target, condition))
        return self


class TargetBuilder(_TargetHandle):
    """Declares rules for one target."""

    @property
    def target(self) -> Target:
        """The target at this handle's position."""
        return self._targets[self._index]

    @property
    def rules(self) -> list[Rule | None]:
        return self.target.rules

    def if_(self, condition: TargetCondition) -> TargetBuilder:
        """Validate the target only when the condition holds."""
        self._wrap_target(lambda target: IfTarget(target, condition))
        return self

    def if_not(self, condition: TargetCondition) -> TargetBuilder:
        """Validate the target only when the condition does not hold."""
        self._wrap_target(lambda target: IfNotTarget(target, condition))
        return self

    def in_group(self, name: str) -> TargetBuilder:
        """Move the target into a target group declared in the same list.

        Raises:
            InvalidArgumentError: If no group with that name exists
        """
        self._move_target_to_group(name)
        return self

    def has_rule(self, rule: Rule) -> RuleBuilder:
        """Add an already built rule."""
        check_not_none(rule, "rule")
        rules = self.rules
        rules.append(rule)
        return RuleBuilder(self._targets, self._index, rules, len(rules) - 1)

    def group(self, name: str) -> RuleBuilder:
        """Declare a named group of rules; add rules to it with ``in_group``."""
        return self.has_rule(GroupRule(name))

    def required(self, continue_on_failure: bool = False) -> RuleBuilder:
        return self.has_rule(RequiredRule(continue_on_failure))

    def has_length(
        self,
        min: int | None = None,
        max: int | None = None,
        continue_on_failure: bool = False,
    ) -> RuleBuilder:
        return self.has_rule(LengthRule(min, max, continue_on_failure))

    def has_range(self, min: Any = None, max: Any = None, continue_on_failure: bool = False) -> RuleBuilder:
        return self.has_rule(RangeRule(min, max, continue_on_failure))

    def matches_regex(self, pattern: str, flags: int = 0, continue_on_failure: bool = False) -> RuleBuilder:
        return self.has_rule(RegexRule(pattern, flags, continue_on_failure))

    def is_digits(self, continue_on_failure: bool = False) -> RuleBuilder:
        return self.has_rule(DigitsRule(continue_on_failure))

    def is_uri(
        self,
        kind: UriKind = UriKind.ABSOLUTE,
        schemes: list[str] | None = None,
        continue_on_failure: bool = False,
    ) -> RuleBuilder:
        return self.has_rule(UriRule(kind, schemes, continue_on_failure))

    def is_email(self, continue_on_failure: bool = False) -> RuleBuilder:
        return self.has_rule(EmailRule(continue_on_failure))

    def is_credit_card(self, continue_on_failure: bool = False) -> RuleBuilder:
        return self.has_rule(CreditCardRule(continue_on_failure))

    def is_safe_text(self, continue_on_failure: bool = False) -> RuleBuilder:
        return self.has_rule(SafeTextRule(continue_on_failure))

    def compares(self, operand: Any, comparison: Comparison, continue_on_failure: bool = False) -> RuleBuilder:
        """Declare a comparison rule.

        Args:
            operand: A :class:`Target` (compared by value, see
                :class:`TargetComparisonRule`), a callable receiving the
                :class:`RuleContext`, or a literal value
            comparison: Operator to apply
            continue_on_failure: Keep validating after a failure
        """
        if isinstance(operand, Target):
            rule: Rule = TargetComparisonRule(operand, comparison, continue_on_failure)
        elif callable(operand):
            rule = ComparisonRule(operand, comparison, continue_on_failure)
        else:
            rule = ComparisonRule.with_value(operand, comparison, continue_on_failure)
        return self.has_rule(rule)

    def is_equal_to(self, operand: Any, continue_on_failure: bool = False) -> RuleBuilder:
        return self.compares(operand, Comparison.EQUAL, continue_on_failure)

    def is_not_equal_to(self, operand: Any, continue_on_failure: bool = False) -> RuleBuilder:
        return self.compares(operand, Comparison.NOT_EQUAL, continue_on_failure)

    def is_less_than(self, operand: Any, continue_on_failure: bool = False) -> RuleBuilder:
        return self.compares(operand, Comparison.LESS_THAN, continue_on_failure)

    def is_less_than_or_equal_to(self, operand: Any, continue_on_failure: bool = False) -> RuleBuilder:
        return self.compares(operand, Comparison.LESS_THAN_OR_EQUAL, continue_on_failure)

    def is_greater_than(self, operand: Any, continue_on_failure: bool = False) -> RuleBuilder:
        return self.compares(operand, Comparison.GREATER_THAN, continue_on_failure)

    def is_greater_than_or_equal_to(self, operand: Any, continue_on_failure: bool = False) -> RuleBuilder:
        return self.compares(operand, Comparison.GREATER_THAN_OR_EQUAL, continue_on_failure)

    def has_custom_rule(self, rule_validator: RuleCallback) -> RuleBuilder:
        """Declare a rule whose result is built by a callback."""
        return self.has_rule(CustomRule(rule_validator))

    def has_validator(self) -> RuleBuilder:
        """Delegate the target value to the validator of its type."""
        return self.has_rule(ValidatorRule())


class RuleBuilder(TargetBuilder):
    """Configures the most recently declared rule.

    Rule declarations made through a rule builder still go to the owning
    target, so declarations can be chained.
    """

    def __init__(
        self,
        targets: list[Target | None],
        target_index: int,
        rules: list[Rule | None],
        rule_index: int,
    ):
        super().__init__(targets, target_index)
        self._rule_list = rules
        self._rule_index = rule_index

    @property
    def rule(self) -> Rule:
        """The rule at this handle's position."""
        return self._rule_list[self._rule_index]

    def with_result(
        self,
        match_value: Any,
        resource_name: str | None = None,
        resource_key: str | None = None,
    ) -> RuleBuilder:
        """Attach an outcome selected when the rule computes ``match_value``."""
        self.rule.value_results.append(ValueResult(match_value, resource_name, resource_key))
        return self

    def with_error(self, resource_name: str | None = None, resource_key: str | None = None) -> RuleBuilder:
        """Attach an outcome selected when the rule fails."""
        return self.with_result(False, resource_name, resource_key)

    def with_success(self, resource_name: str | None = None, resource_key: str | None = None) -> RuleBuilder:
        """Attach an outcome selected when the rule passes."""
        return self.with_result(True, resource_name, resource_key)

    def if_(self, condition: RuleCondition) -> RuleBuilder:
        """Evaluate the rule only when the condition holds."""
        self._rule_list[self._rule_index] = IfRule(self.rule, condition)
        return self

    def if_not(self, condition: RuleCondition) -> RuleBuilder:
        """Evaluate the rule only when the condition does not hold."""
        self._rule_list[self._rule_index] = IfNotRule(self.rule, condition)
        return self

    def in_group(self, name: str) -> RuleBuilder:
        """Move the rule into a rule group declared in the same list.

        Raises:
            InvalidArgumentError: If no group with that name exists
        """
        group = _find_named(self._rule_list, GroupRule, name, exclude=self._rule_index)
        rule = self._rule_list.pop(self._rule_index)
        group.rules.append(rule)
        self._rule_list = group.rules
        self._rule_index = len(group.rules) - 1
        return self


def _find_named(items: list[Any], kind: type, name: str, exclude: int) -> Any:
    for index, item in enumerate(items):
        if index == exclude:
            continue
        item = _unwrap_conditional(item)
        if isinstance(item, kind) and item.name == name:
            return item
    raise InvalidArgumentError(
        f"No {kind.__name__} named {name!r}",
        context={"argument": "name", "name": name},
    )


def _unwrap_conditional(item: Any) -> Any:
    while True:
        if isinstance(item, ConditionalTarget):
            item = item.target
        elif isinstance(item, ConditionalRule):
            item = item.rule
        else:
            return item


__all__ = [
    "Accessor",
    "path_accessor",
    "resolve_accessor",
    "object_target",
    "member_target",
    "any_of_target",
    "each_of_target",
    "TargetListBuilder",
    "ValidatorBuilder",
    "GroupTargetBuilder",
    "TargetBuilder",
    "RuleBuilder",
]
