"""Context objects threaded top-down through a validation run.

A :class:`ValidatorContext` exists per validated object (the root object and
every nested object reached through validator delegation). It carries the
object, the validator provider and the two control flags shared by the whole
run. :class:`TargetContext` and :class:`RuleContext` are short-lived wrappers
created for every target and rule visited, pointing back to their owner.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import check_not_none

if TYPE_CHECKING:
    from .provider import ValidatorProvider
    from .results import Result
    from .rules import Rule
    from .targets import Target
    from .validator import Validator


class ValidatorContext:
    """Validation state for one object instance.

    The ``continue_validation`` flag is shared by every loop of the run and
    must be read before each sibling iteration; a rule deep in the tree can
    clear it to skip everything declared after it. ``ignore_empty_results``
    drops structurally empty results while the tree is built.

    Args:
        obj: Object under validation (required)
        validator: Validator performing the check, usually assigned by
            ``Validator.validate``
        validator_provider: Provider used to resolve nested validators
            (required)
        parent: Context of the object this one is nested in
        continue_validation: Initial value of the continue flag
        ignore_empty_results: Initial value of the ignore-empty flag

    Raises:
        InvalidArgumentError: If obj or validator_provider is None
    """

    def __init__(
        self,
        obj: Any,
        validator: Validator | None = None,
        validator_provider: ValidatorProvider | None = None,
        parent: ValidatorContext | None = None,
        continue_validation: bool = True,
        ignore_empty_results: bool = True,
    ):
        check_not_none(obj, "obj")
        check_not_none(validator_provider, "validator_provider")
        self._object = obj
        self._validator = validator
        self._validator_provider = validator_provider
        self.parent = parent
        self.continue_validation = continue_validation
        self.ignore_empty_results = ignore_empty_results

    @property
    def object(self) -> Any:
        """Object under validation."""
        return self._object

    @property
    def validator(self) -> Validator | None:
        """Validator performing the check."""
        return self._validator

    @validator.setter
    def validator(self, value: Validator) -> None:
        check_not_none(value, "validator")
        self._validator = value

    @property
    def validator_provider(self) -> ValidatorProvider:
        """Provider used to resolve nested validators."""
        return self._validator_provider

    @property
    def root(self) -> ValidatorContext:
        """Context of the root object of the run."""
        context = self
        while context.parent is not None:
            context = context.parent
        return context

    def accepts(self, result: Result) -> bool:
        """Check whether a child result should be appended to its parent."""
        return not self.ignore_empty_results or not result.is_empty()

    def __repr__(self) -> str:
        return (
            f"ValidatorContext(object={type(self._object).__name__}, "
            f"continue_validation={self.continue_validation}, "
            f"ignore_empty_results={self.ignore_empty_results})"
        )


class TargetContext:
    """Pairs the target being visited with its validator context."""

    def __init__(self, target: Target | None, validator_context: ValidatorContext):
        check_not_none(validator_context, "validator_context")
        self._target = target
        self._validator_context = validator_context

    @property
    def target(self) -> Target | None:
        return self._target

    @target.setter
    def target(self, value: Target) -> None:
        check_not_none(value, "target")
        self._target = value

    @property
    def validator_context(self) -> ValidatorContext:
        return self._validator_context


class RuleContext:
    """Pairs the rule being visited with its target context."""

    def __init__(self, rule: Rule | None, target_context: TargetContext):
        check_not_none(target_context, "target_context")
        self._rule = rule
        self._target_context = target_context

    @property
    def rule(self) -> Rule | None:
        return self._rule

    @rule.setter
    def rule(self, value: Rule) -> None:
        check_not_none(value, "rule")
        self._rule = value

    @property
    def target_context(self) -> TargetContext:
        return self._target_context

    @property
    def validator_context(self) -> ValidatorContext:
        """Shortcut to the owning validator context."""
        return self._target_context.validator_context

    def target_value(self) -> Any:
        """Extract the current target's value for this rule."""
        target_context = self._target_context
        return target_context.target.get_value(target_context)


__all__ = ["ValidatorContext", "TargetContext", "RuleContext"]
