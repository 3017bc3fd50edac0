"""Validator base class.

A validator owns the ordered targets declared for one object type. Subclass
it with the validated type as generic parameter and declare targets and rules
in :meth:`Validator.configure`:

```python
from dataknobs_validation import Validator

class LoginFormValidator(Validator[LoginForm]):
    def configure(self, builder):
        builder.member("username").required().with_error("Messages", "UsernameRequired")
        builder.member("password").has_length(min=8).with_error("Messages", "PasswordTooShort")
```
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar, get_args, get_origin

from .builders import ValidatorBuilder
from .context import TargetContext, ValidatorContext
from .exceptions import check_not_none
from .results import ValidatorResult

if TYPE_CHECKING:
    from .targets import Target

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Validator(ABC, Generic[T]):
    """Validates objects of one type by walking its targets."""

    def __init__(self):
        self._targets: list[Target | None] = []

    @property
    def targets(self) -> list[Target | None]:
        """Ordered targets of this validator."""
        return self._targets

    @classmethod
    def object_type(cls) -> type | None:
        """Resolve the validated type from the generic parameter.

        Returns:
            The ``T`` of the nearest ``Validator[T]`` base, or None when the
            class is not parameterized with a concrete type
        """
        for klass in cls.__mro__:
            for base in getattr(klass, "__orig_bases__", ()):
                if get_origin(base) is Validator:
                    args = get_args(base)
                    if args and isinstance(args[0], type):
                        return args[0]
        return None

    def setup(self) -> None:
        """Build the target tree by running :meth:`configure`.

        Targets declared by a previous call are discarded first.
        """
        self._targets.clear()
        self.configure(ValidatorBuilder(self))
        logger.debug(f"Set up {type(self).__name__} with {len(self._targets)} targets")

    @abstractmethod
    def configure(self, builder: ValidatorBuilder) -> None:
        """Declare targets and rules through the builder."""

    def validate(self, context: ValidatorContext) -> ValidatorResult | None:
        """Validate the context's object.

        Targets are visited in order; the continue flag is checked before
        each one and validation stops as soon as it is cleared.

        Args:
            context: Context of the object under validation

        Returns:
            Validator result, or None if ``create_result`` declined to create
            one

        Raises:
            InvalidArgumentError: If context is None
        """
        check_not_none(context, "context")
        context.validator = self

        result = self.create_result(context)
        if result is None:
            return None

        for target in self._targets:
            if not context.continue_validation:
                logger.debug(f"{type(self).__name__}: validation halted, skipping remaining targets")
                return result

            if target is None:
                continue

            target_result = target.validate(TargetContext(None, context))
            if target_result is None:
                continue

            if context.accepts(target_result):
                result.target_results.append(target_result)

        return result

    def create_result(self, context: ValidatorContext) -> ValidatorResult | None:
        check_not_none(context, "context")
        return ValidatorResult()

    def __repr__(self) -> str:
        object_type = self.object_type()
        type_name = object_type.__name__ if object_type is not None else "Any"
        return f"{type(self).__name__}[{type_name}](targets={len(self._targets)})"


def validated_type_of(validator: Any) -> type | None:
    """Get the validated type of a validator class or instance."""
    klass = validator if isinstance(validator, type) else type(validator)
    if isinstance(klass, type) and issubclass(klass, Validator):
        return klass.object_type()
    return None


__all__ = ["Validator", "validated_type_of"]
