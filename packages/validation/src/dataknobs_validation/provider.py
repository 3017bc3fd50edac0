"""Validator providers: resolve the validator for an object type.

:class:`ValidatorProvider` is the interface consulted by the controller and
by validator delegation. :class:`ValidatorRegistry` is the standard
implementation: validators are registered explicitly per object type, either
as :class:`Validator` subclasses or as zero-argument factories.

Example:
    ```python
    from dataknobs_validation import ValidatorRegistry, Validator

    registry = ValidatorRegistry()

    @registry.validator_for()
    class OrderValidator(Validator[Order]):
        def configure(self, builder):
            builder.member("number").required()

    validator = registry.get_validator(Order)
    ```

With a non-caching registry every lookup creates a fresh, un-setup
validator; callers are expected to call ``setup()`` on it, as the
controller does.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, List, Union

from dataknobs_common import CachedRegistry

from .exceptions import (
    AmbiguousValidatorError,
    InvalidArgumentError,
    NotFoundError,
    OperationError,
    check_not_none,
)
from .validator import Validator, validated_type_of

logger = logging.getLogger(__name__)

ValidatorCreator = Union[type[Validator], Callable[[], Validator]]


class ValidatorProvider(ABC):
    """Interface resolving validators by object type."""

    @property
    @abstractmethod
    def is_cached(self) -> bool:
        """Whether returned validators are shared and already set up."""

    @abstractmethod
    def get_validator(self, object_type: type) -> Validator | None:
        """Get the validator for an object type.

        Args:
            object_type: Runtime type of the object to validate

        Returns:
            Validator, or None when no validator handles the type
        """


class ValidatorRegistry(CachedRegistry[Any], ValidatorProvider):
    """Thread-safe registry of validator factories keyed by object type.

    Each key holds the tuple of factories registered for that type; set-up
    validators are memoized in the registry cache when ``cached`` is true.
    Lookup is by exact type: a validator registered for ``Base`` is not used
    for instances of a subclass.

    Args:
        name: Registry name used in error context and logs
        cached: Instantiate each validator once, set it up and reuse it

    Example:
        ```python
        registry = ValidatorRegistry("forms", cached=False)
        registry.register(LoginFormValidator)
        registry.is_registered(LoginForm)
        # True
        ```
    """

    def __init__(self, name: str = "validators", cached: bool = True):
        # Memoized validators never expire; they are dropped on registration changes
        super().__init__(name, cache_ttl=float("inf"))
        self._cached = cached

    @property
    def is_cached(self) -> bool:
        return self._cached

    def register(self, factory: ValidatorCreator, object_type: type | None = None) -> None:  # type: ignore[override]
        """Register a validator class or factory for an object type.

        Args:
            factory: :class:`Validator` subclass, or a zero-argument callable
                returning a validator
            object_type: Validated type; inferred from ``Validator[T]`` when
                omitted

        Raises:
            InvalidArgumentError: If factory is None or the type cannot be
                inferred
            TypeError: If factory is a class that is not a Validator, or is
                not callable
            OperationError: If the factory is already registered for the type
        """
        check_not_none(factory, "factory")
        if isinstance(factory, type):
            if not issubclass(factory, Validator):
                raise TypeError(
                    f"Factory class must be a subclass of Validator, got {factory.__name__}"
                )
        elif not callable(factory):
            raise TypeError(f"Factory must be a class or callable, got {type(factory).__name__}")

        if object_type is None:
            object_type = validated_type_of(factory)
            if object_type is None:
                raise InvalidArgumentError(
                    f"Cannot infer the validated type of {factory!r}; pass object_type",
                    context={"registry": self.name},
                )

        with self._lock:
            factories = self.get_optional(object_type) or ()
            if factory in factories:
                raise OperationError(
                    f"Validator {_factory_name(factory)} already registered for "
                    f"{object_type.__name__} in {self.name}",
                    context={"object_type": object_type.__name__, "registry": self.name},
                )
            super().register(
                object_type,
                factories + (factory,),
                metadata={"validator": _factory_name(factory)},
                allow_overwrite=True,
            )
            self.invalidate_cache(object_type)

        logger.debug(f"Registered {_factory_name(factory)} for {object_type.__name__} in {self.name}")

    def validator_for(self, object_type: type | None = None) -> Callable[[type[Validator]], type[Validator]]:
        """Class decorator form of :meth:`register`.

        Example:
            ```python
            @registry.validator_for(Order)
            class OrderValidator(Validator):
                ...
            ```
        """

        def decorator(cls: type[Validator]) -> type[Validator]:
            self.register(cls, object_type)
            return cls

        return decorator

    def unregister(self, object_type: type, factory: ValidatorCreator | None = None) -> None:  # type: ignore[override]
        """Remove registrations for a type.

        Args:
            object_type: Validated type
            factory: Specific factory to remove; all factories when omitted

        Raises:
            NotFoundError: If nothing matching is registered
        """
        with self._lock:
            factories = self.get_optional(object_type) or ()
            if not factories or (factory is not None and factory not in factories):
                raise NotFoundError(
                    f"No validator registered for {getattr(object_type, '__name__', object_type)}",
                    context={"object_type": str(object_type), "registry": self.name},
                )

            remaining = () if factory is None else tuple(f for f in factories if f != factory)
            if remaining:
                super().register(object_type, remaining, allow_overwrite=True)
            else:
                super().unregister(object_type)
            self.invalidate_cache(object_type)

    def is_registered(self, object_type: type) -> bool:
        """Check if any validator is registered for a type."""
        return self.has(object_type)

    def registered_types(self) -> List[type]:
        """Get the types having at least one registration."""
        return self.list_keys()

    def clear_cache(self, object_type: type | None = None) -> None:
        """Drop memoized validators.

        Args:
            object_type: Type to drop; all types when omitted
        """
        self.invalidate_cache(object_type)

    def clear(self) -> None:
        with self._lock:
            super().clear()
            self.invalidate_cache()

    def get_validator(self, object_type: type) -> Validator | None:
        """Get the validator registered for an exact type.

        Raises:
            InvalidArgumentError: If object_type is None
            AmbiguousValidatorError: If more than one validator is registered
                for the type
            OperationError: If creating (or setting up) the validator fails
        """
        check_not_none(object_type, "object_type")

        with self._lock:
            factories = self.get_optional(object_type)
            if not factories:
                return None

            if len(factories) > 1:
                raise AmbiguousValidatorError(
                    f"Multiple validators registered for {object_type.__name__}",
                    context={
                        "object_type": object_type.__name__,
                        "registry": self.name,
                        "validators": [_factory_name(factory) for factory in factories],
                    },
                )

            factory = factories[0]
            if not self._cached:
                return self._create(factory, object_type)
            return self.get_cached(object_type, lambda: self._create(factory, object_type))

    def _create(self, factory: ValidatorCreator, object_type: type) -> Validator:
        try:
            validator = factory()
            if not isinstance(validator, Validator):
                raise TypeError(
                    f"Factory must return a Validator instance, got {type(validator).__name__}"
                )
            if self._cached:
                validator.setup()
        except Exception as e:
            raise OperationError(
                f"Failed to create validator for {object_type.__name__}: {e}",
                context={"object_type": object_type.__name__, "registry": self.name},
            ) from e

        if self._cached:
            logger.debug(f"Cached {type(validator).__name__} for {object_type.__name__}")
        return validator

    def __len__(self) -> int:
        return sum(len(factories) for factories in self.list_items())

    def __contains__(self, object_type: Any) -> bool:
        return self.is_registered(object_type)

    def __repr__(self) -> str:
        return f"ValidatorRegistry(name={self.name!r}, cached={self._cached}, registrations={len(self)})"


def _factory_name(factory: Any) -> str:
    return getattr(factory, "__name__", type(factory).__name__)


__all__ = ["ValidatorProvider", "ValidatorRegistry", "ValidatorCreator"]
