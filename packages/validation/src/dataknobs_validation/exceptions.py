"""Exception hierarchy for the dataknobs validation engine.

Built on the common exception framework from dataknobs_common. Every error
raised by the engine derives from :class:`ValidationEngineError`, a
``DataknobsError`` carrying an optional context dictionary describing what
went wrong (argument names, object types, registry names). The configuration,
operation and lookup categories also derive from their dataknobs_common
counterparts, so hosts catching those across dataknobs packages see engine
errors too.

- Contract violations (missing required arguments) raise
  :class:`InvalidArgumentError`, which is also a ``ValueError``.
- Configuration problems raise :class:`ConfigurationError`; ambiguous
  validator lookups raise its :class:`AmbiguousValidatorError` subclass.
- Failures while creating validators are wrapped in :class:`OperationError`.
- Structural misuse of the rule tree raises :class:`NotSupportedError` or
  :class:`LeafNotImplementedError`.

Example:
    ```python
    from dataknobs_validation.exceptions import ValidationEngineError

    try:
        controller.validate(order)
    except ValidationEngineError as e:
        logger.error(f"Validation aborted: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any

from dataknobs_common import (
    ConfigurationError as BaseConfigurationError,
    DataknobsError,
    NotFoundError as BaseNotFoundError,
    OperationError as BaseOperationError,
)


class ValidationEngineError(DataknobsError):
    """Base exception for the validation engine."""

    pass


class InvalidArgumentError(ValidationEngineError, ValueError):
    """Raised when a required argument is missing or out of range.

    These are contract violations: they always fail fast and abort the
    current ``validate`` call.

    Example:
        ```python
        raise InvalidArgumentError(
            "context must not be None",
            context={"argument": "context"}
        )
        ```
    """

    pass


class ConfigurationError(ValidationEngineError, BaseConfigurationError):
    """Raised when validator configuration is invalid.

    Common scenarios include:
    - Unknown object type paths in factory configuration
    - Invalid boolean settings in the environment
    - Malformed YAML validator definitions
    """

    pass


class AmbiguousValidatorError(ConfigurationError):
    """Raised when more than one validator is registered for a type.

    Example:
        ```python
        raise AmbiguousValidatorError(
            "Multiple validators registered for Order",
            context={"object_type": "Order", "count": 2}
        )
        ```
    """

    pass


class OperationError(ValidationEngineError, BaseOperationError):
    """Raised when an engine operation fails.

    Used to wrap failures raised while instantiating or setting up a
    validator, and for conflicting registrations. The original exception is
    chained as ``__cause__``.
    """

    pass


class NotFoundError(ValidationEngineError, BaseNotFoundError, LookupError):
    """Raised when a requested registration does not exist."""

    pass


class NotSupportedError(ValidationEngineError, TypeError):
    """Raised when an abstract walk entry point is invoked directly.

    ``ConditionalTarget.validate`` and ``ConditionalRule.validate`` only make
    sense on their ``If``/``IfNot`` variants.
    """

    pass


class LeafNotImplementedError(ValidationEngineError, NotImplementedError):
    """Raised when a leaf hook is called on a structural variant.

    Structural targets and rules (groups, conditionals, custom and validator
    rules) walk their children instead of computing a value, so their
    ``execute``/``get_value``/``create_result`` hooks are never implemented.
    """

    def __init__(self, owner: Any, operation: str):
        """Initialize with the offending object and hook name.

        Args:
            owner: The target or rule whose hook was invoked
            operation: Name of the hook
        """
        super().__init__(
            f"{type(owner).__name__} does not implement {operation}",
            context={"type": type(owner).__name__, "operation": operation},
        )


def check_not_none(value: Any, argument: str) -> None:
    """Fail fast when a required argument is None.

    Args:
        value: Argument value to check
        argument: Argument name used in the error message

    Raises:
        InvalidArgumentError: If value is None
    """
    if value is None:
        raise InvalidArgumentError(
            f"{argument} must not be None",
            context={"argument": argument},
        )


__all__ = [
    "ValidationEngineError",
    "InvalidArgumentError",
    "ConfigurationError",
    "AmbiguousValidatorError",
    "OperationError",
    "NotFoundError",
    "NotSupportedError",
    "LeafNotImplementedError",
    "check_not_none",
]
