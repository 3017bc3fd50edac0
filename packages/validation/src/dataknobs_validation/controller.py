"""Host-facing entry point of the validation engine."""

from __future__ import annotations

import logging
from typing import Any

from .context import ValidatorContext
from .exceptions import check_not_none
from .provider import ValidatorProvider
from .results import ValidatorResult
from .settings import ValidationSettings

logger = logging.getLogger(__name__)


class ValidationController:
    """Validates objects with the validators resolved by a provider.

    Args:
        validator_provider: Provider resolving validators by object type
        settings: Defaults for root contexts built by :meth:`validate`

    Example:
        ```python
        registry = ValidatorRegistry()
        registry.register(LoginFormValidator)

        controller = ValidationController(registry)
        result = controller.validate(LoginForm(username="", password="secret"))
        for path, outcome in result.iter_value_results():
            print(".".join(path), outcome.resource_key)
        ```
    """

    def __init__(self, validator_provider: ValidatorProvider, settings: ValidationSettings | None = None):
        check_not_none(validator_provider, "validator_provider")
        self._validator_provider = validator_provider
        self._settings = settings or ValidationSettings()

    @property
    def validator_provider(self) -> ValidatorProvider:
        return self._validator_provider

    @property
    def settings(self) -> ValidationSettings:
        return self._settings

    def validate(self, obj: Any) -> ValidatorResult | None:
        """Validate an object with a fresh root context.

        Returns:
            Validator result, or None when no validator handles the object's
            type

        Raises:
            InvalidArgumentError: If obj is None
        """
        context = ValidatorContext(
            obj,
            None,
            self._validator_provider,
            continue_validation=self._settings.continue_validation,
            ignore_empty_results=self._settings.ignore_empty_results,
        )
        return self.validate_context(context)

    def validate_context(self, context: ValidatorContext) -> ValidatorResult | None:
        """Validate with a caller-built context.

        Raises:
            InvalidArgumentError: If context is None
        """
        check_not_none(context, "context")

        object_type = type(context.object)
        validator = self._validator_provider.get_validator(object_type)
        if validator is None:
            logger.debug(f"No validator registered for {object_type.__name__}")
            return None

        if not self._validator_provider.is_cached:
            validator.setup()

        return validator.validate(context)


__all__ = ["ValidationController"]
