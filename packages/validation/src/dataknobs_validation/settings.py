"""Engine-wide defaults for validation runs.

Settings can be built in code, from a configuration dictionary, or from
environment variables:

```bash
export DATAKNOBS_VALIDATION_CONTINUE_VALIDATION=true
export DATAKNOBS_VALIDATION_IGNORE_EMPTY_RESULTS=false
export DATAKNOBS_VALIDATION_CACHE_VALIDATORS=no
```
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from .exceptions import ConfigurationError
from .provider import ValidatorRegistry

logger = logging.getLogger(__name__)

ENV_PREFIX = "DATAKNOBS_VALIDATION_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def parse_bool(value: Any, key: str) -> bool:
    """Parse a boolean setting.

    Raises:
        ConfigurationError: If the value is not a recognized boolean
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid boolean value for {key}: {value!r}",
        context={"key": key, "value": value},
    )


@dataclass
class ValidationSettings:
    """Defaults applied when the controller builds root contexts.

    Attributes:
        continue_validation: Initial value of the continue flag
        ignore_empty_results: Drop structurally empty results while building
            the result tree
        cache_validators: Providers created by :meth:`create_provider` reuse
            set-up validator instances
    """

    continue_validation: bool = True
    ignore_empty_results: bool = True
    cache_validators: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ValidationSettings:
        """Create settings from a configuration dictionary.

        Unknown keys are ignored; boolean strings such as ``"no"`` are
        accepted.
        """
        known = {f.name for f in fields(cls)}
        values = {
            key: parse_bool(value, key)
            for key, value in (data or {}).items()
            if key in known
        }
        return cls(**values)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> ValidationSettings:
        """Create settings from ``<prefix><FIELD>`` environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid boolean
        """
        values: dict[str, bool] = {}
        for f in fields(cls):
            env_key = f"{prefix}{f.name.upper()}"
            if (raw := os.environ.get(env_key)) is not None:
                values[f.name] = parse_bool(raw, env_key)
                logger.debug(f"Validation setting {f.name}={values[f.name]} from {env_key}")
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def create_provider(self, name: str = "validators") -> ValidatorRegistry:
        """Create an empty registry honouring ``cache_validators``."""
        return ValidatorRegistry(name, cached=self.cache_validators)


__all__ = ["ValidationSettings", "parse_bool", "ENV_PREFIX"]
