"""Validators declared in configuration.

:class:`ValidatorFactory` turns a configuration dictionary (or YAML
document) into a :class:`ConfiguredValidator`, whose ``configure`` replays the
declarations through the regular builder surface.

Example Configuration:
    ```yaml
    validators:
      - name: login_form
        object_type: myapp.forms.LoginForm
        targets:
          - path: username
            rules:
              - type: required
                error: {resource_name: Messages, resource_key: UsernameRequired}
              - type: length
                min: 3
                max: 20
                continue_on_failure: true
                error: UsernameLength
          - path: password
            rules:
              - type: length
                min: 8
          - path: confirmation
            rules:
              - type: equal
                target: password
                error: PasswordMismatch
          - kind: any_of
            path: addresses
            rules:
              - type: validator
    ```
"""

from __future__ import annotations

import importlib
import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

import yaml
from dataknobs_config import FactoryBase

from .builders import (
    TargetListBuilder,
    ValidatorBuilder,
    any_of_target,
    each_of_target,
    member_target,
    object_target,
)
from .exceptions import ConfigurationError
from .provider import ValidatorRegistry
from .results import ValueResult
from .rules import (
    Comparison,
    ComparisonRule,
    CreditCardRule,
    DigitsRule,
    EmailRule,
    GroupRule,
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
from .targets import Target
from .validator import Validator

logger = logging.getLogger(__name__)

_COMPARISONS = {
    "equal": Comparison.EQUAL,
    "not_equal": Comparison.NOT_EQUAL,
    "less_than": Comparison.LESS_THAN,
    "less_than_or_equal": Comparison.LESS_THAN_OR_EQUAL,
    "greater_than": Comparison.GREATER_THAN,
    "greater_than_or_equal": Comparison.GREATER_THAN_OR_EQUAL,
}

_SIMPLE_RULES = {
    "required": RequiredRule,
    "digits": DigitsRule,
    "email": EmailRule,
    "credit_card": CreditCardRule,
    "safe_text": SafeTextRule,
}


class ConfiguredValidator(Validator[Any]):
    """Validator whose targets are declared by a configuration dictionary.

    Args:
        config: Validator configuration
        object_type: Validated type resolved from the configuration
        factory: Factory replaying the declarations
    """

    def __init__(self, config: Mapping[str, Any], object_type: type | None, factory: ValidatorFactory):
        super().__init__()
        self.config = dict(config)
        self.name = self.config.get("name", "unnamed_validator")
        self.validated_type = object_type
        self._factory = factory

    def configure(self, builder: ValidatorBuilder) -> None:
        self._factory.add_targets(builder, self.config.get("targets", []))

    def __repr__(self) -> str:
        type_name = self.validated_type.__name__ if self.validated_type is not None else "Any"
        return f"ConfiguredValidator(name={self.name!r}, object_type={type_name}, targets={len(self.targets)})"


class ValidatorFactory(FactoryBase):
    """Factory for creating validators from configuration.

    Configuration Options:
        name (str): Validator name
        object_type (str | type): Validated type or its dotted import path
        targets (list): Target definitions

    Target Definition Options:
        kind (str): object, member, any_of, each_of or group (default:
            member when a path is given, object otherwise)
        path (str): Dotted attribute/key path of the member
        name (str): Name reported in results (default: the path)
        targets (list): Member targets of a group
        rules (list): Rule definitions

    Rule Definition Options:
        type (str): required, length, range, regex, digits, uri, email,
            credit_card, safe_text, equal, not_equal, less_than,
            less_than_or_equal, greater_than, greater_than_or_equal,
            validator or group
        params (dict): Rule parameters; may also be given inline
            (min, max, pattern, flags, kind, schemes)
        continue_on_failure (bool): Keep validating after a failure
        value: Literal operand of comparisons
        target (str | dict): Path (or target definition) of the other
            operand of comparisons
        name (str): Name of a rule group
        rules (list): Member rules of a group
        results (list): Outcomes, each with match, resource_name and
            resource_key
        error / success (str | dict): Shorthand outcomes for False / True;
            a string is taken as the resource key
    """

    def create(self, **config: Any) -> ConfiguredValidator:
        """Create a ConfiguredValidator from configuration.

        The validator is returned without setup; registries and the
        controller call ``setup()`` before use.

        Raises:
            ConfigurationError: If object_type cannot be resolved
        """
        name = config.get("name", "unnamed_validator")
        object_type = resolve_type(config.get("object_type"))

        logger.info(f"Creating validator: {name}")

        return ConfiguredValidator(config, object_type, self)

    def add_targets(self, builder: TargetListBuilder, target_configs: Iterable[Mapping[str, Any]]) -> None:
        """Declare configured targets through a builder."""
        for target_config in target_configs or []:
            self._add_target(builder, target_config)

    def _add_target(self, builder: TargetListBuilder, config: Mapping[str, Any]) -> None:
        path = config.get("path")
        kind = str(config.get("kind") or ("member" if path else "object")).lower()
        name = config.get("name")

        if kind == "group":
            group = builder.group(name or "")
            self.add_targets(group, config.get("targets", []))
            return

        target = self._build_target(kind, path, name)
        if target is None:
            return

        target_builder = builder.target(target)
        for rule_config in config.get("rules", []) or []:
            rule = self._build_rule(rule_config)
            if rule is not None:
                target_builder.has_rule(rule)

    def _build_target(self, kind: str, path: str | None, name: str | None) -> Target | None:
        if kind == "object":
            return object_target(name or "")

        if kind not in ("member", "any_of", "each_of"):
            logger.warning(f"Unknown target kind: {kind}")
            return None

        if not path:
            logger.warning(f"Target configuration of kind '{kind}' missing 'path', skipping")
            return None

        if kind == "any_of":
            return any_of_target(path, name=name)
        if kind == "each_of":
            return each_of_target(path, name=name)
        return member_target(path, name)

    def _build_rule(self, config: Mapping[str, Any]) -> Rule | None:
        """Build a rule object, with its outcomes, from configuration."""
        rule_type = str(config.get("type", "")).lower()
        continue_on_failure = bool(_param(config, "continue_on_failure", False))

        rule: Rule
        if rule_type in _SIMPLE_RULES:
            rule = _SIMPLE_RULES[rule_type](continue_on_failure)

        elif rule_type == "length":
            rule = LengthRule(_param(config, "min"), _param(config, "max"), continue_on_failure)

        elif rule_type == "range":
            rule = RangeRule(_param(config, "min"), _param(config, "max"), continue_on_failure)

        elif rule_type in ("regex", "pattern"):
            pattern = _param(config, "pattern")
            if not pattern:
                logger.warning("Regex rule configuration missing 'pattern', skipping")
                return None
            rule = RegexRule(pattern, _regex_flags(_param(config, "flags", 0)), continue_on_failure)

        elif rule_type == "uri":
            rule = UriRule(_uri_kind(_param(config, "kind")), _param(config, "schemes"), continue_on_failure)

        elif rule_type in _COMPARISONS:
            rule = self._build_comparison(config, _COMPARISONS[rule_type], continue_on_failure)

        elif rule_type == "validator":
            rule = ValidatorRule()

        elif rule_type == "group":
            group = GroupRule(config.get("name", ""))
            for child_config in config.get("rules", []) or []:
                child = self._build_rule(child_config)
                if child is not None:
                    group.rules.append(child)
            rule = group

        else:
            logger.warning(f"Unknown rule type: {rule_type}")
            return None

        if not isinstance(rule, GroupRule):
            rule.value_results.extend(_value_results(config))
        return rule

    def _build_comparison(
        self,
        config: Mapping[str, Any],
        comparison: Comparison,
        continue_on_failure: bool,
    ) -> Rule:
        other = config.get("target")
        if other is None:
            return ComparisonRule.with_value(_param(config, "value"), comparison, continue_on_failure)

        if isinstance(other, Mapping):
            other_path = other.get("path")
            other_kind = str(other.get("kind") or ("member" if other_path else "object")).lower()
            other_target = self._build_target(other_kind, other_path, other.get("name"))
        else:
            other_target = member_target(str(other))

        if other_target is None:
            raise ConfigurationError(
                f"Invalid comparison target: {other!r}",
                context={"target": other},
            )
        return TargetComparisonRule(other_target, comparison, continue_on_failure)


def resolve_type(object_type: Any) -> type | None:
    """Resolve a type given directly or as a dotted import path.

    Raises:
        ConfigurationError: If the path cannot be imported or does not name
            a type
    """
    if object_type is None or isinstance(object_type, type):
        return object_type

    type_path = str(object_type)
    if "." not in type_path:
        raise ConfigurationError(
            f"Invalid type path: {type_path}",
            context={"object_type": type_path},
        )

    module_path, type_name = type_path.rsplit(".", 1)
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigurationError(
            f"Failed to import {type_path}: {e}",
            context={"object_type": type_path},
        ) from e

    resolved = getattr(module, type_name, None)
    if not isinstance(resolved, type):
        raise ConfigurationError(
            f"Type {type_name} not found in {module_path}",
            context={"object_type": type_path},
        )
    return resolved


def from_yaml(text: str) -> list[dict[str, Any]]:
    """Parse validator configurations from a YAML document.

    The document may hold a single validator mapping, a list of them, or a
    mapping with a ``validators`` list.

    Raises:
        ConfigurationError: If the document is not valid YAML or has an
            unexpected shape
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid validator YAML: {e}") from e

    if data is None:
        return []
    if isinstance(data, Mapping):
        if "validators" in data:
            data = data["validators"] or []
        else:
            data = [data]
    if not isinstance(data, list) or not all(isinstance(item, Mapping) for item in data):
        raise ConfigurationError(
            "Validator YAML must define a mapping or a list of mappings",
            context={"type": type(data).__name__},
        )
    return [dict(item) for item in data]


def register_all(
    registry: ValidatorRegistry,
    configs: Iterable[Mapping[str, Any]],
    factory: ValidatorFactory | None = None,
) -> list[type]:
    """Register configured validators with a registry.

    Each configuration must name its ``object_type``. Every registry lookup
    creates a fresh :class:`ConfiguredValidator` from the configuration.

    Returns:
        The registered object types, in order

    Raises:
        ConfigurationError: If a configuration has no resolvable object_type
    """
    factory = factory or validator_factory
    registered: list[type] = []
    for config in configs:
        object_type = resolve_type(config.get("object_type"))
        if object_type is None:
            raise ConfigurationError(
                f"Validator configuration {config.get('name', 'unnamed_validator')!r} "
                f"missing 'object_type'",
                context={"name": config.get("name")},
            )

        def create(config: Mapping[str, Any] = config) -> ConfiguredValidator:
            return factory.create(**config)

        create.__name__ = str(config.get("name", "unnamed_validator"))
        registry.register(create, object_type)
        registered.append(object_type)
    return registered


def _param(config: Mapping[str, Any], key: str, default: Any = None) -> Any:
    if key in config:
        return config[key]
    return (config.get("params") or {}).get(key, default)


def _regex_flags(flags: Any) -> int:
    if isinstance(flags, int):
        return flags
    names = [flags] if isinstance(flags, str) else list(flags or [])
    value = 0
    for name in names:
        flag = getattr(re.RegexFlag, str(name).upper(), None)
        if flag is None:
            raise ConfigurationError(f"Unknown regex flag: {name}", context={"flag": name})
        value |= flag
    return value


def _uri_kind(kind: Any) -> UriKind:
    if kind is None:
        return UriKind.ABSOLUTE
    if isinstance(kind, UriKind):
        return kind
    text = str(kind)
    for member in UriKind:
        if text.upper() == member.name or text == member.value:
            return member
    raise ConfigurationError(f"Unknown URI kind: {kind}", context={"kind": kind})


def _value_results(config: Mapping[str, Any]) -> list[ValueResult]:
    value_results = [
        ValueResult(item.get("match"), item.get("resource_name"), item.get("resource_key"))
        for item in config.get("results", []) or []
    ]
    for key, match in (("error", False), ("success", True)):
        shorthand = config.get(key)
        if shorthand is None:
            continue
        if isinstance(shorthand, Mapping):
            value_results.append(
                ValueResult(match, shorthand.get("resource_name"), shorthand.get("resource_key"))
            )
        else:
            value_results.append(ValueResult(match, None, str(shorthand)))
    return value_results


# Singleton instance for registration
validator_factory = ValidatorFactory()


__all__ = [
    "ConfiguredValidator",
    "ValidatorFactory",
    "validator_factory",
    "resolve_type",
    "from_yaml",
    "register_all",
]
