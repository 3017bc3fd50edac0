"""Tests for configuration-driven validators."""

import re
from collections import OrderedDict
from types import SimpleNamespace

import pytest
from dataknobs_config import FactoryBase

from dataknobs_validation import (
    AnyOfTarget,
    ComparisonRule,
    ConfigurationError,
    ConfiguredValidator,
    GroupRule,
    GroupTarget,
    LengthRule,
    ObjectTarget,
    RegexRule,
    RequiredRule,
    TargetComparisonRule,
    UriKind,
    UriRule,
    ValidationController,
    ValidatorFactory,
    ValidatorRule,
    ValueResult,
    from_yaml,
    register_all,
    validator_factory,
)
from dataknobs_validation.factory import resolve_type

LOGIN_YAML = """
validators:
  - name: login_form
    object_type: types.SimpleNamespace
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
            params: {min: 8}
            error: PasswordTooShort
      - path: confirmation
        rules:
          - type: equal
            target: password
            error: PasswordMismatch
"""


@pytest.fixture
def factory():
    return ValidatorFactory()


def build(factory, **config):
    validator = factory.create(**config)
    validator.setup()
    return validator


class TestCreate:
    """Test creating configured validators."""

    def test_create_returns_unset_validator(self, factory):
        """Test targets are declared only on setup."""
        validator = factory.create(name="orders", object_type=dict, targets=[{"path": "number"}])

        assert isinstance(validator, ConfiguredValidator)
        assert validator.name == "orders"
        assert validator.validated_type is dict
        assert validator.targets == []

        validator.setup()
        assert [target.name for target in validator.targets] == ["number"]

    def test_default_name(self, factory):
        """Test unnamed configurations get a placeholder name."""
        assert factory.create().name == "unnamed_validator"

    def test_create_logs(self, factory, caplog):
        """Test creation is logged at info level."""
        with caplog.at_level("INFO", logger="dataknobs_validation.factory"):
            factory.create(name="orders")
        assert "Creating validator: orders" in caplog.text

    def test_singleton(self):
        """Test the module-level factory instance."""
        assert isinstance(validator_factory, ValidatorFactory)
        assert isinstance(validator_factory, FactoryBase)


class TestResolveType:
    """Test object type resolution."""

    def test_types_and_paths(self):
        """Test types pass through and dotted paths are imported."""
        assert resolve_type(None) is None
        assert resolve_type(dict) is dict
        assert resolve_type("collections.OrderedDict") is OrderedDict

    @pytest.mark.parametrize("path", ["OrderedDict", "no_such_module_xyz.Thing", "collections.NoSuchThing", "re.compile"])
    def test_invalid_paths(self, path):
        """Test unresolvable paths raise configuration errors."""
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_type(path)
        assert exc_info.value.context["object_type"] == path


class TestTargets:
    """Test target declarations from configuration."""

    def test_target_kinds(self, factory):
        """Test kinds and default kinds."""
        validator = build(
            factory,
            targets=[
                {"name": "Order"},
                {"path": "number", "name": "Number"},
                {"kind": "any_of", "path": "lines"},
                {"kind": "group", "name": "Shipping", "targets": [{"path": "address.city"}]},
            ],
        )

        order, number, lines, shipping = validator.targets
        assert isinstance(order, ObjectTarget) and order.name == "Order"
        assert number.name == "Number"
        assert isinstance(lines, AnyOfTarget)
        assert isinstance(shipping, GroupTarget)
        assert [target.name for target in shipping.targets] == ["address.city"]

    def test_invalid_targets_skipped(self, factory, caplog):
        """Test unknown kinds and missing paths are skipped with a warning."""
        with caplog.at_level("WARNING", logger="dataknobs_validation.factory"):
            validator = build(factory, targets=[{"kind": "dictionary"}, {"kind": "each_of"}, {"path": "ok"}])

        assert [target.name for target in validator.targets] == ["ok"]
        assert "Unknown target kind: dictionary" in caplog.text
        assert "missing 'path'" in caplog.text


class TestRules:
    """Test rule declarations from configuration."""

    def _rules(self, factory, *rule_configs):
        validator = build(factory, targets=[{"path": "value", "rules": list(rule_configs)}])
        return validator.targets[0].rules

    def test_leaf_rules(self, factory):
        """Test leaf rule types and their parameters."""
        required, length, regex, uri = self._rules(
            factory,
            {"type": "required"},
            {"type": "length", "params": {"min": 2, "max": 4}, "continue_on_failure": True},
            {"type": "regex", "pattern": "[a-z]+", "flags": ["ignorecase", "ascii"]},
            {"type": "uri", "kind": "relative", "schemes": ["ftp"]},
        )

        assert isinstance(required, RequiredRule)
        assert isinstance(length, LengthRule)
        assert (length.min, length.max, length.continue_validation_when_false) == (2, 4, True)
        assert isinstance(regex, RegexRule)
        assert regex.flags == re.IGNORECASE | re.ASCII
        assert isinstance(uri, UriRule)
        assert uri.kind is UriKind.RELATIVE
        assert uri.schemes == ["ftp"]

    def test_comparisons(self, factory):
        """Test literal and target operands."""
        literal, path, mapping = self._rules(
            factory,
            {"type": "greater_than", "value": 10},
            {"type": "equal", "target": "other"},
            {"type": "less_than", "target": {"kind": "each_of", "path": "limits"}},
        )

        assert type(literal) is ComparisonRule
        assert literal.name == "GreaterThan"
        assert isinstance(path, TargetComparisonRule)
        assert path.other_target.name == "other"
        assert mapping.name == "LessThanToTarget"

    def test_invalid_comparison_target(self, factory):
        """Test unusable comparison targets raise."""
        with pytest.raises(ConfigurationError):
            self._rules(factory, {"type": "equal", "target": {"kind": "any_of"}})

    def test_group_and_validator_rules(self, factory):
        """Test nested rule groups and delegation."""
        group, delegate = self._rules(
            factory,
            {"type": "group", "name": "Checks", "rules": [{"type": "required"}, {"type": "digits"}]},
            {"type": "validator", "error": "Ignored"},
        )

        assert isinstance(group, GroupRule)
        assert [rule.name for rule in group.rules] == ["Required", "Digits"]
        assert isinstance(delegate, ValidatorRule)

    def test_outcomes(self, factory):
        """Test result lists and error/success shorthands."""
        (rule,) = self._rules(
            factory,
            {
                "type": "required",
                "results": [{"match": None, "resource_name": "Messages", "resource_key": "Unknown"}],
                "error": {"resource_name": "Messages", "resource_key": "Required"},
                "success": "Present",
            },
        )

        assert rule.value_results == [
            ValueResult(None, "Messages", "Unknown"),
            ValueResult(False, "Messages", "Required"),
            ValueResult(True, None, "Present"),
        ]

    def test_unknown_rules_skipped(self, factory, caplog):
        """Test unknown rule types and regex rules without pattern are skipped."""
        with caplog.at_level("WARNING", logger="dataknobs_validation.factory"):
            rules = self._rules(factory, {"type": "palindrome"}, {"type": "regex"}, {"type": "email"})

        assert [rule.name for rule in rules] == ["Email"]
        assert "Unknown rule type: palindrome" in caplog.text

    def test_invalid_parameters(self, factory):
        """Test bad regex flags and URI kinds raise."""
        with pytest.raises(ConfigurationError):
            self._rules(factory, {"type": "regex", "pattern": "x", "flags": "sometimes"})
        with pytest.raises(ConfigurationError):
            self._rules(factory, {"type": "uri", "kind": "sideways"})


class TestYaml:
    """Test YAML documents."""

    def test_document_shapes(self):
        """Test single mappings, lists and validators keys."""
        assert from_yaml("") == []
        assert from_yaml("name: one") == [{"name": "one"}]
        assert from_yaml("- name: one\n- name: two") == [{"name": "one"}, {"name": "two"}]
        assert from_yaml("validators:\n  - name: one") == [{"name": "one"}]

    @pytest.mark.parametrize("text", ["validators: [", "- 1\n- 2", "just text"])
    def test_invalid_documents(self, text):
        """Test malformed documents raise configuration errors."""
        with pytest.raises(ConfigurationError):
            from_yaml(text)

    def test_register_and_validate(self, registry):
        """Test a YAML validator validates objects end to end."""
        assert register_all(registry, from_yaml(LOGIN_YAML)) == [SimpleNamespace]

        controller = ValidationController(registry)
        form = SimpleNamespace(username="al", password="secret", confirmation="secret!")
        result = controller.validate(form)

        keys = [(path, outcome.resource_key) for path, outcome in result.iter_value_results()]
        assert keys == [
            (("username", "Length"), "UsernameLength"),
            (("password", "Length"), "PasswordTooShort"),
        ]

    def test_valid_object(self, registry):
        """Test a valid object passes the YAML validator."""
        register_all(registry, from_yaml(LOGIN_YAML))
        form = SimpleNamespace(username="alice", password="correct horse", confirmation="correct horse")
        assert ValidationController(registry).validate(form).is_empty() is True

    def test_mismatch(self, registry):
        """Test target comparisons from YAML."""
        register_all(registry, from_yaml(LOGIN_YAML))
        form = SimpleNamespace(username="alice", password="correct horse", confirmation="battery staple")
        result = ValidationController(registry).validate(form)
        assert [outcome.resource_key for _, outcome in result.iter_value_results()] == ["PasswordMismatch"]

    def test_register_requires_object_type(self, registry):
        """Test configurations without object_type are rejected."""
        with pytest.raises(ConfigurationError):
            register_all(registry, [{"name": "untyped"}])
