"""Tests for validator, target and rule contexts."""

import pytest

from dataknobs_validation import (
    InvalidArgumentError,
    ObjectTarget,
    RequiredRule,
    RuleContext,
    RuleResult,
    TargetContext,
    ValidatorContext,
    ValueResult,
)


class TestValidatorContext:
    """Test ValidatorContext construction and flags."""

    def test_defaults(self, registry):
        """Test default flag values."""
        context = ValidatorContext("obj", None, registry)
        assert context.object == "obj"
        assert context.validator is None
        assert context.validator_provider is registry
        assert context.parent is None
        assert context.continue_validation is True
        assert context.ignore_empty_results is True

    def test_object_required(self, registry):
        """Test a None object is rejected."""
        with pytest.raises(InvalidArgumentError):
            ValidatorContext(None, None, registry)

    def test_provider_required(self):
        """Test a None provider is rejected."""
        with pytest.raises(InvalidArgumentError):
            ValidatorContext("obj")

    def test_validator_cannot_be_reset_to_none(self, registry):
        """Test assigning None to validator raises."""
        context = ValidatorContext("obj", None, registry)
        with pytest.raises(InvalidArgumentError):
            context.validator = None

    def test_root_walks_parents(self, registry):
        """Test root returns the outermost context."""
        root = ValidatorContext("root", None, registry)
        child = ValidatorContext("child", None, registry, parent=root)
        grandchild = ValidatorContext("grandchild", None, registry, parent=child)
        assert grandchild.root is root
        assert root.root is root

    def test_accepts_honours_ignore_empty(self, registry):
        """Test the ignore-empty policy."""
        empty = RuleResult("Required", True)
        non_empty = RuleResult("Required", False, [ValueResult(False, "Messages", "Required")])

        ignoring = ValidatorContext("obj", None, registry)
        assert ignoring.accepts(empty) is False
        assert ignoring.accepts(non_empty) is True

        keeping = ValidatorContext("obj", None, registry, ignore_empty_results=False)
        assert keeping.accepts(empty) is True


class TestTargetAndRuleContext:
    """Test TargetContext and RuleContext."""

    def test_target_context_requires_validator_context(self):
        """Test a None validator context is rejected."""
        with pytest.raises(InvalidArgumentError):
            TargetContext(None, None)

    def test_target_assignment(self, registry):
        """Test target can be assigned but not reset to None."""
        context = TargetContext(None, ValidatorContext("obj", None, registry))
        assert context.target is None

        target = ObjectTarget()
        context.target = target
        assert context.target is target

        with pytest.raises(InvalidArgumentError):
            context.target = None

    def test_rule_context(self, registry):
        """Test rule context accessors."""
        validator_context = ValidatorContext("obj", None, registry)
        target_context = TargetContext(ObjectTarget(), validator_context)
        context = RuleContext(None, target_context)

        assert context.rule is None
        assert context.target_context is target_context
        assert context.validator_context is validator_context
        assert context.target_value() == "obj"

        rule = RequiredRule()
        context.rule = rule
        assert context.rule is rule
        with pytest.raises(InvalidArgumentError):
            context.rule = None

    def test_rule_context_requires_target_context(self):
        """Test a None target context is rejected."""
        with pytest.raises(InvalidArgumentError):
            RuleContext(None, None)
