"""Tests for ValidationController."""

from dataclasses import dataclass

import pytest

from dataknobs_validation import (
    InvalidArgumentError,
    ValidationController,
    ValidationSettings,
    Validator,
    ValidatorContext,
)


@dataclass
class Signup:
    email: str | None = None
    age: int | None = None


class SignupValidator(Validator[Signup]):
    setups = 0

    def setup(self):
        type(self).setups += 1
        super().setup()

    def configure(self, builder):
        builder.member("email").required().with_error("Messages", "EmailRequired") \
            .is_email().with_error("Messages", "EmailInvalid")
        builder.member("age").is_greater_than_or_equal_to(18).with_error("Messages", "TooYoung")


@pytest.fixture(autouse=True)
def reset_setups():
    SignupValidator.setups = 0


class TestValidate:
    """Test validating objects through the controller."""

    def test_unregistered_type_yields_none(self, registry):
        """Test objects without a validator are not validated."""
        assert ValidationController(registry).validate(Signup()) is None

    def test_none_object_rejected(self, registry):
        """Test a None object is rejected."""
        with pytest.raises(InvalidArgumentError):
            ValidationController(registry).validate(None)

    def test_failures_reported(self, registry):
        """Test failing targets are reported with their outcomes."""
        registry.register(SignupValidator)
        result = ValidationController(registry).validate(Signup("not-an-email", 30))

        keys = [outcome.resource_key for _, outcome in result.iter_value_results()]
        assert keys == ["EmailInvalid"]

    def test_valid_object(self, registry):
        """Test a valid object yields an empty result."""
        registry.register(SignupValidator)
        result = ValidationController(registry).validate(Signup("ann@example.com", 30))
        assert result.is_empty() is True

    def test_settings_applied_to_root_context(self, registry):
        """Test settings control the root context flags."""
        registry.register(SignupValidator)
        settings = ValidationSettings(ignore_empty_results=False)
        result = ValidationController(registry, settings).validate(Signup("ann@example.com", 30))

        assert [target.name for target in result.target_results] == ["email", "age"]

    def test_halted_start(self, registry):
        """Test a cleared initial flag skips every target."""
        registry.register(SignupValidator)
        settings = ValidationSettings(continue_validation=False)
        result = ValidationController(registry, settings).validate(Signup())
        assert result.target_results == []

    def test_defaults(self, registry):
        """Test default settings and provider accessors."""
        controller = ValidationController(registry)
        assert controller.validator_provider is registry
        assert controller.settings == ValidationSettings()

    def test_provider_required(self):
        """Test a None provider is rejected."""
        with pytest.raises(InvalidArgumentError):
            ValidationController(None)


class TestSetupPerProvider:
    """Test validator setup depending on provider caching."""

    def test_cached_provider_sets_up_once(self, registry):
        """Test cached validators are set up by the registry only."""
        registry.register(SignupValidator)
        controller = ValidationController(registry)
        controller.validate(Signup())
        controller.validate(Signup())
        assert SignupValidator.setups == 1

    def test_uncached_provider_sets_up_every_run(self, uncached_registry):
        """Test fresh validators are set up by the controller."""
        uncached_registry.register(SignupValidator)
        controller = ValidationController(uncached_registry)
        result = controller.validate(Signup(None, 30))

        assert SignupValidator.setups == 1
        assert [outcome.resource_key for _, outcome in result.iter_value_results()] == ["EmailRequired"]

        controller.validate(Signup())
        assert SignupValidator.setups == 2


class TestValidateContext:
    """Test validating with a caller-built context."""

    def test_custom_context(self, registry):
        """Test the caller's context is used as is."""
        registry.register(SignupValidator)
        context = ValidatorContext(Signup(None, 10), None, registry, ignore_empty_results=False)

        result = ValidationController(registry).validate_context(context)

        assert context.validator is registry.get_validator(Signup)
        assert [target.name for target in result.target_results] == ["email"]

    def test_none_context_rejected(self, registry):
        """Test a None context is rejected."""
        with pytest.raises(InvalidArgumentError):
            ValidationController(registry).validate_context(None)
