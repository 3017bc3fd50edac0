"""Shared fixtures for validation engine tests."""

from typing import Any

import pytest

from dataknobs_validation import (
    MemberTarget,
    RuleContext,
    Target,
    TargetContext,
    ValidatorContext,
    ValidatorRegistry,
)


@pytest.fixture
def registry():
    """Empty caching validator registry."""
    return ValidatorRegistry("test_validators")


@pytest.fixture
def uncached_registry():
    """Empty non-caching validator registry."""
    return ValidatorRegistry("test_validators", cached=False)


@pytest.fixture
def make_validator_context(registry):
    """Factory for root validator contexts backed by the registry fixture."""

    def _make(obj: Any = None, **flags: Any) -> ValidatorContext:
        return ValidatorContext(obj if obj is not None else object(), None, registry, **flags)

    return _make


@pytest.fixture
def make_rule_context(make_validator_context):
    """Factory for rule contexts whose target yields a fixed value.

    The target is a member target named ``Value`` returning ``value``, unless
    an explicit target is given.
    """

    def _make(value: Any = None, target: Target | None = None, obj: Any = None, **flags: Any) -> RuleContext:
        validator_context = make_validator_context(obj, **flags)
        target = target or MemberTarget("Value", lambda o: value)
        return RuleContext(None, TargetContext(target, validator_context))

    return _make
