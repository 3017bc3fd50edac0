"""Leaf rules computing a boolean outcome for the target value.

Except for :class:`RequiredRule`, every leaf rule treats None as passing;
combine with ``required()`` to enforce presence.
"""

from __future__ import annotations

import re
from collections.abc import Sized
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from ..context import RuleContext
from ..exceptions import InvalidArgumentError, check_not_none
from ..results import LengthRuleResult, RangeRuleResult, RegexRuleResult, RuleResult, UriRuleResult
from .base import BooleanRule

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
DIGITS_PATTERN = re.compile(r"[0-9]+")
DEFAULT_URI_SCHEMES = ("http", "https")


class RequiredRule(BooleanRule):
    """Target value must not be None."""

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        return context.target_value() is not None


class LengthRule(BooleanRule):
    """Length of the target value must lie within inclusive bounds.

    Sized values (strings, collections) use ``len``; anything else is measured
    by the length of its string form.

    Args:
        min: Minimum length, or None for no lower bound
        max: Maximum length, or None for no upper bound
        continue_validation_when_false: Keep validating after a failure
    """

    def __init__(
        self,
        min: int | None = None,
        max: int | None = None,
        continue_validation_when_false: bool = False,
    ):
        super().__init__(continue_validation_when_false)
        if min is not None and max is not None and min > max:
            raise InvalidArgumentError(
                f"min length ({min}) cannot be greater than max ({max})",
                context={"min": min, "max": max},
            )
        self.min = min
        self.max = max

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        value = context.target_value()
        if value is None:
            return True

        length = len(value) if isinstance(value, Sized) else len(str(value))
        if self.min is not None and length < self.min:
            return False
        if self.max is not None and length > self.max:
            return False
        return True

    def create_result(self, context: RuleContext, value: Any) -> RuleResult | None:
        check_not_none(context, "context")
        return LengthRuleResult(self.name, value, min=self.min, max=self.max)


class RangeRule(BooleanRule):
    """Target value must lie within inclusive bounds.

    Works with any ordered values (numbers, strings, dates). Values that
    cannot be ordered against a bound fail.
    """

    def __init__(self, min: Any = None, max: Any = None, continue_validation_when_false: bool = False):
        super().__init__(continue_validation_when_false)
        self.min = min
        self.max = max

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        value = context.target_value()
        if value is None:
            return True

        try:
            if self.min is not None and value < self.min:
                return False
            if self.max is not None and value > self.max:
                return False
        except TypeError:
            return False
        return True

    def create_result(self, context: RuleContext, value: Any) -> RuleResult | None:
        check_not_none(context, "context")
        return RangeRuleResult(self.name, value, min=self.min, max=self.max)


class RegexRule(BooleanRule):
    """String form of the target value must match a pattern entirely.

    Args:
        pattern: Regular expression; an empty pattern accepts everything
        flags: ``re`` flags used to compile the pattern
        continue_validation_when_false: Keep validating after a failure
    """

    def __init__(self, pattern: str | None, flags: int = 0, continue_validation_when_false: bool = False):
        super().__init__(continue_validation_when_false)
        self.pattern = pattern
        self.flags = flags
        self._regex = re.compile(pattern, flags) if pattern else None

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        value = context.target_value()
        if value is None or self._regex is None:
            return True
        return self._regex.fullmatch(str(value)) is not None

    def create_result(self, context: RuleContext, value: Any) -> RuleResult | None:
        check_not_none(context, "context")
        return RegexRuleResult(self.name, value, pattern=self.pattern, flags=self.flags)


class DigitsRule(BooleanRule):
    """Target value must be a non-empty string of ASCII digits."""

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        value = context.target_value()
        if value is None:
            return True
        return DIGITS_PATTERN.fullmatch(str(value)) is not None


class UriKind(Enum):
    """Kinds of URI accepted by :class:`UriRule`."""

    ABSOLUTE = "Absolute"
    RELATIVE = "Relative"
    RELATIVE_OR_ABSOLUTE = "RelativeOrAbsolute"


class UriRule(BooleanRule):
    """Target value must be a URI of the given kind.

    Absolute URIs need a network location and one of the allowed schemes
    (case-insensitive). Relative URIs must have neither scheme nor network
    location.

    Args:
        kind: Accepted URI kind
        schemes: Allowed schemes of absolute URIs; defaults to http and https
        continue_validation_when_false: Keep validating after a failure
    """

    def __init__(
        self,
        kind: UriKind = UriKind.ABSOLUTE,
        schemes: list[str] | tuple[str, ...] | None = None,
        continue_validation_when_false: bool = False,
    ):
        super().__init__(continue_validation_when_false)
        self.kind = UriKind(kind)
        self.schemes = list(schemes) if schemes else list(DEFAULT_URI_SCHEMES)

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        value = context.target_value()
        if value is None:
            return True

        text = str(value)
        if not text or text != text.strip():
            return False

        try:
            parts = urlsplit(text)
        except ValueError:
            return False

        if parts.scheme:
            if self.kind is UriKind.RELATIVE:
                return False
            allowed = {scheme.lower() for scheme in self.schemes}
            return parts.scheme.lower() in allowed and bool(parts.netloc)

        if self.kind is UriKind.ABSOLUTE:
            return False
        return not parts.netloc and " " not in text

    def create_result(self, context: RuleContext, value: Any) -> RuleResult | None:
        check_not_none(context, "context")
        return UriRuleResult(self.name, value, kind=self.kind, schemes=list(self.schemes))


class EmailRule(BooleanRule):
    """Target value must look like an email address."""

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        value = context.target_value()
        if value is None:
            return True
        return EMAIL_PATTERN.fullmatch(str(value)) is not None


class CreditCardRule(BooleanRule):
    """Target value must be a card number passing the Luhn checksum.

    Spaces and dashes are ignored.
    """

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        value = context.target_value()
        if value is None:
            return True

        number = re.sub(r"[\s-]", "", str(value))
        if not DIGITS_PATTERN.fullmatch(number):
            return False
        return luhn_check(number)


def luhn_check(number: str) -> bool:
    """Validate a digit string with the Luhn algorithm."""
    total = 0
    for index, char in enumerate(reversed(number)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


class SafeTextRule(BooleanRule):
    """String value may only contain letters, digits and whitespace.

    Non-string and empty values pass.
    """

    def execute(self, context: RuleContext) -> bool:
        check_not_none(context, "context")
        value = context.target_value()
        if not isinstance(value, str) or not value:
            return True
        return all(char.isalnum() or char.isspace() for char in value)


__all__ = [
    "RequiredRule",
    "LengthRule",
    "RangeRule",
    "RegexRule",
    "DigitsRule",
    "UriKind",
    "UriRule",
    "EmailRule",
    "CreditCardRule",
    "SafeTextRule",
    "luhn_check",
]
