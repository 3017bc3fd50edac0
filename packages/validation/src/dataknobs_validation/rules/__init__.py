"""Rule hierarchy: boolean leaf rules, comparisons and structural rules."""

from .base import BooleanRule, Rule, default_rule_name, values_match
from .boolean import (
    CreditCardRule,
    DigitsRule,
    EmailRule,
    LengthRule,
    RangeRule,
    RegexRule,
    RequiredRule,
    SafeTextRule,
    UriKind,
    UriRule,
    luhn_check,
)
from .comparison import Comparison, ComparisonRule, TargetComparisonRule, get_comparer, is_orderable
from .structural import ConditionalRule, CustomRule, GroupRule, IfNotRule, IfRule, ValidatorRule

__all__ = [
    "Rule",
    "BooleanRule",
    "values_match",
    "default_rule_name",
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
    "Comparison",
    "get_comparer",
    "is_orderable",
    "ComparisonRule",
    "TargetComparisonRule",
    "GroupRule",
    "ConditionalRule",
    "IfRule",
    "IfNotRule",
    "CustomRule",
    "ValidatorRule",
]
