"""Object validation engine for dataknobs.

Validators declare *targets* (extraction points of the validated object) and
*rules* (checks on the extracted values). Validating an object walks that
tree and produces a structured result tree whose value results select the
localizable messages to show:

- **Validators**: :class:`Validator` subclasses declared with the fluent
  builder surface, or :class:`ConfiguredValidator` from dict/YAML
  configuration
- **Providers**: :class:`ValidatorRegistry` resolves validators by type
- **Controller**: :class:`ValidationController` is the host entry point
- **Results**: :class:`ValidatorResult` trees with ``to_dict``,
  ``prune_empty`` and ``iter_value_results``

Example:
    ```python
    from dataclasses import dataclass
    from dataknobs_validation import ValidationController, Validator, ValidatorRegistry

    @dataclass
    class LoginForm:
        username: str
        password: str

    class LoginFormValidator(Validator[LoginForm]):
        def configure(self, builder):
            builder.member("username").required().with_error("Messages", "UsernameRequired")
            builder.member("password").has_length(min=8).with_error("Messages", "PasswordTooShort")

    registry = ValidatorRegistry()
    registry.register(LoginFormValidator)

    result = ValidationController(registry).validate(LoginForm("ann", "secret"))
    [key.resource_key for _, key in result.iter_value_results()]
    # ['PasswordTooShort']
    ```
"""

from dataknobs_validation.builders import (
    GroupTargetBuilder,
    RuleBuilder,
    TargetBuilder,
    TargetListBuilder,
    ValidatorBuilder,
    any_of_target,
    each_of_target,
    member_target,
    object_target,
    path_accessor,
)
from dataknobs_validation.context import RuleContext, TargetContext, ValidatorContext
from dataknobs_validation.controller import ValidationController
from dataknobs_validation.exceptions import (
    AmbiguousValidatorError,
    ConfigurationError,
    InvalidArgumentError,
    LeafNotImplementedError,
    NotFoundError,
    NotSupportedError,
    OperationError,
    ValidationEngineError,
)
from dataknobs_validation.factory import (
    ConfiguredValidator,
    ValidatorFactory,
    from_yaml,
    register_all,
    validator_factory,
)
from dataknobs_validation.provider import ValidatorProvider, ValidatorRegistry
from dataknobs_validation.results import (
    ComparisonRuleResult,
    CustomRuleResult,
    GroupRuleResult,
    GroupTargetResult,
    ItemTargetResult,
    LengthRuleResult,
    RangeRuleResult,
    RegexRuleResult,
    Result,
    RuleResult,
    TargetResult,
    UriRuleResult,
    ValidatorResult,
    ValidatorRuleResult,
    ValueResult,
)
from dataknobs_validation.rules import (
    BooleanRule,
    Comparison,
    ComparisonRule,
    ConditionalRule,
    CreditCardRule,
    CustomRule,
    DigitsRule,
    EmailRule,
    GroupRule,
    IfNotRule,
    IfRule,
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
from dataknobs_validation.settings import ValidationSettings
from dataknobs_validation.targets import (
    AnyOfTarget,
    ConditionalTarget,
    EachOfTarget,
    GroupTarget,
    IfNotTarget,
    IfTarget,
    ItemTarget,
    MemberTarget,
    ObjectTarget,
    Target,
)
from dataknobs_validation.validator import Validator

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "ValidationEngineError",
    "InvalidArgumentError",
    "ConfigurationError",
    "AmbiguousValidatorError",
    "OperationError",
    "NotFoundError",
    "NotSupportedError",
    "LeafNotImplementedError",
    # Contexts
    "ValidatorContext",
    "TargetContext",
    "RuleContext",
    # Results
    "Result",
    "ValueResult",
    "RuleResult",
    "LengthRuleResult",
    "RangeRuleResult",
    "RegexRuleResult",
    "UriRuleResult",
    "ComparisonRuleResult",
    "CustomRuleResult",
    "GroupRuleResult",
    "ValidatorRuleResult",
    "TargetResult",
    "GroupTargetResult",
    "ItemTargetResult",
    "ValidatorResult",
    # Targets
    "Target",
    "ObjectTarget",
    "MemberTarget",
    "ItemTarget",
    "AnyOfTarget",
    "EachOfTarget",
    "GroupTarget",
    "ConditionalTarget",
    "IfTarget",
    "IfNotTarget",
    # Rules
    "Rule",
    "BooleanRule",
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
    "Comparison",
    "ComparisonRule",
    "TargetComparisonRule",
    "GroupRule",
    "ConditionalRule",
    "IfRule",
    "IfNotRule",
    "CustomRule",
    "ValidatorRule",
    # Validators and providers
    "Validator",
    "ValidatorProvider",
    "ValidatorRegistry",
    "ValidationController",
    # Builders
    "TargetListBuilder",
    "ValidatorBuilder",
    "GroupTargetBuilder",
    "TargetBuilder",
    "RuleBuilder",
    "object_target",
    "member_target",
    "any_of_target",
    "each_of_target",
    "path_accessor",
    # Configuration
    "ValidationSettings",
    "ValidatorFactory",
    "ConfiguredValidator",
    "validator_factory",
    "from_yaml",
    "register_all",
]
