"""Result tree produced by a validation run.

The result tree mirrors the shape of whatever was evaluated: a
:class:`ValidatorResult` holds one :class:`TargetResult` per visited target,
each target result holds one :class:`RuleResult` per visited rule, and rule
results carry the :class:`ValueResult` declarations selected for their
computed value.

Emptiness is structural. A node is empty when it has nothing non-empty below
it; this predicate drives the ``ignore_empty_results`` filter applied while
the tree is built, and :meth:`Result.prune_empty` applies the same filter
after the fact.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


class Result(ABC):
    """Base class for every node of the result tree."""

    @abstractmethod
    def is_empty(self) -> bool:
        """Check whether this node carries no information."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Convert the node to a dictionary representation."""

    def prune_empty(self) -> Result:
        """Remove structurally empty children recursively, in place.

        Returns:
            Self, for chaining
        """
        return self


def _prune(children: list[Any]) -> None:
    children[:] = [child for child in children if not child.prune_empty().is_empty()]


@dataclass
class ValueResult(Result):
    """Declared outcome for a specific rule value.

    A value result is a static declaration attached to a rule: when the rule
    computes a value equal to ``match_value``, this same instance is added to
    the rule result. The resource name and key identify the message to render;
    rendering is left to the host application.
    """

    match_value: Any = None
    resource_name: str | None = None
    resource_key: str | None = None

    def is_empty(self) -> bool:
        return not self.resource_name and not self.resource_key

    def to_dict(self) -> dict[str, Any]:
        return {
            "match_value": self.match_value,
            "resource_name": self.resource_name,
            "resource_key": self.resource_key,
        }


@dataclass
class RuleResult(Result):
    """Outcome of one rule: its computed value and selected value results."""

    name: str = ""
    value: Any = None
    value_results: list[ValueResult] = field(default_factory=list)

    def is_empty(self) -> bool:
        return len(self.value_results) == 0

    def to_dict(self) -> dict[str, Any]:
        data = {
            "name": self.name,
            "value": self.value,
            "value_results": [vr.to_dict() for vr in self.value_results],
        }
        data.update(self._payload())
        return data

    def _payload(self) -> dict[str, Any]:
        """Rule-specific parameters exposed for message formatting."""
        return {}


@dataclass
class LengthRuleResult(RuleResult):
    """Length rule outcome with the configured bounds."""

    min: int | None = None
    max: int | None = None

    def _payload(self) -> dict[str, Any]:
        return {"min": self.min, "max": self.max}


@dataclass
class RangeRuleResult(RuleResult):
    """Range rule outcome with the configured bounds."""

    min: Any = None
    max: Any = None

    def _payload(self) -> dict[str, Any]:
        return {"min": self.min, "max": self.max}


@dataclass
class RegexRuleResult(RuleResult):
    """Regex rule outcome with the pattern and flags used."""

    pattern: str | None = None
    flags: int = 0

    def _payload(self) -> dict[str, Any]:
        return {"pattern": self.pattern, "flags": int(self.flags)}


@dataclass
class UriRuleResult(RuleResult):
    """URI rule outcome with the accepted kind and schemes."""

    kind: Any = None
    schemes: list[str] = field(default_factory=list)

    def _payload(self) -> dict[str, Any]:
        kind = getattr(self.kind, "value", self.kind)
        return {"kind": kind, "schemes": list(self.schemes)}


@dataclass
class ComparisonRuleResult(RuleResult):
    """Comparison rule outcome with the other operand."""

    other_value: Any = None

    def _payload(self) -> dict[str, Any]:
        return {"other_value": self.other_value}


@dataclass
class CustomRuleResult(RuleResult):
    """Result type for custom rules, with free-form data for messages."""

    data: dict[str, Any] = field(default_factory=dict)

    def _payload(self) -> dict[str, Any]:
        return {"data": dict(self.data)}


@dataclass
class GroupRuleResult(RuleResult):
    """Outcome of a rule group: the results of its member rules."""

    rule_results: list[RuleResult] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(not result.is_empty() for result in self.rule_results)

    def prune_empty(self) -> GroupRuleResult:
        _prune(self.rule_results)
        return self

    def _payload(self) -> dict[str, Any]:
        return {"rule_results": [result.to_dict() for result in self.rule_results]}


@dataclass
class ValidatorRuleResult(RuleResult):
    """Outcome of validator delegation: the nested validator result, if any.

    ``validator_result`` is None when the extracted value was None or when no
    validator is registered for its type.
    """

    validator_result: ValidatorResult | None = None

    def is_empty(self) -> bool:
        return self.validator_result is None or self.validator_result.is_empty()

    def prune_empty(self) -> ValidatorRuleResult:
        if self.validator_result is not None:
            self.validator_result.prune_empty()
        return self

    def _payload(self) -> dict[str, Any]:
        nested = self.validator_result.to_dict() if self.validator_result is not None else None
        return {"validator_result": nested}


@dataclass
class TargetResult(Result):
    """Outcome of one target: the extracted value and its rule results."""

    name: str = ""
    value: Any = None
    rule_results: list[RuleResult] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(not result.is_empty() for result in self.rule_results)

    def prune_empty(self) -> TargetResult:
        _prune(self.rule_results)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "rule_results": [result.to_dict() for result in self.rule_results],
        }


@dataclass
class GroupTargetResult(TargetResult):
    """Outcome of a target group: one result per member target."""

    target_results: list[TargetResult] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(not result.is_empty() for result in self.target_results)

    def prune_empty(self) -> GroupTargetResult:
        _prune(self.target_results)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "target_results": [result.to_dict() for result in self.target_results],
        }


@dataclass
class ItemTargetResult(TargetResult):
    """Outcome of an item target: one result per collection element."""

    item_results: list[TargetResult] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(not result.is_empty() for result in self.item_results)

    def prune_empty(self) -> ItemTargetResult:
        _prune(self.item_results)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "item_results": [result.to_dict() for result in self.item_results],
        }


@dataclass
class ValidatorResult(Result):
    """Root of a result tree: one result per visited target."""

    target_results: list[TargetResult] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(not result.is_empty() for result in self.target_results)

    def prune_empty(self) -> ValidatorResult:
        _prune(self.target_results)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {"target_results": [result.to_dict() for result in self.target_results]}

    def iter_value_results(self) -> Iterator[tuple[tuple[str, ...], ValueResult]]:
        """Iterate over every selected value result in the tree.

        Yields:
            ``(path, value_result)`` pairs, where ``path`` holds the names of
            the targets and rules leading to the value result. Nested
            validator results extend the path of the delegating rule.

        Example:
            ```python
            for path, outcome in result.iter_value_results():
                print(".".join(path), outcome.resource_key)
            # Password.Length Password.MinLength
            ```
        """
        for target_result in self.target_results:
            yield from _iter_target(target_result, ())


def _iter_target(result: TargetResult, path: tuple[str, ...]) -> Iterator[tuple[tuple[str, ...], ValueResult]]:
    path = path + (result.name,)
    if isinstance(result, GroupTargetResult):
        children: list[TargetResult] = result.target_results
    elif isinstance(result, ItemTargetResult):
        children = result.item_results
    else:
        children = []
    for child in children:
        yield from _iter_target(child, path)
    for rule_result in result.rule_results:
        yield from _iter_rule(rule_result, path)


def _iter_rule(result: RuleResult, path: tuple[str, ...]) -> Iterator[tuple[tuple[str, ...], ValueResult]]:
    path = path + (result.name,)
    for value_result in result.value_results:
        yield path, value_result
    if isinstance(result, GroupRuleResult):
        for child in result.rule_results:
            yield from _iter_rule(child, path)
    elif isinstance(result, ValidatorRuleResult) and result.validator_result is not None:
        for target_result in result.validator_result.target_results:
            yield from _iter_target(target_result, path)


__all__ = [
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
]
