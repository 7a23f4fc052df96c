"""Content-rule evaluation for a single field.

The walker resolves presence first; only non-empty values reach this
module. Rules are evaluated in declared order:

1. Custom rules (value + owning record). Any failure is reported and
   stops evaluation of the field's remaining rules.
2. Parameterized rules, on the rendered value of strings and numbers.
3. Zero-parameter rules, on the rendered value of any scalar.

Rules that resolve to nothing are ignored while evaluating; once the
walker has finished a field, the ones that were never applied are
reported as invalid validators.

A custom message (`~msg`) always wins, negated rules included: `!alpha~no letters`
reports "no letters", not the "<value> does validate as alpha" default.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fieldrules.errors import FieldError
from fieldrules.registry import RuleRegistry
from fieldrules.rendering import PARAM_KINDS, is_scalar, kind_name, render_value
from fieldrules.report import ErrorReport
from fieldrules.tags import strip_params
from fieldrules.types import ParsedTag, RuleInvocation

INVALID_VALIDATOR_MESSAGE = (
    'The following validator is invalid or can\'t be applied to the field: "{rule}"'
)


@dataclass
class RuleState:
    """Call-scoped rule bookkeeping for one field.

    Attributes:
        tag: Parsed annotation of the field
        name: Name errors are reported under (alias or field name)
        consumed: Rule tokens that resolved to a predicate somewhere
        root_empty: The field's own value was empty, so no rule ran
    """

    tag: ParsedTag
    name: str
    consumed: set[str] = field(default_factory=set)
    root_empty: bool = False

    def consume(self, rule: RuleInvocation) -> None:
        self.consumed.add(rule.spec)

    @property
    def rules(self) -> list[RuleInvocation]:
        return self.tag.content_rules


def rule_body(rule: RuleInvocation) -> str:
    """The rule token without its negation mark: "!in(a|b)" -> "in(a|b)"."""
    return rule.spec[1:] if rule.negated else rule.spec


def is_resolvable(rule: RuleInvocation) -> bool:
    """True when the rule token maps to a registered predicate."""
    if RuleRegistry.get_custom(rule.spec) is not None:
        return True
    if rule.params:
        return RuleRegistry.get_param(rule.name) is not None
    return RuleRegistry.get(rule.name) is not None


class FieldValidator:
    """Applies a field's content rules and records failures in the report."""

    def __init__(self, report: ErrorReport):
        self.report = report

    def run_custom(self, value: Any, owner: Any, state: RuleState) -> list[FieldError]:
        """Run every custom rule of the field against the raw value.

        Returns:
            The custom-rule failures (already added to the report). A
            non-empty result means no other rule may run for the field.
        """
        errors: list[FieldError] = []
        for rule in state.rules:
            predicate = RuleRegistry.get_custom(rule.spec)
            if predicate is None:
                continue
            state.consume(rule)
            if predicate(value, owner):
                continue
            if rule.has_custom_message:
                message = rule.message
            else:
                message = f"{_display(value)} does not validate as {rule.spec}"
            errors.append(
                FieldError(
                    name=state.name,
                    message=message,
                    custom_message=rule.has_custom_message,
                    validator=strip_params(rule.spec),
                )
            )
        self.report.extend(errors)
        return errors

    def validate_scalar(self, value: Any, state: RuleState) -> FieldError | None:
        """Run the built-in rules against a scalar value.

        Every failure is added to the report; the first one is returned.
        """
        first: FieldError | None = None
        for rule in state.rules:
            if RuleRegistry.get_custom(rule.spec) is not None:
                continue
            error = self._apply(rule, value, state)
            if error is None:
                continue
            self.report.add(error)
            if first is None:
                first = error
        return first

    def consume_resolvable(self, state: RuleState) -> None:
        """Mark every rule that resolves to a predicate as consumed.

        Used when an empty value makes the rules inapplicable rather than
        unknown.
        """
        for rule in state.rules:
            if is_resolvable(rule):
                state.consume(rule)

    def unconsumed_errors(self, state: RuleState) -> list[FieldError]:
        """Errors for the rules that never resolved to a predicate."""
        errors: list[FieldError] = []
        seen: set[str] = set()
        for rule in state.rules:
            if rule.spec in state.consumed or rule.spec in seen:
                continue
            seen.add(rule.spec)
            errors.append(
                FieldError(
                    name=state.name,
                    message=INVALID_VALIDATOR_MESSAGE.format(rule=rule.spec),
                    custom_message=False,
                    validator=strip_params(rule_body(rule)),
                )
            )
        return errors

    def _apply(self, rule: RuleInvocation, value: Any, state: RuleState) -> FieldError | None:
        body = rule_body(rule)

        if rule.params:
            predicate = RuleRegistry.get_param(rule.name)
            if predicate is None:
                return None
            state.consume(rule)
            native = value.value if isinstance(value, Enum) else value
            if isinstance(native, bool) or not isinstance(native, PARAM_KINDS):
                return FieldError(
                    name=state.name,
                    message=f"Validator {body} doesn't support kind {kind_name(value)}",
                    custom_message=False,
                    validator=strip_params(body),
                )
            text = render_value(value)
            passed = bool(predicate(text, *rule.params))
        else:
            predicate = RuleRegistry.get(rule.name)
            if predicate is None:
                return None
            state.consume(rule)
            text = render_value(value)
            passed = bool(predicate(text))

        # A negated rule fails exactly when the predicate holds.
        if passed != rule.negated:
            return None

        if rule.has_custom_message:
            message = rule.message
        elif rule.negated:
            message = f"{text} does validate as {body}"
        else:
            message = f"{text} does not validate as {body}"

        return FieldError(
            name=state.name,
            message=message,
            custom_message=rule.has_custom_message,
            validator=strip_params(body),
        )


def _display(value: Any) -> str:
    if is_scalar(value):
        return render_value(value)
    return str(value)
