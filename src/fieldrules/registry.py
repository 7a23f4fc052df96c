"""Rule registry for fieldrules.

Provides registration and lookup for the three predicate shapes a rule
name can resolve to:
- Zero-parameter rules: fn(text) -> bool, e.g. "email"
- Parameterized rules: fn(text, *params) -> bool, e.g. "length(2|20)"
- Custom rules: fn(value, owner) -> bool, receiving the raw value and the
  record that owns the field
"""

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

StringPredicate = Callable[[str], bool]
ParamPredicate = Callable[..., bool]
CustomPredicate = Callable[[Any, Any], bool]


class RuleRegistry:
    """Process-wide registry of rule predicates.

    Registration replaces any existing entry with the same name. The
    registry is read by every validation call and is not synchronized:
    register rules at startup, before validation runs concurrently.

    Example:
        RuleRegistry.register("even", lambda text: int(text) % 2 == 0)
        RuleRegistry.register_param("prefix", lambda text, p: text.startswith(p))
        RuleRegistry.register_custom("matchesPassword",
                                     lambda value, owner: value == owner.password)
    """

    _rules: dict[str, StringPredicate] = {}
    _param_rules: dict[str, ParamPredicate] = {}
    _custom_rules: dict[str, CustomPredicate] = {}

    @classmethod
    def register(cls, name: str, predicate: StringPredicate) -> None:
        """Register a zero-parameter rule over the rendered value.

        Args:
            name: Rule name as written in annotations
            predicate: Function returning True when the value is valid
        """
        cls._check_name(name)
        if name in cls._rules:
            logger.debug("Replacing rule %r", name)
        cls._rules[name] = predicate

    @classmethod
    def register_param(cls, name: str, predicate: ParamPredicate) -> None:
        """Register a parameterized rule.

        The predicate receives the rendered value followed by the
        parameters from the annotation, e.g. length(2|20) calls
        predicate(text, "2", "20").
        """
        cls._check_name(name)
        if name in cls._param_rules:
            logger.debug("Replacing parameterized rule %r", name)
        cls._param_rules[name] = predicate

    @classmethod
    def register_custom(cls, name: str, predicate: CustomPredicate) -> None:
        """Register a custom rule with access to the owning record.

        Custom rules run on the raw field value, before any built-in rule,
        and are matched against the rule token exactly as written.
        """
        cls._check_name(name)
        if name in cls._custom_rules:
            logger.debug("Replacing custom rule %r", name)
        cls._custom_rules[name] = predicate

    @classmethod
    def unregister(cls, name: str) -> None:
        """Remove a rule name from every predicate table."""
        cls._rules.pop(name, None)
        cls._param_rules.pop(name, None)
        cls._custom_rules.pop(name, None)

    @classmethod
    def get(cls, name: str) -> StringPredicate | None:
        return cls._rules.get(name)

    @classmethod
    def get_param(cls, name: str) -> ParamPredicate | None:
        return cls._param_rules.get(name)

    @classmethod
    def get_custom(cls, name: str) -> CustomPredicate | None:
        return cls._custom_rules.get(name)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a rule name resolves to any predicate."""
        return (
            name in cls._rules
            or name in cls._param_rules
            or name in cls._custom_rules
        )

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered rule names."""
        return sorted(
            set(cls._rules) | set(cls._param_rules) | set(cls._custom_rules)
        )

    @classmethod
    def describe(cls) -> dict[str, list[str]]:
        """Registered names grouped by predicate shape."""
        return {
            "rules": sorted(cls._rules),
            "param_rules": sorted(cls._param_rules),
            "custom_rules": sorted(cls._custom_rules),
        }

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._rules.clear()
        cls._param_rules.clear()
        cls._custom_rules.clear()

    @staticmethod
    def _check_name(name: str) -> None:
        if not name or not isinstance(name, str):
            raise ValueError(f"Rule name must be a non-empty string, got {name!r}")


def rule(name: str) -> Callable[[StringPredicate], StringPredicate]:
    """Decorator to register a zero-parameter rule.

    Usage:
        @rule("even")
        def is_even(text: str) -> bool:
            ...
    """

    def decorator(fn: StringPredicate) -> StringPredicate:
        RuleRegistry.register(name, fn)
        return fn

    return decorator


def param_rule(name: str) -> Callable[[ParamPredicate], ParamPredicate]:
    """Decorator to register a parameterized rule."""

    def decorator(fn: ParamPredicate) -> ParamPredicate:
        RuleRegistry.register_param(name, fn)
        return fn

    return decorator


def custom_rule(name: str) -> Callable[[CustomPredicate], CustomPredicate]:
    """Decorator to register a custom rule with access to the owning record."""

    def decorator(fn: CustomPredicate) -> CustomPredicate:
        RuleRegistry.register_custom(name, fn)
        return fn

    return decorator
