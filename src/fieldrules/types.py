"""Core types for the fieldrules validation engine.

This module defines the foundational types shared by every stage of a
validation call:
- Tag parsing: RuleInvocation, ParsedTag
- Presence: Presence
- Traversal: Shape, FieldSpec
- Results: ValidationResult
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Shape(Enum):
    """Structural category of a value, used by the walker for dispatch.

    SCALAR: str, numbers, bool and other values rendered to a string
    RECORD: dataclass instance or pydantic model
    INDIRECTION: None, or a value held by an Optional[...] declaration
    SEQUENCE: list or tuple
    MAPPING: dict-like collection with string keys
    DYNAMIC: value of a field declared as Any/object
    UNSUPPORTED: anything else (fatal to the call)
    """

    SCALAR = "scalar"
    RECORD = "record"
    INDIRECTION = "indirection"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    DYNAMIC = "dynamic"
    UNSUPPORTED = "unsupported"


class Presence(Enum):
    """The presence directive active for one field."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"
    NONE = "none"


PRESENCE_RULES = frozenset(
    {Presence.REQUIRED.value, Presence.OPTIONAL.value, Presence.FORBIDDEN.value}
)


@dataclass(frozen=True)
class RuleInvocation:
    """One rule parsed out of an annotation.

    Attributes:
        spec: The raw rule token as written, e.g. "!in(a|b)"
        name: Rule name with negation and parameters stripped, e.g. "in"
        params: Parameters from the trailing "(...)" group, split on "|"
        negated: True when the token starts with "!"
        message: Custom failure message (text after "~"), or ""
    """

    spec: str
    name: str
    params: tuple[str, ...] = ()
    negated: bool = False
    message: str = ""

    @property
    def has_custom_message(self) -> bool:
        return bool(self.message)

    @property
    def is_presence(self) -> bool:
        return self.spec in PRESENCE_RULES


@dataclass
class ParsedTag:
    """Result of parsing one field annotation.

    Attributes:
        raw: The annotation as found on the field
        rules: Rule invocations in declared order (one per occurrence)
        messages: Rule token -> custom message, last occurrence wins
        skip: True for the "-" sentinel (no validation at all)
    """

    raw: str
    rules: list[RuleInvocation] = field(default_factory=list)
    messages: dict[str, str] = field(default_factory=dict)
    skip: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.skip and not self.rules

    def has(self, spec: str) -> bool:
        return spec in self.messages

    def message_for(self, spec: str) -> str:
        return self.messages.get(spec, "")

    @property
    def content_rules(self) -> list[RuleInvocation]:
        """Rules other than the presence directives, in declared order."""
        return [r for r in self.rules if not r.is_presence]


@dataclass(frozen=True)
class FieldSpec:
    """A record field as seen by the walker.

    Attributes:
        name: Attribute name on the record
        value: Current value
        annotation: Declared type (Any when unknown)
        tag: Raw rule annotation ("" when absent)
        alias: External name used in reports, or None
    """

    name: str
    value: Any
    annotation: Any
    tag: str = ""
    alias: str | None = None

    @property
    def is_private(self) -> bool:
        return self.name.startswith("_")

    @property
    def report_name(self) -> str:
        return self.alias or self.name


@dataclass
class ValidationResult:
    """Result of validating a record.

    Attributes:
        valid: True when no field produced an error
        errors: Field name (or alias) -> deduplicated messages
        error: Fatal structural error that aborted part of the walk, if any
    """

    valid: bool
    errors: dict[str, list[str]] = field(default_factory=dict)
    error: Exception | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "valid": self.valid,
            "errors": {name: list(messages) for name, messages in self.errors.items()},
        }
        if self.error is not None:
            result["fatal"] = str(self.error)
        return result
