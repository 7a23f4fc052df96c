"""Presence resolution: emptiness and the required/optional/forbidden policy.

Presence is decided before any content rule runs. An empty value never
reaches content rules: it either fails a presence check or passes
unconditionally.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from fieldrules.errors import FieldError
from fieldrules.records import is_record, iter_fields
from fieldrules.types import ParsedTag, Presence

REQUIRED_MESSAGE = "non zero value required"
MISSING_MESSAGE = "Missing required field"
FORBIDDEN_MESSAGE = "Illegal attribute"
UNANNOTATED_MESSAGE = "All fields are required to at least have one validation defined"


@dataclass(frozen=True)
class PresenceOutcome:
    """Result of the presence check for one value.

    Attributes:
        error: The presence failure, if any
        skip_content: True when content rules must not run
    """

    error: FieldError | None = None
    skip_content: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def is_empty(value: Any, _seen: set[int] | None = None) -> bool:
    """Check whether a value counts as empty for presence purposes.

    None, zero-length strings and collections, False and numeric zero are
    empty. A record is empty when all of its public fields are empty.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float, Decimal, complex)):
        return value == 0
    if isinstance(value, (str, bytes, bytearray, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    if is_record(value):
        seen = _seen if _seen is not None else set()
        if id(value) in seen:
            return True
        seen.add(id(value))
        return all(
            is_empty(spec.value, seen)
            for spec in iter_fields(value)
            if not spec.is_private
        )
    return False


def resolve_presence(tag: ParsedTag) -> Presence:
    """Pick the single presence directive for a field.

    Precedence when several are declared: required, then forbidden,
    then optional.
    """
    if tag.has(Presence.REQUIRED.value):
        return Presence.REQUIRED
    if tag.has(Presence.FORBIDDEN.value):
        return Presence.FORBIDDEN
    if tag.has(Presence.OPTIONAL.value):
        return Presence.OPTIONAL
    return Presence.NONE


def check_presence(
    value: Any,
    field_name: str,
    tag: ParsedTag,
    required_by_default: bool,
) -> PresenceOutcome:
    """Apply the presence policy to a value.

    Args:
        value: The field (or element) value
        field_name: Name errors are reported under
        tag: Parsed annotation of the field
        required_by_default: Process-wide default presence policy

    Returns:
        PresenceOutcome; content rules run only when skip_content is False
    """
    presence = resolve_presence(tag)

    if is_empty(value):
        if presence is Presence.REQUIRED:
            return PresenceOutcome(
                error=_presence_error(field_name, tag, "required", REQUIRED_MESSAGE),
                skip_content=True,
            )
        if required_by_default and presence is not Presence.OPTIONAL:
            return PresenceOutcome(
                error=FieldError(field_name, MISSING_MESSAGE, False, "required"),
                skip_content=True,
            )
        return PresenceOutcome(skip_content=True)

    if presence is Presence.FORBIDDEN:
        return PresenceOutcome(
            error=_presence_error(field_name, tag, "forbidden", FORBIDDEN_MESSAGE),
            skip_content=True,
        )
    return PresenceOutcome()


def unannotated_error(field_name: str) -> FieldError:
    """Error for a field with no annotation while fields are required by default."""
    return FieldError(field_name, UNANNOTATED_MESSAGE, False, "required")


def _presence_error(field_name: str, tag: ParsedTag, rule: str, default: str) -> FieldError:
    custom = tag.message_for(rule)
    if custom:
        return FieldError(field_name, custom, True, rule)
    return FieldError(field_name, default, False, rule)
