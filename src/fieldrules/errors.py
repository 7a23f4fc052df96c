"""Error types for fieldrules.

FieldError is the immutable record of one failed rule. Exceptions are only
raised for fatal conditions (unsupported value shapes, runaway recursion)
and by validate_struct(), which wraps every collected FieldError in a
ValidationErrors exception.
"""

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure.

    Attributes:
        name: Field name (or alias) the error is reported under
        message: Human-readable message
        custom_message: True when the message came from a "~" annotation
        validator: Name of the rule that failed, parameters stripped
    """

    name: str
    message: str
    custom_message: bool = False
    validator: str = ""

    def __str__(self) -> str:
        return self.message.strip(" ")

    def renamed(self, name: str) -> "FieldError":
        return FieldError(
            name=name,
            message=self.message,
            custom_message=self.custom_message,
            validator=self.validator,
        )


class ValidationErrors(Exception):
    """One or more field errors collected from a validation call."""

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        super().__init__(str(self))

    def __str__(self) -> str:
        return ";".join(str(e) for e in self.errors)

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)


class UnsupportedTypeError(TypeError):
    """A value has a shape the walker cannot validate."""

    def __init__(self, type_name: str, field: str = ""):
        self.type_name = type_name
        self.field = field
        super().__init__(f"validator: unsupported type: {type_name}")


class RecursionLimitError(RecursionError):
    """The walk descended deeper than the configured maximum depth."""

    def __init__(self, max_depth: int, field: str = ""):
        self.max_depth = max_depth
        self.field = field
        super().__init__(f"validator: maximum nesting depth {max_depth} exceeded")


def errors_by_field(exc: BaseException | None) -> dict[str, str]:
    """Map field name -> message for the errors carried by an exception.

    When a field has several errors the last one wins. Returns an empty
    dict for None or for exceptions that carry no field errors.
    """
    result: dict[str, str] = {}
    if exc is None:
        return result
    if isinstance(exc, ValidationErrors):
        for error in exc.errors:
            result[error.name] = str(error)
    return result


def error_by_field(exc: BaseException | None, field: str) -> str:
    """Return the message recorded for one field, or "" if there is none."""
    return errors_by_field(exc).get(field, "")
