"""Tests for error types and field lookup helpers."""

from fieldrules.errors import (
    FieldError,
    RecursionLimitError,
    UnsupportedTypeError,
    ValidationErrors,
    error_by_field,
    errors_by_field,
)


class TestFieldError:
    def test_str_strips_spaces(self):
        assert str(FieldError("name", "  padded message ")) == "padded message"

    def test_renamed_keeps_details(self):
        error = FieldError("Name", "bad", custom_message=True, validator="alpha")
        renamed = error.renamed("name")
        assert renamed == FieldError("name", "bad", True, "alpha")


class TestValidationErrors:
    def test_joins_messages(self):
        exc = ValidationErrors([FieldError("a", "first"), FieldError("b", "second")])
        assert str(exc) == "first;second"

    def test_iterable_with_length(self):
        errors = [FieldError("a", "first"), FieldError("b", "second")]
        exc = ValidationErrors(errors)
        assert list(exc) == errors
        assert len(exc) == 2
        assert exc.errors == errors

    def test_empty(self):
        assert str(ValidationErrors([])) == ""


class TestStructuralErrors:
    def test_unsupported_type(self):
        exc = UnsupportedTypeError("set", field="tags")
        assert isinstance(exc, TypeError)
        assert str(exc) == "validator: unsupported type: set"
        assert exc.field == "tags"

    def test_recursion_limit(self):
        exc = RecursionLimitError(8, field="Node")
        assert isinstance(exc, RecursionError)
        assert exc.max_depth == 8
        assert "8" in str(exc)


class TestErrorsByField:
    def test_last_message_wins(self):
        exc = ValidationErrors(
            [
                FieldError("name", "first"),
                FieldError("email", "bad email"),
                FieldError("name", "second"),
            ]
        )
        assert errors_by_field(exc) == {"name": "second", "email": "bad email"}

    def test_none_and_other_exceptions(self):
        assert errors_by_field(None) == {}
        assert errors_by_field(ValueError("x")) == {}

    def test_error_by_field(self):
        exc = ValidationErrors([FieldError("email", "bad email")])
        assert error_by_field(exc, "email") == "bad email"
        assert error_by_field(exc, "name") == ""
        assert error_by_field(None, "email") == ""
