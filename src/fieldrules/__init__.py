"""fieldrules: annotation-driven validation for records.

Rules are attached to dataclass or pydantic fields as a small annotation
language and evaluated recursively through nested records, sequences,
mappings and optional values. Every violation is collected into a
field-keyed report instead of stopping at the first one.

Usage:
    from dataclasses import dataclass
    from fieldrules import valid_field, validate

    @dataclass
    class User:
        name: str = valid_field("optional,length(2|20),in(Mick|Michael)", json="name")
        email: str = valid_field("email", json="email")
        age: int = valid_field("-")

    result = validate(User(name="M", email="mic", age=29))
    result.valid   # False
    result.errors  # {"name": [...], "email": ["mic does not validate as email"]}

The built-in rules are registered on import; add your own with
RuleRegistry.register / register_param / register_custom at startup.
"""

from fieldrules.config import (
    ValidatorConfig,
    fields_required_by_default,
    get_config,
    reset_config,
    set_config,
    set_fields_required_by_default,
)
from fieldrules.errors import (
    FieldError,
    RecursionLimitError,
    UnsupportedTypeError,
    ValidationErrors,
    error_by_field,
    errors_by_field,
)
from fieldrules.records import is_record, valid_field
from fieldrules.registry import (
    RuleRegistry,
    custom_rule,
    param_rule,
    rule,
)
from fieldrules.report import ErrorReport
from fieldrules.services import ValidationService, validate, validate_struct
from fieldrules.tags import parse_tag
from fieldrules.types import (
    ParsedTag,
    Presence,
    RuleInvocation,
    Shape,
    ValidationResult,
)
from fieldrules.validators import register_all_rules

register_all_rules()

__all__ = [
    # Types
    "ParsedTag",
    "Presence",
    "RuleInvocation",
    "Shape",
    "ValidationResult",
    # Errors
    "FieldError",
    "RecursionLimitError",
    "UnsupportedTypeError",
    "ValidationErrors",
    "error_by_field",
    "errors_by_field",
    # Configuration
    "ValidatorConfig",
    "fields_required_by_default",
    "get_config",
    "reset_config",
    "set_config",
    "set_fields_required_by_default",
    # Registry
    "RuleRegistry",
    "custom_rule",
    "param_rule",
    "rule",
    "register_all_rules",
    # Validation
    "ErrorReport",
    "ValidationService",
    "is_record",
    "parse_tag",
    "valid_field",
    "validate",
    "validate_struct",
]
