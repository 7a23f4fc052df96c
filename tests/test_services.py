"""Tests for the validation entry points.

Covers end-to-end behavior of validate() / validate_struct():
- Reports keyed by alias, all errors collected
- Default-required policy
- Idempotence, deduplication and the negation law
- Fatal structural errors
- Call isolation under concurrent use
"""

import dataclasses
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import pytest

from fieldrules import (
    RuleRegistry,
    UnsupportedTypeError,
    ValidationErrors,
    ValidationService,
    ValidatorConfig,
    error_by_field,
    errors_by_field,
    register_all_rules,
    reset_config,
    set_fields_required_by_default,
    valid_field,
    validate,
    validate_struct,
)


@pytest.fixture(autouse=True)
def setup_registry():
    """Register built-in rules and restore the default config for each test."""
    RuleRegistry.clear()
    register_all_rules()
    reset_config()
    yield
    RuleRegistry.clear()
    register_all_rules()
    reset_config()


@dataclass
class User:
    name: str = valid_field("optional,length(2|20),in(Mick|Michael)", json="name", default="")
    email: str = valid_field("email", json="email", default="")
    age: int = valid_field("-", default=0)


@dataclass
class Server:
    port: str = valid_field("port", default="")
    addr: str = valid_field("optional,dialstring", default="")


@dataclass
class Account:
    owner: User | None = valid_field("required", json="owner", default=None)
    label: str = valid_field("alpha", json="-", default="")


@dataclass
class Loose:
    nickname: str = "anything"
    ignored: str = valid_field("-", default="")


@dataclass
class Dynamic:
    payload: Any = valid_field("alpha", default=None)


class TestValidate:
    def test_reports_every_error_under_alias(self):
        result = validate(User(name="M", email="mic", age=29))
        assert result.valid is False
        assert result.errors == {
            "name": [
                "M does not validate as length(2|20)",
                "M does not validate as in(Mick|Michael)",
            ],
            "email": ["mic does not validate as email"],
        }
        assert result.error is None

    def test_valid_record(self):
        result = validate(User(name="Michael", email="a@b.com"))
        assert result.valid is True
        assert result.errors == {}

    def test_optional_empty_value_skips_rules(self):
        result = validate(User(name="", email="a@b.com"))
        assert result.valid is True

    def test_nested_error_under_inner_name(self):
        result = validate(Account(owner=User(name="Michael", email="nope")))
        assert result.valid is False
        assert result.errors == {"email": ["nope does not validate as email"]}

    def test_dash_alias_falls_back_to_field_name(self):
        result = validate(Account(owner=User(name="Mick", email="a@b.com"), label="a1"))
        assert result.errors == {"label": ["a1 does not validate as alpha"]}

    def test_none_is_valid(self):
        result = validate(None)
        assert result.valid is True
        assert result.errors == {}

    def test_non_record_raises(self):
        with pytest.raises(TypeError, match="dataclasses or pydantic models"):
            validate({"name": "M"})

    def test_validate_struct_non_record_raises(self):
        with pytest.raises(TypeError, match="dataclasses or pydantic models"):
            validate_struct(["M"])

    def test_non_ascii_digits_are_reported_not_raised(self):
        result = validate(Server(port="\u00b2", addr="example.com:\u00b2"))
        assert result.valid is False
        assert result.errors == {
            "port": ["\u00b2 does not validate as port"],
            "addr": ["example.com:\u00b2 does not validate as dialstring"],
        }

    def test_input_is_not_mutated(self):
        user = User(name="M", email="mic", age=29)
        before = dataclasses.asdict(user)
        validate(user)
        assert dataclasses.asdict(user) == before

    def test_to_dict(self):
        result = validate(User(name="Mick", email="mic"))
        assert result.to_dict() == {
            "valid": False,
            "errors": {"email": ["mic does not validate as email"]},
        }


class TestProperties:
    def test_idempotent(self):
        user = User(name="M", email="mic", age=29)
        assert validate(user) == validate(user)

    def test_duplicate_messages_are_dropped(self):
        @dataclass
        class Code:
            code: str = valid_field("numeric~bad code,hexadecimal~bad code", default="zz")

        result = validate(Code())
        assert result.errors == {"code": ["bad code"]}

    def test_duplicate_element_messages_are_dropped(self):
        @dataclass
        class Batch:
            emails: list[str] = valid_field("email", default_factory=list)

        result = validate(Batch(emails=["bad", "bad", "worse"]))
        assert result.errors == {
            "emails": ["bad does not validate as email", "worse does not validate as email"]
        }

    @pytest.mark.parametrize("rule", ["alpha", "numeric", "length(1|3)", "in(a|b)", "email"])
    @pytest.mark.parametrize("value", ["a", "abcd", "12", "x@example.com"])
    def test_negation_law(self, rule, value):
        plain = dataclasses.make_dataclass(
            "Plain", [("v", str, valid_field(rule, default=value))]
        )
        negated = dataclasses.make_dataclass(
            "Negated", [("v", str, valid_field("!" + rule, default=value))]
        )
        assert validate(plain()).valid != validate(negated()).valid

    def test_unannotated_fields_valid_by_default(self):
        assert validate(Loose()).valid


class TestRequiredByDefault:
    def test_unannotated_field_is_reported(self):
        set_fields_required_by_default(True)
        result = validate(Loose())
        assert result.errors == {
            "nickname": ["All fields are required to at least have one validation defined"]
        }

    def test_empty_annotated_field_is_missing(self):
        set_fields_required_by_default(True)
        result = validate(User(name="", email="", age=0))
        assert result.errors == {"email": ["Missing required field"]}

    def test_service_config_overrides_process_config(self):
        service = ValidationService(ValidatorConfig(required_by_default=True))
        assert not service.validate(Loose()).valid
        assert validate(Loose()).valid


class TestFatalErrors:
    def test_unsupported_value_in_result(self):
        result = validate(Dynamic(payload={"a", "b"}))
        assert result.valid is False
        assert isinstance(result.error, UnsupportedTypeError)
        assert result.errors == {"payload": ["validator: unsupported type: set"]}
        assert result.to_dict()["fatal"] == "validator: unsupported type: set"

    def test_validate_struct_raises_fatal(self):
        with pytest.raises(UnsupportedTypeError):
            validate_struct(Dynamic(payload={"a"}))


class TestValidateStruct:
    def test_valid(self):
        assert validate_struct(User(name="Mick", email="a@b.com")) is True

    def test_raises_with_every_error(self):
        with pytest.raises(ValidationErrors) as exc_info:
            validate_struct(User(name="M", email="mic", age=29))
        exc = exc_info.value
        assert len(exc) == 3
        assert str(exc) == (
            "M does not validate as length(2|20);"
            "M does not validate as in(Mick|Michael);"
            "mic does not validate as email"
        )
        assert errors_by_field(exc) == {
            "name": "M does not validate as in(Mick|Michael)",
            "email": "mic does not validate as email",
        }
        assert error_by_field(exc, "email") == "mic does not validate as email"
        assert error_by_field(exc, "age") == ""


class TestIsolation:
    def test_concurrent_calls_do_not_share_errors(self):
        bad = [User(name="M", email=f"bad{i}") for i in range(20)]
        good = [User(name="Mick", email=f"u{i}@example.com") for i in range(20)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            bad_results = list(pool.map(validate, bad))
            good_results = list(pool.map(validate, good))

        assert all(r.valid for r in good_results)
        for i, result in enumerate(bad_results):
            assert result.errors["email"] == [f"bad{i} does not validate as email"]
