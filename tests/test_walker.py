"""Tests for the structural walker.

Tests cover traversal by shape:
- Nested records (errors under the inner field names)
- Sequences and mappings (every element visited, sorted keys)
- Optional and Any declarations
- Unsupported values and non-string mapping keys
- Cycles and the nesting depth limit
- Invalid (unconsumed) validators
"""

from dataclasses import dataclass
from typing import Any, Optional

import pytest

from fieldrules.config import ValidatorConfig
from fieldrules.errors import RecursionLimitError, UnsupportedTypeError
from fieldrules.records import valid_field
from fieldrules.registry import RuleRegistry
from fieldrules.report import ErrorReport
from fieldrules.types import Shape
from fieldrules.validators import register_all_rules
from fieldrules.walker import StructuralWalker, classify


@pytest.fixture(autouse=True)
def setup_registry():
    """Register built-in rules before each test."""
    RuleRegistry.clear()
    register_all_rules()
    yield
    RuleRegistry.clear()
    register_all_rules()


@pytest.fixture
def report():
    return ErrorReport()


@pytest.fixture
def walker(report):
    return StructuralWalker(report, ValidatorConfig())


@dataclass
class Address:
    street: str = valid_field("required", json="street", default="")
    zip: str = valid_field("numeric", json="zip", default="")


@dataclass
class Person:
    name: str = valid_field("required", json="name", default="")
    address: Address | None = valid_field("required", json="address", default=None)


@dataclass
class Mailing:
    emails: list[str] = valid_field("email", json="emails", default_factory=list)
    labels: dict[str, str] = valid_field("alpha", json="labels", default_factory=dict)
    people: list[Person] = valid_field("optional", default_factory=list)


@dataclass
class Wrapped:
    nickname: Optional[str] = valid_field("alpha", default=None)
    extra: Any = valid_field("alpha", default=None)
    untyped: object = valid_field("alpha", default=None)


@dataclass
class Node:
    label: str = valid_field("optional,alpha", default="")
    next: "Node | None" = None


@dataclass
class Private:
    visible: str = valid_field("alpha", default="ok")
    _secret: str = valid_field("email", default="not-an-email")


class TestClassify:
    def test_none_is_indirection(self):
        assert classify(None) is Shape.INDIRECTION

    def test_scalar(self):
        assert classify("x") is Shape.SCALAR
        assert classify(3) is Shape.SCALAR

    def test_record(self):
        assert classify(Address()) is Shape.RECORD

    def test_containers(self):
        assert classify([1]) is Shape.SEQUENCE
        assert classify((1,)) is Shape.SEQUENCE
        assert classify({"a": 1}) is Shape.MAPPING

    def test_declared_wrappers(self):
        assert classify("x", Optional[str]) is Shape.INDIRECTION
        assert classify("x", str | None) is Shape.INDIRECTION
        assert classify("x", Any) is Shape.DYNAMIC
        assert classify("x", object) is Shape.DYNAMIC

    def test_unsupported(self):
        assert classify({1, 2}) is Shape.UNSUPPORTED
        assert classify(1j) is Shape.UNSUPPORTED


class TestRecords:
    def test_valid_record(self, walker, report):
        assert walker.walk_record(Person(name="Ann", address=Address("Main St", "12345")))
        assert not report

    def test_nested_errors_use_inner_names(self, walker, report):
        person = Person(name="Ann", address=Address(street="", zip="12a"))
        assert not walker.walk_record(person)
        assert report.messages == {
            "street": ["non zero value required"],
            "zip": ["12a does not validate as numeric"],
        }

    def test_missing_nested_record(self, walker, report):
        assert not walker.walk_record(Person(name="Ann"))
        assert report.messages == {"address": ["non zero value required"]}

    def test_private_fields_are_skipped(self, walker, report):
        assert walker.walk_record(Private())
        assert not report

    def test_nested_record_walked_once(self, walker, report):
        shared = Address(street="", zip="1")
        mailing = Mailing(people=[Person("A", shared), Person("B", shared)])
        assert not walker.walk_record(mailing)
        assert report.messages == {"street": ["non zero value required"]}


class TestContainers:
    def test_every_sequence_element_is_visited(self, walker, report):
        mailing = Mailing(emails=["a@example.com", "bad", "worse"])
        assert not walker.walk_record(mailing)
        assert report.for_field("emails") == [
            "bad does not validate as email",
            "worse does not validate as email",
        ]

    def test_empty_elements_are_skipped(self, walker, report):
        assert walker.walk_record(Mailing(emails=["", "a@example.com"]))
        assert not report

    def test_mapping_values_in_sorted_key_order(self, walker, report):
        mailing = Mailing(labels={"b": "x1", "a": "y2", "c": "ok"})
        assert not walker.walk_record(mailing)
        assert report.for_field("labels") == [
            "y2 does not validate as alpha",
            "x1 does not validate as alpha",
        ]

    def test_non_string_keys_are_unsupported(self, walker):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            walker.walk_record(Mailing(labels={1: "a"}))
        assert str(exc_info.value) == "validator: unsupported type: dict[int, ...]"
        assert exc_info.value.field == "labels"

    def test_records_in_sequence_are_walked_as_records(self, walker, report):
        mailing = Mailing(
            people=[Person("Ann", Address("Main", "1")), Person("", Address("Main", "x"))]
        )
        assert not walker.walk_record(mailing)
        assert report.messages == {
            "name": ["non zero value required"],
            "zip": ["x does not validate as numeric"],
        }


class TestWrappers:
    def test_optional_none_is_valid(self, walker, report):
        assert walker.walk_record(Wrapped())
        assert not report

    def test_optional_value_is_validated(self, walker, report):
        assert not walker.walk_record(Wrapped(nickname="abc1"))
        assert report.for_field("nickname") == ["abc1 does not validate as alpha"]

    def test_any_unwraps_to_runtime_shape(self, walker, report):
        assert not walker.walk_record(Wrapped(extra=["ok", "no1"], untyped="x2"))
        assert report.messages == {
            "extra": ["no1 does not validate as alpha"],
            "untyped": ["x2 does not validate as alpha"],
        }

    def test_unsupported_value(self, walker):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            walker.walk_record(Wrapped(extra={"a", "b"}))
        assert str(exc_info.value) == "validator: unsupported type: set"


class TestCycles:
    def test_self_reference_terminates(self, walker, report):
        node = Node(label="a")
        node.next = node
        assert walker.walk_record(node)
        assert not report

    def test_cycle_still_reports_errors(self, walker, report):
        first = Node(label="a1")
        second = Node(label="b", next=first)
        first.next = second
        assert not walker.walk_record(first)
        assert report.for_field("label") == ["a1 does not validate as alpha"]

    def test_self_containing_list_terminates(self, walker, report):
        items: list = ["ok"]
        items.append(items)
        assert walker.walk_record(Wrapped(extra=items))
        assert not report

    def test_depth_limit(self, report):
        walker = StructuralWalker(report, ValidatorConfig(max_depth=3))
        head = Node(label="a")
        tail = head
        for _ in range(5):
            tail.next = Node(label="a")
            tail = tail.next
        with pytest.raises(RecursionLimitError) as exc_info:
            walker.walk_record(head)
        assert exc_info.value.max_depth == 3


class TestAnnotationPolicy:
    def test_unknown_rule_is_reported(self, walker, report):
        @dataclass
        class Bogus:
            code: str = valid_field("bogus", default="x")

        assert not walker.walk_record(Bogus())
        assert report.for_field("code") == [
            'The following validator is invalid or can\'t be applied to the field: "bogus"'
        ]

    def test_unknown_rule_on_empty_value_is_not_reported(self, walker, report):
        @dataclass
        class Bogus:
            code: str = valid_field("bogus", default="")

        assert walker.walk_record(Bogus())
        assert not report

    def test_unknown_rule_not_reported_after_other_error(self, walker, report):
        @dataclass
        class Bogus:
            code: str = valid_field("bogus,numeric", default="x")

        assert not walker.walk_record(Bogus())
        assert report.for_field("code") == ["x does not validate as numeric"]

    def test_unannotated_field_with_required_by_default(self, report):
        @dataclass
        class Loose:
            anything: str = "value"
            skipped: str = valid_field("-", default="")

        walker = StructuralWalker(report, ValidatorConfig(required_by_default=True))
        assert not walker.walk_record(Loose())
        assert report.messages == {
            "anything": ["All fields are required to at least have one validation defined"]
        }

    def test_custom_rule_short_circuits_field(self, walker, report):
        RuleRegistry.register_custom("never", lambda value, owner: False)

        @dataclass
        class Custom:
            code: str = valid_field("never,numeric", default="x")

        assert not walker.walk_record(Custom())
        assert report.for_field("code") == ["x does not validate as never"]

    def test_custom_rule_sees_owner(self, walker, report):
        RuleRegistry.register_custom(
            "matchesPassword", lambda value, owner: value == owner.password
        )

        @dataclass
        class Signup:
            password: str = valid_field("required", default="")
            confirm: str = valid_field("matchesPassword~passwords differ", default="")

        matching = Signup(password="s3cret", confirm="s3cret")
        differing = Signup(password="s3cret", confirm="other")
        assert walker.walk_record(matching)
        assert not walker.walk_record(differing)
        assert report.for_field("confirm") == ["passwords differ"]
