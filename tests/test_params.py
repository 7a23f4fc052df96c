"""Tests for the built-in parameterized rules."""

import pytest

from fieldrules.validators.params import (
    PARAM_RULES,
    byte_length,
    in_range,
    is_hash,
    is_in,
    matches,
    max_string_length,
    min_string_length,
    string_length,
)


class TestLength:
    @pytest.mark.parametrize(
        "text,low,high,expected",
        [
            ("ab", "2", "20", True),
            ("M", "2", "20", False),
            ("x" * 21, "2", "20", False),
            ("ßü", "2", "2", True),
            ("", "0", "0", True),
        ],
    )
    def test_string_length(self, text, low, high, expected):
        assert string_length(text, low, high) is expected

    def test_bad_params_never_validate(self):
        assert not string_length("abc", "1")
        assert not string_length("abc", "a", "5")
        assert not string_length("abc", "1", "2", "3")

    def test_aliases(self):
        assert PARAM_RULES["runelength"] is string_length
        assert PARAM_RULES["stringlength"] is string_length

    def test_byte_length_counts_utf8(self):
        assert byte_length("ab", "2", "2")
        assert not byte_length("ßü", "2", "2")
        assert byte_length("ßü", "4", "4")

    def test_min_and_max(self):
        assert min_string_length("abc", "3")
        assert not min_string_length("ab", "3")
        assert max_string_length("abc", "3")
        assert not max_string_length("abcd", "3")
        assert not min_string_length("abc")
        assert not max_string_length("abc", "x")


class TestRange:
    @pytest.mark.parametrize(
        "text,expected",
        [("10", True), ("15.5", True), ("20", True), ("9.99", False), ("21", False), ("abc", False)],
    )
    def test_in_range(self, text, expected):
        assert in_range(text, "10", "20") is expected

    def test_bounds_in_either_order(self):
        assert in_range("15", "20", "10")

    def test_wrong_param_count(self):
        assert not in_range("15", "10")


class TestIn:
    def test_membership(self):
        assert is_in("Mick", "Mick", "Michael")
        assert not is_in("M", "Mick", "Michael")

    def test_no_params(self):
        assert not is_in("x")


class TestMatches:
    def test_search(self):
        assert matches("abc123", "[0-9]+")
        assert not matches("abc", "^[0-9]+$")

    def test_alternation_is_rejoined(self):
        assert matches("dog", "^(cat", "dog)$")
        assert not matches("cow", "^(cat", "dog)$")

    def test_invalid_pattern(self):
        assert not matches("abc", "(")

    def test_no_params(self):
        assert not matches("abc")


class TestHash:
    def test_known_algorithms(self):
        assert is_hash("d41d8cd98f00b204e9800998ecf8427e", "md5")
        assert is_hash("da39a3ee5e6b4b0d3255bfef95601890afd80709", "SHA1")
        assert is_hash("0" * 64, "sha256")

    def test_wrong_length(self):
        assert not is_hash("d41d8cd98f00b204e9800998ecf8427", "md5")

    def test_unknown_algorithm(self):
        assert not is_hash("abcd", "whirlpool")
