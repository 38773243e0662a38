"""Tests for paramsan.sanitizer.coercers module."""

from datetime import date, datetime, timezone

import numpy as np
import pytest

from paramsan.sanitizer import BUILTIN_TYPES, CoercionError
from paramsan.sanitizer.coercers import (
    schema_type_name,
    to_array,
    to_boolean,
    to_date,
    to_integer,
    to_number,
    to_object,
    to_string,
)


class TestToString:
    """Test string coercion."""

    def test_scalars(self):
        assert to_string("test") == "test"
        assert to_string(123) == "123"
        assert to_string(1.5) == "1.5"
        assert to_string(True) == "true"
        assert to_string(False) == "false"

    def test_sequences_join(self):
        """Repeated query parameters collapse to one string."""
        assert to_string(["test"]) == "test"
        assert to_string(["a", 1, True]) == "a,1,true"


class TestToNumber:
    """Test number coercion."""

    def test_numeric_strings(self):
        assert to_number("123") == 123
        assert isinstance(to_number("123"), int)
        assert to_number("123.5") == 123.5
        assert to_number(" 7 ") == 7
        assert to_number(["42"]) == 42

    def test_numbers_unchanged(self):
        assert to_number(123) == 123
        assert to_number(0.25) == 0.25
        assert to_number(np.int64(3)) == 3
        assert to_number(np.float64(2.5)) == 2.5

    def test_long_decimal_string(self):
        value = "5" * 49 + "." + "5" * 49
        assert to_number(value) == float(value)

    def test_failures(self):
        for bad in ["abc", "", "1_000", float("inf"), "Infinity", "nan", True, None, {"a": 1}]:
            with pytest.raises(CoercionError):
                to_number(bad)


class TestToInteger:
    """Test integer coercion."""

    def test_integral_values(self):
        assert to_integer("123") == 123
        assert to_integer(123) == 123
        assert to_integer(123.0) == 123
        assert to_integer("10.0") == 10
        assert to_integer(["123"]) == 123

    def test_large_integral_string_keeps_precision(self):
        value = "5" * 49
        assert to_integer(value) == int(value)

    def test_failures(self):
        for bad in [123.5, "123.5", "abc", float("inf"), "", False, ["1", "2"]]:
            with pytest.raises(CoercionError):
                to_integer(bad)


class TestToBoolean:
    """Test boolean coercion."""

    def test_false_values(self):
        for value in [0, False, "", "0", "false", ["0"]]:
            assert to_boolean(value) is False

    def test_true_values(self):
        for value in [1, True, "1", "2", "a", "true", "False", "no", ["a"], {"x": 1}]:
            assert to_boolean(value) is True


class TestToDate:
    """Test date coercion."""

    def test_iso_dates(self):
        assert to_date("2015-05-23") == datetime(2015, 5, 23)
        assert to_date("2015-07-04T21:00:00") == datetime(2015, 7, 4, 21, 0, 0)
        assert to_date("2016-02-28T16:41:41.090Z") == datetime(
            2016, 2, 28, 16, 41, 41, 90000, tzinfo=timezone.utc
        )

    def test_http_dates(self):
        expected = datetime(2016, 2, 28, 16, 41, 41, tzinfo=timezone.utc)
        assert to_date("Sun, 28 Feb 2016 16:41:41 GMT") == expected
        assert to_date(["Sun, 28 Feb 2016 16:41:41 GMT"]) == expected

    def test_date_values_unchanged(self):
        today = date(2020, 1, 1)
        now = datetime(2020, 1, 1, 12, 30)
        assert to_date(today) is today
        assert to_date(now) is now

    def test_failures(self):
        for bad in ["abc", "", 12345, {"a": 1}]:
            with pytest.raises(CoercionError):
                to_date(bad)


class TestToArray:
    """Test array coercion."""

    def test_json_strings(self):
        assert to_array("[]") == []
        assert to_array('["a"]') == ["a"]
        assert to_array('["a", 1, true]') == ["a", 1, True]

    def test_sequences_unchanged(self):
        value = [123, 456]
        assert to_array(value) is value
        assert to_array(np.array([1, 2])) == [1, 2]

    def test_failures(self):
        for bad in ["[a]", '["a", 1, tru]', "5", '{"a": 1}', 5, {"a": 1}]:
            with pytest.raises(CoercionError):
                to_array(bad)

    def test_deeply_nested_json(self):
        with pytest.raises(CoercionError):
            to_array("[" * 100000)

    def test_undecodable_bytes(self):
        with pytest.raises(CoercionError):
            to_array(b"\xff")


class TestToObject:
    """Test object coercion."""

    def test_json_strings(self):
        assert to_object("{}") == {}
        assert to_object('{ "foo" :"bar"}') == {"foo": "bar"}
        assert to_object('{"foo": true }') == {"foo": True}

    def test_dicts_unchanged(self):
        value = {"foo": 1}
        assert to_object(value) is value

    def test_failures(self):
        for bad in ['{"foo"}', '{"foo" : 1, }', "[1]", 5, ["a"]]:
            with pytest.raises(CoercionError):
                to_object(bad)

    def test_deeply_nested_json(self):
        with pytest.raises(CoercionError):
            to_object('{"a": ' * 100000)

    def test_undecodable_bytes(self):
        with pytest.raises(CoercionError):
            to_object(b"\xff{}")


def test_builtin_type_registry():
    """Test that every built-in name maps to a coercer and date aliases share one."""
    for name in ["string", "number", "integer", "boolean", "array", "object", "date"]:
        assert callable(BUILTIN_TYPES[name])
    assert BUILTIN_TYPES["dateTime"] is BUILTIN_TYPES["date"]
    assert BUILTIN_TYPES["dateTimeOnly"] is BUILTIN_TYPES["date"]


def test_schema_type_name():
    assert schema_type_name("x") == "string"
    assert schema_type_name([1]) == "array"
    assert schema_type_name(None) == "null"
