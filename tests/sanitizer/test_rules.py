"""Tests for paramsan.sanitizer.rules module."""

from datetime import date, datetime, time

import pytest

from paramsan.sanitizer import BUILTIN_RULES, RuleError, SchemaModel


def make_rule(name, value, **schema):
    return BUILTIN_RULES[name](value, name, SchemaModel(**schema))


class TestNumericRules:
    """Test numeric bounds and multipleOf."""

    def test_bounds(self):
        assert make_rule("minimum", 0)(0, "x", {}) == 0
        assert make_rule("maximum", 10)(10, "x", {}) == 10
        with pytest.raises(RuleError, match="Value must be >= 0"):
            make_rule("minimum", 0)(-1, "x", {})
        with pytest.raises(RuleError, match="Value must be <= 10"):
            make_rule("maximum", 10)(11, "x", {})
        with pytest.raises(RuleError):
            make_rule("exclusiveMinimum", 0)(0, "x", {})
        with pytest.raises(RuleError):
            make_rule("exclusiveMaximum", 10)(10, "x", {})

    def test_bounds_ignore_non_numbers(self):
        """Numeric bounds do not apply to strings or booleans."""
        assert make_rule("minimum", 5)("abc", "x", {}) == "abc"
        assert make_rule("maximum", 0)(True, "x", {}) is True

    def test_multiple_of(self):
        rule = make_rule("multipleOf", 0.5)
        assert rule(1.5, "x", {}) == 1.5
        with pytest.raises(RuleError, match="multiple of 0.5"):
            rule(0.3, "x", {})
        assert make_rule("multipleOf", 0.1)(0.3, "x", {}) == 0.3
        with pytest.raises(RuleError):
            make_rule("multipleOf", 2)(3, "x", {})

    def test_multiple_of_requires_positive_divisor(self):
        with pytest.raises(ValueError):
            make_rule("multipleOf", 0)


class TestLengthRules:
    """Test string and array length rules."""

    def test_string_length(self):
        assert make_rule("minLength", 2)("ab", "x", {}) == "ab"
        with pytest.raises(RuleError, match="at least 2 characters"):
            make_rule("minLength", 2)("a", "x", {})
        with pytest.raises(RuleError, match="at most 3 characters"):
            make_rule("maxLength", 3)("abcd", "x", {})
        # Length bounds do not apply to arrays
        assert make_rule("maxLength", 1)([1, 2], "x", {}) == [1, 2]

    def test_array_items(self):
        assert make_rule("minItems", 1)([1], "x", {}) == [1]
        with pytest.raises(RuleError):
            make_rule("minItems", 2)([1], "x", {})
        with pytest.raises(RuleError):
            make_rule("maxItems", 1)([1, 2], "x", {})
        with pytest.raises(RuleError, match="unique"):
            make_rule("uniqueItems", True)([1, 1], "x", {})
        assert make_rule("uniqueItems", False)([1, 1], "x", {}) == [1, 1]


class TestPatternAndEnum:
    """Test pattern and enum rules."""

    def test_pattern(self):
        rule = make_rule("pattern", "^user_[0-9]+$")
        assert rule("user_12", "x", {}) == "user_12"
        with pytest.raises(RuleError):
            rule("admin", "x", {})

    def test_pattern_is_unanchored(self):
        assert make_rule("pattern", "[0-9]")("abc1", "x", {}) == "abc1"

    def test_invalid_pattern_fails_at_compile_time(self):
        with pytest.raises(ValueError, match="Invalid 'pattern'"):
            make_rule("pattern", "([a-z")

    def test_enum(self):
        rule = make_rule("enum", ["red", "green"])
        assert rule("red", "x", {}) == "red"
        with pytest.raises(RuleError, match="one of"):
            rule("blue", "x", {})


class TestFormatRule:
    """Test the format rule."""

    def test_string_formats(self):
        assert make_rule("format", "email")("test@example.com", "x", {}) == "test@example.com"
        assert make_rule("format", "uri")("https://example.com", "x", {}) == "https://example.com"
        assert make_rule("format", "duration")("P1DT2H", "x", {}) == "P1DT2H"
        for kind, bad in [("email", "not-an-email"), ("uri", "not-a-uri"), ("duration", "1 day")]:
            with pytest.raises(RuleError, match=f"Invalid {kind} format"):
                make_rule("format", kind)(bad, "x", {})

    def test_date_formats_convert(self):
        assert make_rule("format", "date")("2023-01-01", "x", {}) == date(2023, 1, 1)
        assert make_rule("format", "time")("12:00:00", "x", {}) == time(12, 0, 0)
        assert isinstance(make_rule("format", "date-time")("2023-01-01T12:00:00Z", "x", {}), datetime)
        assert isinstance(make_rule("format", "timestamp")("1672531199", "x", {}), datetime)
        with pytest.raises(RuleError):
            make_rule("format", "date")("01/01/2023", "x", {})

    def test_integer_format_ranges(self):
        assert make_rule("format", "int8")(127, "x", {}) == 127
        with pytest.raises(RuleError):
            make_rule("format", "int8")(128, "x", {})
        with pytest.raises(RuleError):
            make_rule("format", "int32")(2**31, "x", {})

    def test_unknown_format_passes_through(self):
        assert make_rule("format", "rfc3339")("whatever", "x", {}) == "whatever"
        value = datetime(2020, 1, 1)
        assert make_rule("format", "date-time")(value, "x", {}) is value
