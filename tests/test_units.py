"""Unit tests for amount parsing, grouping keys, and amount formatting."""

import pytest
from meal_prep.units import (
    FALLBACK_AMOUNT,
    Parsed,
    Unparseable,
    amount_value,
    format_amount,
    normalize_name,
    normalize_unit,
    parse_amount,
)


class TestParseAmount:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (2, 2.0),
            (1.5, 1.5),
            ("250", 250.0),
            (" 0.5 ", 0.5),
            (".75", 0.75),
            ("1/2", 0.5),
            ("1 1/2", 1.5),
            ("½", 0.5),
            ("1½", 1.5),
            ("100g", 100.0),
            ("1e3", 1000.0),
            ("2.5E-1", 0.25),
            ("3eggs", 3.0),
            (0, 0.0),
            ("0", 0.0),
        ],
    )
    def test_parses(self, raw, expected):
        result = parse_amount(raw)
        assert isinstance(result, Parsed)
        assert result.value == pytest.approx(expected)

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            None,
            "a pinch",
            "to taste",
            "-3",
            -3,
            float("nan"),
            float("inf"),
            True,
            "1/0",
            "1e400",
        ],
    )
    def test_unparseable(self, raw):
        assert isinstance(parse_amount(raw), Unparseable)

    def test_unparseable_keeps_raw_value(self):
        assert parse_amount("to taste").raw == "to taste"

    def test_amount_value_treats_unparseable_as_zero(self):
        assert amount_value(parse_amount("some")) == 0.0
        assert amount_value(parse_amount("3")) == 3.0


class TestNormalizeKeys:
    def test_name_trimmed_and_case_folded(self):
        assert normalize_name("  Almond Milk ") == "almond milk"
        assert normalize_name("ALMOND   milk") == "almond milk"

    def test_empty_name(self):
        assert normalize_name("") == ""
        assert normalize_name(None) == ""

    def test_unit_trimmed_and_case_folded(self):
        assert normalize_unit(" ML ") == "ml"
        assert normalize_unit(None) == ""

    def test_no_unit_conversion_or_aliasing(self):
        assert normalize_unit("g") != normalize_unit("kg")
        assert normalize_unit("g") != normalize_unit("grams")


class TestFormatAmount:
    def test_whole_numbers(self):
        assert format_amount(250.0) == "250"
        assert format_amount(550) == "550"

    def test_decimals(self):
        assert format_amount(2.5) == "2.5"
        assert format_amount(0.1 + 0.2) == "0.3"
        assert format_amount(1 / 3) == "0.33"

    def test_zero_falls_back(self):
        assert format_amount(0) == FALLBACK_AMOUNT
        assert FALLBACK_AMOUNT

    def test_positive_total_rounding_to_zero_falls_back(self):
        assert format_amount(0.001) == FALLBACK_AMOUNT
        assert format_amount(0.004) == FALLBACK_AMOUNT
