import pytest
from tweak_core.rewriter.value_formatter import ValueFormatter


class TestSplitNumericSuffix:
    def test_plain_integer_has_no_suffix(self):
        assert ValueFormatter.split_numeric_suffix("300") == ("300", "")

    def test_rem_suffix(self):
        assert ValueFormatter.split_numeric_suffix("2.5rem") == ("2.5", "rem")

    def test_negative_with_em_suffix(self):
        assert ValueFormatter.split_numeric_suffix("-0.03em") == ("-0.03", "em")

    def test_percent_suffix(self):
        assert ValueFormatter.split_numeric_suffix("50%") == ("50", "%")

    def test_suffix_is_preserved_byte_for_byte(self):
        assert ValueFormatter.split_numeric_suffix("12px ") == ("12", "px ")

    def test_text_without_digits_is_kept_whole(self):
        assert ValueFormatter.split_numeric_suffix("auto") == ("auto", "")


class TestFormatValueRoundTrip:
    @pytest.mark.parametrize("text, value", [
        ("300", 300),
        ("2.50rem", 2.5),
        (".5", 0.5),
        ("-0.03em", -0.03),
        ("0.125", 0.125),
        ("16px", 16),
        ("+3", 3),
        ("-.25", -0.25),
    ])
    def test_own_value_reproduces_text(self, text, value):
        assert ValueFormatter.format_value(value, text) == text

    @pytest.mark.parametrize("text, value, expected", [
        ("5.", 5, "5"),
        ("007", 7, "7"),
        ("1.0e3", 1000, "1000.000"),
    ])
    def test_non_canonical_text_is_normalised(self, text, value, expected):
        assert ValueFormatter.format_value(value, text) == expected

    def test_normalised_text_is_stable_afterwards(self):
        first = ValueFormatter.format_value(5, "5.")
        assert ValueFormatter.format_value(5, first) == first


class TestFormatValueStyle:
    def test_integer_template_rounds_to_integer(self):
        assert ValueFormatter.format_value(12.6, "10") == "13"

    def test_integer_rounds_half_away_from_zero(self):
        assert ValueFormatter.format_value(2.5, "1") == "3"
        assert ValueFormatter.format_value(-2.5, "1") == "-3"

    def test_integer_template_keeps_unit(self):
        assert ValueFormatter.format_value(24, "16px") == "24px"

    def test_decimal_template_keeps_precision(self):
        assert ValueFormatter.format_value(1.5, "2.50rem") == "1.50rem"

    def test_step_precision_wins_when_finer(self):
        assert ValueFormatter.format_value(0.25, "0.5", step=0.05) == "0.25"

    def test_template_precision_wins_when_finer(self):
        assert ValueFormatter.format_value(0.125, "0.500", step=0.1) == "0.125"

    def test_step_does_not_make_integer_decimal(self):
        assert ValueFormatter.format_value(7.0, "5", step=0.5) == "7"

    def test_leading_zero_is_stripped_for_dot_style(self):
        assert ValueFormatter.format_value(0.75, ".5") == ".8"

    def test_leading_zero_kept_when_value_above_one(self):
        assert ValueFormatter.format_value(1.5, ".5") == "1.5"

    def test_negative_dot_style(self):
        assert ValueFormatter.format_value(-0.5, "-.25") == "-.50"

    def test_plus_sign_dropped_for_negative_value(self):
        assert ValueFormatter.format_value(-2, "+3") == "-2"

    def test_formatting_is_idempotent(self):
        once = ValueFormatter.format_value(1.2345, "0.00em")
        assert ValueFormatter.format_value(1.2345, once) == once


class TestDecimalPlaces:
    def test_integral_step(self):
        assert ValueFormatter.decimal_places(1.0) == 0

    def test_fractional_step(self):
        assert ValueFormatter.decimal_places(0.25) == 2

    def test_scientific_notation_step(self):
        assert ValueFormatter.decimal_places(1e-05) == 5

    def test_large_step(self):
        assert ValueFormatter.decimal_places(10) == 0


class TestParseValue:
    def test_parses_unit_suffixed_text(self):
        assert ValueFormatter.parse_value("2.50rem") == 2.5

    def test_parses_leading_dot(self):
        assert ValueFormatter.parse_value(".5") == 0.5

    def test_unparsable_returns_none(self):
        assert ValueFormatter.parse_value("auto") is None

    def test_infinity_is_not_a_value(self):
        assert ValueFormatter.parse_value("inf") is None
