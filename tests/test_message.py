"""
Tests — Message Formatting
--------------------------
Covers: the positional → printf → unchanged fallback chain, positional
        (`{0}`) rendering rules, and printf (`%s`) rendering and rejection.
Run with: pytest tests/ -v
"""

import pytest

from logstash_formatter.services.message import format_message, has_positional_marker
from logstash_formatter.services.positional import format_number, format_positional
from logstash_formatter.services.printf import format_printf, hash_code


# ── Fallback Chain Tests ──────────────────────────────────────────────────────

class TestFormatMessage:
    def test_positional_format(self):
        assert format_message("{0} %s", ["hi"]) == "hi %s"

    @pytest.mark.parametrize("parameters", [None, []])
    def test_positional_format_without_parameters(self, parameters):
        assert format_message("{0}", parameters) == "{0}"

    def test_bogus_positional_falls_back_to_printf_on_original(self):
        # the quoted brace never closes the argument, so positional fails
        assert format_message("{0'}' %s", ["hi"]) == "{0'}' hi"

    def test_percent_format(self):
        assert format_message("%s", ["hi"]) == "hi"

    @pytest.mark.parametrize("parameters", [None, []])
    def test_percent_format_without_parameters(self, parameters):
        assert format_message("%s", parameters) == "%s"

    def test_bogus_percent_format_left_unchanged(self):
        assert format_message("%0.5s", ["hi"]) == "%0.5s"

    def test_stray_percent_left_unchanged(self):
        assert format_message("100% done", ["x"]) == "100% done"

    def test_unsupported_positional_type_falls_back(self):
        assert format_message("{0,date} %s", ["x"]) == "{0,date} x"

    def test_high_index_only_goes_through_printf(self):
        assert format_message("{4} %s", ["x"]) == "{4} x"

    def test_index_past_int_range_falls_back_to_printf(self):
        assert format_message("{19999999999} %s", ["x"]) == "{19999999999} x"

    def test_plain_text_unchanged(self):
        assert format_message("plain text", ["x"]) == "plain text"

    def test_markers(self):
        assert has_positional_marker("a {0}")
        assert has_positional_marker("{3,number}")
        assert not has_positional_marker("{4}")
        assert not has_positional_marker("%s")


# ── Positional Tests ──────────────────────────────────────────────────────────

class TestPositional:
    @pytest.mark.parametrize("pattern, args, expected", [
        ("{1} {0}", ["a", "b"], "b a"),
        ("{0} and {5}", ["a"], "a and {5}"),
        ("it''s {0}", ["x"], "it's x"),
        ("'{0}' {0}", ["x"], "{0} x"),
        ("{0}", [None], "null"),
        ("{0}", [True], "true"),
        ("{0}", [1234567], "1,234,567"),
        ("{0}", [3.14159], "3.142"),
        ("{0}", [2.0], "2"),
        ("{0,number,percent}", [0.25], "25%"),
        ("{0,number,integer}", [2.5], "2"),
        ("{0,number,integer}", [3.5], "4"),
        ("{0, number}", [1000], "1,000"),
        ("{2147483647}", ["a"], "{2147483647}"),
    ])
    def test_renders(self, pattern, args, expected):
        result = format_positional(pattern, args)
        assert result.ok
        assert result.text == expected

    @pytest.mark.parametrize("pattern, args", [
        ("{0'}' %s", ["hi"]),
        ("{0", ["a"]),
        ("{-1}", ["a"]),
        ("{x}", ["a"]),
        ("{ 0}", ["a"]),
        ("{0,date}", ["a"]),
        ("{0,foo}", ["a"]),
        ("{0,number,#.##}", [1.5]),
        ("{0,number}", ["abc"]),
        ("{2147483648}", ["a"]),
    ])
    def test_failures(self, pattern, args):
        result = format_positional(pattern, args)
        assert not result.ok
        assert result.error

    def test_number_format(self):
        assert format_number(-1234.5678) == "-1,234.568"
        assert format_number(float("nan")) == "NaN"


# ── Printf Tests ──────────────────────────────────────────────────────────────

class TestPrintf:
    @pytest.mark.parametrize("pattern, args, expected", [
        ("%s", ["a", "b"], "a"),
        ("%d items", [3], "3 items"),
        ("%5s|%-5s|", ["a", "b"], "    a|b    |"),
        ("%.2s", ["abc"], "ab"),
        ("%S", [None], "NULL"),
        ("%s", [False], "false"),
        ("%b %b %b", [None, "x", False], "false true false"),
        ("%c%c", ["A", 66], "AB"),
        ("%2$s %1$s", ["a", "b"], "b a"),
        ("%s %<s", ["a"], "a a"),
        ("100%%", ["x"], "100%"),
        ("%s%n", ["a"], "a\n"),
        ("%+d|% d|%(d", [5, 5, -5], "+5| 5|(5)"),
        ("%010d", [-42], "-000000042"),
        ("%,d", [1234567], "1,234,567"),
        ("%x", [255], "ff"),
        ("%X", [-1], "FFFFFFFF"),
        ("%#o", [8], "010"),
        ("%#x", [255], "0xff"),
        ("%.2f", [3.14159], "3.14"),
        ("%.1f", [0.25], "0.3"),
        ("%.2f", [1], "1.00"),
        ("%08.3f", [-3.5], "-003.500"),
        ("%,.2f", [1234567.891], "1,234,567.89"),
        ("%e", [12345.678], "1.234568e+04"),
        ("%.2e", [0.0], "0.00e+00"),
        ("%g", [0.0001234], "0.000123400"),
        ("%g", [123456789.0], "1.23457e+08"),
        ("%g", [100000.0], "100000"),
        ("%f", [float("inf")], "Infinity"),
        ("%s", [None], "null"),
        ("%d", [None], "null"),
        ("%h", ["abc"], "17862"),
        ("%H", ["hello"], "5E918D2"),
        ("%h", [""], "0"),
        ("%h", ["\U0001F600"], "1b0d63"),
        ("%h", [42], "2a"),
        ("%h", [-1], "ffffffff"),
        ("%h", [2**32], "1"),
        ("%h", [True], "4cf"),
        ("%h", [1.5], "3ff80000"),
        ("%h", [None], "null"),
    ])
    def test_renders(self, pattern, args, expected):
        result = format_printf(pattern, args)
        assert result.ok, result.error
        assert result.text == expected

    @pytest.mark.parametrize("pattern, args", [
        ("%0.5s", ["hi"]),
        ("%d", ["x"]),
        ("%d", [True]),
        ("%f", ["x"]),
        ("%c", ["ab"]),
        ("%s %s", ["a"]),
        ("%q", ["a"]),
        ("%-s", ["a"]),
        ("%.2d", [1]),
        ("%#s", ["a"]),
        ("%+s", ["a"]),
        ("abc %", ["a"]),
        ("%tY", ["a"]),
        ("%0$s", ["a"]),
        ("%3$s", ["a"]),
        ("%<s", ["a"]),
        ("%--5s", ["a"]),
        ("%+ d", [1]),
        ("%-05d", [1]),
        ("%,x", [1]),
        ("%.1%", ["a"]),
    ])
    def test_failures(self, pattern, args):
        result = format_printf(pattern, args)
        assert not result.ok
        assert result.error

    def test_hash_code_is_stable(self):
        assert hash_code("abc") == 96354
        assert hash_code(False) == 1237
        assert hash_code(float("nan")) == hash_code(float("-nan"))
