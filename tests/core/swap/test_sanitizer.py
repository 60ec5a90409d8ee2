"""
Tests for the sell amount sanitizer
"""

import pytest

from swapdesk.core.swap import is_valid_amount, sanitize


class TestSanitize:
    """Tests for sanitize()."""

    @pytest.mark.parametrize("raw", ["1.2.3", "..", "1..", ".5.", "0.1.2.3", "1,2.3.4"])
    def test_multiple_decimal_points_keep_previous(self, raw):
        """Two or more decimal points reject the edit."""
        assert sanitize(raw, "1.2") == "1.2"

    @pytest.mark.parametrize(
        "value",
        ["", "0", "7", "12", "0.5", "3000", "1.", ".25", "123456.123456", "0.000001"],
    )
    def test_valid_amounts_pass_unchanged(self, value):
        """Valid decimal strings come back unchanged and sanitize is idempotent."""
        assert sanitize(value, "9") == value
        assert sanitize(sanitize(value, "9"), "9") == sanitize(value, "9")

    def test_strips_non_numeric_characters(self):
        assert sanitize("1,000", "") == "1000"
        assert sanitize("$ 12.5 USD", "") == "12.5"
        assert sanitize("abc", "4") == ""

    def test_minus_sign_is_stripped(self):
        """The '-' never survives stripping, so negatives cannot get through."""
        assert sanitize("-5", "1") == "5"

    def test_too_many_fraction_digits_keep_previous(self):
        assert sanitize("0.1234567", "0.123456") == "0.123456"

    def test_custom_max_decimals(self):
        assert sanitize("1.234", "1.23", max_decimals=2) == "1.23"
        assert sanitize("1.23", "1.2", max_decimals=2) == "1.23"

    def test_non_ascii_digits_are_stripped(self):
        assert sanitize("١٢3", "") == "3"


class TestIsValidAmount:
    """Tests for is_valid_amount()."""

    def test_valid(self):
        assert is_valid_amount("42.5") is True
        assert is_valid_amount("") is True

    def test_invalid(self):
        assert is_valid_amount("1.2.3") is False
        assert is_valid_amount("-1") is False
        assert is_valid_amount("1e5") is False
        assert is_valid_amount("0.1234567") is False
