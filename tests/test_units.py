"""Tests for unit conversion helpers."""

from decimal import Decimal

import pytest

from tokenledger.core.exceptions import ValidationError
from tokenledger.core.types import MAX_UINT256
from tokenledger.core.units import format_ether, format_units, parse_ether, parse_units


class TestParseUnits:
    def test_whole_tokens(self):
        assert parse_ether("1000000") == 10**24
        assert parse_ether(100) == 100 * 10**18

    def test_fractional(self):
        assert parse_ether("0.5") == 5 * 10**17
        assert parse_ether(Decimal("1.000000000000000001")) == 10**18 + 1
        assert parse_units("1.25", 6) == 1_250_000

    def test_large_values_are_exact(self):
        # 36 significant digits, beyond the default Decimal precision
        assert parse_ether("123456789012345678.123456789012345678") == (
            123456789012345678123456789012345678
        )

    def test_whitespace(self):
        assert parse_units(" 2 ", 0) == 2

    @pytest.mark.parametrize(
        "value",
        [
            "-1",
            "abc",
            "",
            "NaN",
            "Infinity",
            "0.0000000000000000001",
            "1." + "0" * 110 + "1",
            "1E-1000000",
            1.5,
            True,
            None,
            [1],
        ],
    )
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_ether(value)

    def test_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            parse_units(MAX_UINT256 + 1, 0)

    def test_max_uint256_accepted(self):
        assert parse_units(str(MAX_UINT256), 0) == MAX_UINT256

    def test_rejects_huge_exponent(self):
        with pytest.raises(ValidationError):
            parse_ether("1E+999999999")

    def test_trailing_zeros_beyond_decimals(self):
        assert parse_ether("1." + "0" * 110) == 10**18
        assert parse_ether("0E-1000") == 0


class TestFormatUnits:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "0"),
            (10**18, "1"),
            (15 * 10**17, "1.5"),
            (1, "0.000000000000000001"),
            (10**24, "1000000"),
        ],
    )
    def test_format_ether(self, amount, expected):
        assert format_ether(amount) == expected

    def test_format_units_decimals(self):
        assert format_units(1_250_000, 6) == "1.25"

    def test_negative(self):
        assert format_units(-15, 1) == "-1.5"

    def test_parse_format_agree(self):
        assert format_ether(parse_ether("42.0625")) == "42.0625"
