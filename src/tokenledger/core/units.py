"""Unit conversion helpers.

- parse_units / format_units convert between human-readable decimal amounts
  and integer base units.
- parse_ether / format_ether are the 18-decimal shorthands.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from tokenledger.core.exceptions import ValidationError
from tokenledger.core.types import DEFAULT_DECIMALS, MAX_UINT256, AmountType


def parse_units(value: AmountType, decimals: int = DEFAULT_DECIMALS) -> int:
    """
    Convert a human-readable amount (e.g. "100.5") to integer base units.

    Floats are rejected: they cannot carry an exact decimal amount.
    """
    if isinstance(value, (bool, float)):
        raise ValidationError(
            f"Amount must be str, int or Decimal, got {type(value).__name__}", field="amount"
        )
    try:
        amount = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}", field="amount") from None

    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}", field="amount")
    if amount < 0:
        raise ValidationError(f"Amount must be >= 0, got {value}", field="amount")

    # Scale with integer arithmetic; Decimal contexts round past their precision
    _, digits, exponent = amount.as_tuple()
    coefficient = int("".join(map(str, digits)))
    shift = exponent + decimals
    if coefficient == 0:
        return 0
    if amount.adjusted() + decimals >= len(str(MAX_UINT256)):
        raise ValidationError(f"Amount {value} exceeds the unsigned 256-bit range", field="amount")

    if shift >= 0:
        units = coefficient * 10**shift
    else:
        if -shift > len(digits):
            remainder = coefficient
        else:
            coefficient, remainder = divmod(coefficient, 10**-shift)
        if remainder:
            raise ValidationError(
                f"Amount {value} has more than {decimals} fractional digits", field="amount"
            )
        units = coefficient

    if units > MAX_UINT256:
        raise ValidationError(f"Amount {value} exceeds the unsigned 256-bit range", field="amount")
    return units


def format_units(amount: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """
    Convert integer base units back to a decimal string ("1.5", "100").
    """
    whole, frac = divmod(abs(amount), 10**decimals)
    sign = "-" if amount < 0 else ""
    if not frac:
        return f"{sign}{whole}"
    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{frac_str}"


def parse_ether(value: AmountType) -> int:
    return parse_units(value, 18)


def format_ether(amount: int) -> str:
    return format_units(amount, 18)
