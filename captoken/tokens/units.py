"""
Conversions between human-readable decimal amounts and integer base units.
"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from ..constants import DEFAULT_DECIMALS
from .errors import InvalidAmountError


def parse_units(value: Union[str, int, Decimal], decimals: int = DEFAULT_DECIMALS) -> int:
    """
    Convert a decimal amount to base units, e.g. ``parse_units("1.5", 18)``.

    Raises InvalidAmountError for negative values or values with more
    fractional digits than *decimals* allows.
    """
    if isinstance(value, float):
        raise InvalidAmountError(value, "floats are not accepted, pass a string")
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(value, "not a decimal number")
    if not amount.is_finite() or amount < 0:
        raise InvalidAmountError(value, "amount must be a non-negative number")

    with localcontext() as ctx:
        ctx.prec = 100
        scaled = amount.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidAmountError(value, f"more than {decimals} fractional digits")
    return int(scaled)


def format_units(amount: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Inverse of parse_units; trailing zeros are stripped (``"1.5"``, ``"3"``)."""
    if decimals == 0:
        return str(amount)
    whole, frac = divmod(amount, 10**decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_str}" if frac_str else str(whole)


def parse_ether(value: Union[str, int, Decimal]) -> int:
    return parse_units(value, 18)


def format_ether(amount: int) -> str:
    return format_units(amount, 18)
