"""Decimal utilities for the service layer.

Provides the cost and quantity rounding rules and the conversions used to
bring catalog values into Decimal arithmetic. Rounding never depends on
locale state.
"""

from decimal import Decimal
from typing import Union

from ..utils.constants import COST_QUANTUM, COST_ROUNDING, QUANTITY_QUANTUM

Number = Union[Decimal, float, int, str]


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert a numeric value to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion.

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal(None)
        Decimal('0')
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_cost(value: Number) -> Decimal:
    """
    Round a cost to 2 decimal places using banker's rounding.

    Examples:
        >>> round_cost(Decimal("2.345"))
        Decimal('2.34')
        >>> round_cost(Decimal("2.355"))
        Decimal('2.36')
        >>> round_cost(1)
        Decimal('1.00')
    """
    return to_decimal(value).quantize(COST_QUANTUM, rounding=COST_ROUNDING)


def round_quantity(value: Number) -> Decimal:
    """
    Limit a ledger quantity to the 6 decimal places the ledger stores.

    Values already within 6 places are returned unchanged, so exact
    quantities keep their written form.

    Examples:
        >>> round_quantity(Decimal("1") / Decimal("3"))
        Decimal('0.333333')
        >>> round_quantity(Decimal("2.5"))
        Decimal('2.5')
    """
    value = to_decimal(value)
    if value.as_tuple().exponent >= QUANTITY_QUANTUM.as_tuple().exponent:
        return value
    return value.quantize(QUANTITY_QUANTUM, rounding=COST_ROUNDING)


def cost_to_string(value: Union[Number, None]) -> str:
    """
    Convert a cost value to a 2-decimal string format.

    This is the standard format for cost values in service DTOs.

    Examples:
        >>> cost_to_string(Decimal("12.345"))
        '12.34'
        >>> cost_to_string(None)
        '0.00'
    """
    if value is None:
        return "0.00"
    return str(round_cost(value))


def quantity_to_string(value: Union[Number, None]) -> str:
    """Convert a quantity to string without rounding."""
    if value is None:
        return "0"
    return str(to_decimal(value))
