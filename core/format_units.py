# PATH: core/format_units.py
"""
Display formatting for base-unit quantities and long identifiers.

Pure functions used only by presentation. Resolvers pass base-unit ints
through untouched.
"""

from decimal import Decimal, localcontext

from core.constants import ETHER_DECIMALS, IDENTIFIER_DISPLAY_LENGTH, IDENTIFIER_ELLIPSIS


def format_units(value: int, decimals: int = ETHER_DECIMALS) -> str:
    """
    Convert a base-unit integer to a decimal display string.

    Trailing zeros are dropped but at least one fractional digit is kept,
    so whole amounts read "1.0". An absent value (None) is a TypeError;
    callers decide how to show it.

    Example:
        >>> format_units(1500000000000000000)
        '1.5'
        >>> format_units(0)
        '0.0'
        >>> format_units(1)
        '0.000000000000000001'
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Base-unit value must be int, got {type(value).__name__}")
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")

    with localcontext() as ctx:
        ctx.prec = 100
        scaled = Decimal(value).scaleb(-decimals)
        text = format(scaled, "f")

    if "." not in text:
        return f"{text}.0"
    whole, frac = text.split(".")
    frac = frac.rstrip("0") or "0"
    return f"{whole}.{frac}"


def format_ether(value: int) -> str:
    """Format wei as ETH."""
    return format_units(value, ETHER_DECIMALS)


def truncate_identifier(
    value: str,
    keep: int = IDENTIFIER_DISPLAY_LENGTH,
    ellipsis: str = IDENTIFIER_ELLIPSIS,
) -> str:
    """
    Shorten a hash or address for list views.

    Values no longer than `keep` are returned unchanged.

    Example:
        >>> truncate_identifier("0x" + "ab" * 32)
        '0xabababababababab...'
    """
    if keep < 1:
        raise ValueError(f"keep must be >= 1, got {keep}")
    if len(value) <= keep:
        return value
    return f"{value[:keep]}{ellipsis}"
