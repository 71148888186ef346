"""Number and timestamp formatting shared by the analyzer and the renderer."""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Union

Number = Union[int, float]


def _quantize(value: Number, places: int) -> Decimal:
    exact = Decimal(value)
    if not exact.is_finite():
        raise ValueError(f"cannot round non-finite value {value!r}")
    # Enough digits for every integer digit plus the kept decimals.
    context = Context(prec=max(28, exact.adjusted() + places + 2), rounding=ROUND_HALF_UP)
    return exact.quantize(Decimal(1).scaleb(-places), context=context)


def round_half_up(value: Number, places: int = 2) -> float:
    """Round to a fixed number of decimals, halves away from zero.

    Rounds the exact binary value of ``value``, so 1.005 (stored as
    1.00499999...) rounds down to 1.0 while 0.125 rounds up to 0.13.

    Args:
        value: Number to round.
        places: Decimal places to keep.

    Returns:
        Rounded value as a float.
    """
    return float(_quantize(value, places))


def format_fixed(value: Number, places: int = 2) -> str:
    """Format with exactly ``places`` decimals (e.g. 90 -> "90.00")."""
    return str(_quantize(value, places))


def format_number(value: Number) -> str:
    """Format a raw measurement without a trailing ".0" for integral floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a "Z" suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
