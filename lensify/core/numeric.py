from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Optional, Type

from lensify.domain.errors import ValidationError

# wide enough to quantize any finite float to a few decimals
_CONTEXT = Context(prec=400)


def round_half_up(value: float, places: int) -> float:
    """
    Round a float to ``places`` decimals, ties away from zero.

    The exact binary value of ``value`` is rounded (not its shortest repr),
    so 0.98 -> 1.0 at one decimal and 2.675 -> 2.67 at two, the same digits a
    fixed-point formatter prints. Negative zero is normalised to 0.0.

    Parameters
    ----------
    value
        Float to round; non-finite values are returned unchanged.
    places
        Number of decimals to keep (>= 0).

    Returns
    -------
    float
        Rounded value.
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    rounded = float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_CONTEXT))
    return rounded + 0.0


def format_number(value: float) -> str:
    """Render a float without a trailing ".0" (4.6 -> "4.6", 2.0 -> "2")."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_percent(value: float) -> str:
    """Render a one-decimal percentage string (30.0 -> "30.0%")."""
    return f"{value:.1f}%"


def _to_float(value: Any) -> Optional[float]:
    # bool is an int subclass; True must not become 1.0
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def require_positive(value: Any, field: str, error: Type[ValidationError], message: str) -> float:
    """
    Parse ``value`` as a finite number > 0 or raise ``error``.

    Numeric strings are accepted since transport layers hand over text.

    Raises
    ------
    ValidationError
        The given subclass, carrying ``field`` and ``message``.
    """
    number = _to_float(value)
    if number is None or number <= 0:
        raise error(field, message)
    return number


def coerce_number(value: Any, default: float = 0.0) -> float:
    """
    Lenient numeric coercion: anything unparseable or non-finite becomes ``default``.
    """
    number = _to_float(value)
    return default if number is None else number


def coerce_positive(value: Any, default: float = 1.0) -> float:
    """
    Like coerce_number, but non-positive values also fall back to ``default``.
    """
    number = coerce_number(value, default)
    return number if number > 0 else default
