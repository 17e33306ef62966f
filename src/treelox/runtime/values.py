"""
Runtime values.

Values are plain Python objects: None (nil), bool, float and str.
"""

import math
from decimal import Decimal
from typing import Any


def is_number(value: Any) -> bool:
    # bool is a subclass of int, never a number here
    return isinstance(value, float) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """nil and false are falsy; everything else, including 0 and "", is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """
    Value equality with no coercion between kinds.

    Numbers are equal when they are the same value: 0 and -0 differ and
    NaN equals itself.
    """
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    if type(a) is not type(b):
        return False
    if isinstance(a, float):
        if math.isnan(a) or math.isnan(b):
            return math.isnan(a) and math.isnan(b)
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)
    return a == b


def format_number(value: float) -> str:
    """
    Shortest text for a number, in plain or computerized scientific notation.

    Magnitudes from 1e-3 up to 1e7 use plain decimals (``0.001``, ``1234.5``).
    Others use a mantissa with at least one fractional digit and an ``E``
    exponent (``1.0E16``, ``1.2345678E7``, ``1.0E-4``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0 or 1e-3 <= abs(value) < 1e7:
        return repr(value)

    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    text = "".join(str(d) for d in digits)
    mantissa = text[0] + "." + (text[1:] or "0")
    return f"{'-' if sign else ''}{mantissa}E{exponent + len(digits) - 1}"


def stringify(value: Any) -> str:
    """Render a value the way print shows it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = format_number(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)
