"""Brazilian-locale number parsing utilities"""

import math
import re
from typing import Optional

_CURRENCY_MARKER = re.compile(r"R?\$\s*")
_NON_NUMERIC = re.compile(r"[^0-9.,]")
_LEADING_INT = re.compile(r"\s*([0-9]+)")


def parse_monetary(value: Optional[str]) -> float:
    """
    Convert a BRL-formatted amount to float.

    "R$ 1.234,56" -> 1234.56, "1234,56" -> 1234.56, "8,16%" -> 8.16.
    When both separators appear "." groups thousands and "," is the decimal
    mark. Malformed or overflowing input yields 0.0; this never raises.
    """
    if not value or not isinstance(value, str):
        return 0.0

    cleaned = _NON_NUMERIC.sub("", _CURRENCY_MARKER.sub("", value)).strip()

    if "." in cleaned and "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    elif "," in cleaned:
        cleaned = cleaned.replace(",", ".")

    try:
        result = float(cleaned)
    except ValueError:
        return 0.0
    return result if math.isfinite(result) else 0.0


def parse_integer(value: Optional[str]) -> Optional[int]:
    """Parse the leading digits of value ("360 meses" -> 360), None if there are none"""
    if not value or not isinstance(value, str):
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None
