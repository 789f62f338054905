from __future__ import annotations

import math
import re
from datetime import date, datetime, time
from typing import Any

"""Scalar helpers shared by the structure-inference heuristics.

Every heuristic needs the same three questions answered about a cell value:
is it empty, does it read as a number, and what text does it show. Keeping
the answers here keeps the orientation detector, header locator, column typer
and block extractor in agreement.

``leading_number`` follows spreadsheet-export habits: the longest numeric
prefix counts ("12 kg" -> 12.0), so a label that *starts* with digits is
treated as numeric by the header/orientation heuristics.
"""

__all__ = [
    "cell_text",
    "is_blank",
    "is_numeric",
    "leading_number",
    "parse_number",
    "strict_number",
]

_LEADING_NUMBER = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_WHITESPACE = re.compile(r"\s+")


def is_blank(value: Any) -> bool:
    """None, NaN and empty/whitespace strings are blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


def leading_number(text: str) -> float | None:
    """Parse the numeric prefix of ``text`` (whitespace trimmed), else None."""
    match = _LEADING_NUMBER.match(text.strip())
    if match is None:
        return None
    return float(match.group(0))


def is_numeric(value: Any) -> bool:
    """Numeric vs. non-numeric primitive category.

    Real numbers are numeric (booleans are not); strings are numeric when they
    start with a number once a decimal comma is read as a dot.
    Dates and other objects are non-numeric.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return leading_number(value.replace(",", ".")) is not None
    return False


def strict_number(value: Any) -> float | None:
    """Return a finite float when the *whole* value is a number, else None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_number(value: Any) -> float | None:
    """Lenient numeric read used for metric values.

    Strips every whitespace character (thousands separators such as
    "4 224" or non-breaking spaces) and reads the first comma as a decimal
    separator before taking the numeric prefix.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None
    compact = _WHITESPACE.sub("", value).replace(",", ".", 1)
    number = leading_number(compact)
    if number is None or not math.isfinite(number):
        return None
    return number


def cell_text(value: Any) -> str:
    """Display text of a scalar, trimmed. Blank values give ''."""
    if is_blank(value):
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value).strip()
