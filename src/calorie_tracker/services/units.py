"""Unit conversion and numeric input parsing."""

import math

KG_PER_LB = 0.45359237
CM_PER_INCH = 2.54


def pounds_to_kg(pounds: float) -> float:
    return pounds * KG_PER_LB


def inches_to_cm(inches: float) -> float:
    return inches * CM_PER_INCH


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def parse_number(
    raw: str | float | None, *, decimal_comma: bool = True
) -> float | None:
    """Parse user-entered numeric text.

    With ``decimal_comma`` a comma is read as the decimal separator
    (``"12,5"`` -> 12.5); otherwise commas are treated as thousands
    separators and dropped (``"1,800"`` -> 1800). Returns ``None`` for
    blank, unparseable or non-finite input.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int | float):
        value = float(raw)
    else:
        text = raw.strip()
        if not text:
            return None
        text = text.replace(",", "." if decimal_comma else "")
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value
