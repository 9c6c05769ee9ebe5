from __future__ import annotations

"""Container size helpers: number coercion, unit conversion and variant labels."""

import math
from typing import Optional

from .constants import LITER_UNITS


def to_number(value) -> Optional[float]:
    """
    Coerce a raw catalog/query value into a finite float.

    Returns None for None, booleans, blanks, NaN/inf and anything that does
    not parse.  Strings may use a decimal comma ("1,5").
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return None
        try:
            num = float(text)
        except ValueError:
            return None
    return num if math.isfinite(num) else None


def to_milliliters(value, unit: Optional[str] = None) -> Optional[float]:
    """
    Convert (value, unit) into millilitres.

    Only the litre family (l, lt, litro, litros) is scaled.  Every other unit,
    including a missing or unknown one, is taken to already be millilitres;
    this never raises.
    """
    amount = to_number(value)
    if amount is None:
        return None
    normalized_unit = (unit or "ml").strip().lower()
    if normalized_unit in LITER_UNITS:
        return amount * 1000
    return amount


def _format_decimal(value: float) -> str:
    # 1.0 -> "1", 1.5 -> "1,5", 237.5 -> "237,5"
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text.replace(".", ",")


def format_variant_label(size_ml: Optional[float]) -> Optional[str]:
    """Human readable size: litres from 1000 ml up ("1,5L"), millilitres below ("473ml")."""
    if size_ml is None:
        return None
    if size_ml >= 1000:
        return f"{_format_decimal(size_ml / 1000)}L"
    return f"{_format_decimal(size_ml)}ml"
