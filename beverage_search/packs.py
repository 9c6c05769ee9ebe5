from __future__ import annotations

"""Pack code canonicalisation and pack label formatting."""

import re
from typing import Mapping, Optional

from .constants import PACK_SYNONYMS, PackCategory

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_PACK_QTY_SLASH_RE = re.compile(r"\bc\s*[/\\]\s*(\d+)", re.IGNORECASE)
_PACK_QTY_UNITS_RE = re.compile(r"\b(\d+)\s*(?:un|unid|unidades?)\b", re.IGNORECASE)


def canonical_pack(
    raw_code: Optional[str],
    synonyms: Mapping[str, PackCategory] = PACK_SYNONYMS,
) -> Optional[str]:
    """
    Map a raw pack code ("CX", "Cxa.", "caixa") onto its canonical category.

    - Empty / blank codes -> None.
    - Known codes -> the PackCategory (a str enum, so == "caixa" holds).
    - Unknown codes -> the lowercased raw code, unchanged.
    """
    if raw_code is None:
        return None
    normalized = str(raw_code).strip().lower()
    if not normalized:
        return None
    if normalized in synonyms:
        return synonyms[normalized]
    cleaned = _NON_ALNUM_RE.sub("", normalized)
    if cleaned in synonyms:
        return synonyms[cleaned]
    return normalized


def extract_pack_quantity(name: Optional[str]) -> Optional[int]:
    """Units per pack from a display name: "c/12" or "12 un"."""
    if not name:
        return None
    m = _PACK_QTY_SLASH_RE.search(name) or _PACK_QTY_UNITS_RE.search(name)
    if not m:
        return None
    qty = int(m.group(1))
    return qty if qty > 0 else None


def format_pack_label(pack_code: Optional[str], original_name: Optional[str]) -> Optional[str]:
    """
    Customer facing pack description.

    CX -> "Caixa c/ N" (or "Caixa"), FD -> "Fardo c/ N" (or "Fardo"),
    UN -> "Unidade".  Any other code is returned as given.
    """
    if not pack_code or not str(pack_code).strip():
        return None
    upper = str(pack_code).strip().upper()
    if upper in ("CX", "FD"):
        label = "Caixa" if upper == "CX" else "Fardo"
        qty = extract_pack_quantity(original_name)
        return f"{label} c/ {qty}" if qty else label
    if upper == "UN":
        return "Unidade"
    return pack_code
