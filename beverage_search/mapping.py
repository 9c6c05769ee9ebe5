from __future__ import annotations
"""
Mapping utilities to convert internal catalog items into API responses.

Centralises the projection of CatalogItem / ScoredItem into the Pydantic
schemas (SearchResult, CartLine) and the money rounding rule used by both
cart lines and subtotals.
"""

import math
from typing import Iterable, List

from .config import MONEY_DECIMALS, SCORE_DECIMALS, SearchResult, CartLine
from .pipeline_types import CatalogItem, ScoredItem


def to_money(value) -> float:
    """Round to cents; anything non-finite counts as 0."""
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(numeric):
        return 0.0
    return round(numeric, MONEY_DECIMALS)


def to_search_result(scored: ScoredItem) -> SearchResult:
    item = scored.item
    return SearchResult(
        product_id=item.product_id,
        name=item.name,
        variant=item.variant_label,
        pack=item.pack_label,
        score=round(float(scored.score), SCORE_DECIMALS),
    )


def map_scored_to_results(scored_items: Iterable[ScoredItem]) -> List[SearchResult]:
    return [to_search_result(s) for s in scored_items]


def to_cart_line(item: CatalogItem, qty: int) -> CartLine:
    """
    Price one cart entry.  The catalog price is already rounded; the line
    total is rounded again after multiplying.
    """
    price = to_money(item.price)
    return CartLine(
        item_platform_id=item.item_id or "",
        name=item.name,
        variant=item.variant_label,
        pack=item.pack_label,
        price=price,
        qty=qty,
        line_total=to_money(price * qty),
        price_missing=item.price_missing,
    )
