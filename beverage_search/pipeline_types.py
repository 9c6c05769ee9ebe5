"""Typed containers shared across pipeline modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Mapping, Optional


@dataclass(frozen=True)
class CatalogItem:
    """A normalized, searchable catalog record. Immutable once built."""

    item_id: Optional[str]
    name: str
    normalized_name: str
    tokens: FrozenSet[str]
    size_ml: Optional[float]
    pack_code: Optional[str]
    pack_canonical: Optional[str]
    pack_label: Optional[str]
    variant_label: Optional[str]
    price: float
    price_missing: bool
    product_sku: Optional[str] = None
    source_vendor_item_id: Optional[str] = None
    # Raw fields the pipeline does not consume, kept verbatim.
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def product_id(self) -> Optional[str]:
        return self.product_sku or self.source_vendor_item_id


@dataclass(frozen=True)
class QuerySizeHint:
    """
    Container size signal extracted from a query.

    explicit: came from a literal "<number><unit>" mention.
    inferred: came from an alias phrase ("latao", "long neck").
    Both False with size_ml None means the query says nothing about size.
    """

    size_ml: Optional[float] = None
    explicit: bool = False
    inferred: bool = False


@dataclass
class ScoredItem:
    """Sub-scores and composite score of one catalog item for one query."""

    item: CatalogItem
    token_score: float
    size_score: float
    pack_bonus: float
    score: float
