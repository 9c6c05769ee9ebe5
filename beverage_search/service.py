from __future__ import annotations
"""
The three operations the HTTP layer calls into.

CatalogService ties one normalized catalog, its searcher and one cart store
together.  It is an ordinary object: the API gets the process-wide instance
from _singletons, tests build their own.
"""

from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from loguru import logger

from .cart_store import CartStore
from .catalog_build import Catalog, load_catalog
from .config import (
    CART_TTL_SECONDS,
    SEARCH_DEFAULT_LIMIT,
    CartItemInput,
    CartSnapshot,
    CartUpsertResponse,
    SearchResponse,
)
from .errors import InputShapeError
from .search import CatalogSearcher


class CatalogService:
    def __init__(self, catalog: Catalog, carts: Optional[CartStore] = None):
        self.catalog = catalog
        self.searcher = CatalogSearcher(catalog)
        self.carts = carts if carts is not None else CartStore(catalog, ttl_seconds=CART_TTL_SECONDS)

    @classmethod
    def from_path(cls, path: Optional[Path] = None) -> "CatalogService":
        """Load + normalize the catalog file. CatalogLoadError propagates (fatal at startup)."""
        catalog = load_catalog(path)
        logger.info("Catalog service ready with {} items ({} addressable)", len(catalog.items), len(catalog.index))
        return cls(catalog)

    def search(self, query_text: str, limit: int = SEARCH_DEFAULT_LIMIT) -> SearchResponse:
        query = (query_text or "").strip()
        if not query:
            raise InputShapeError("Query must be non-empty")
        if limit < 1:
            raise InputShapeError("limit must be >= 1")
        return self.searcher.search(query, limit)

    def upsert_cart_items(
        self,
        cart_id: Optional[str],
        items: Iterable[Union[CartItemInput, Mapping[str, Any]]],
    ) -> CartUpsertResponse:
        return self.carts.upsert_items(cart_id, items)

    def get_cart_snapshot(self, cart_id: str) -> Optional[CartSnapshot]:
        return self.carts.snapshot(cart_id)
