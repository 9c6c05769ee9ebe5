from __future__ import annotations
"""
Search ranking engine for the beverage catalog.

Every query scores every catalog item (no inverted index; the catalog is
small enough for a full scan) on three independent sub-scores in [0, 1]:

- token score: Jaccard overlap of query/item token sets + capped brand bonus
- size score: smooth proximity between the query size hint and item size
- pack bonus: whether the item's canonical pack matches the query's pack word

The composite is a fixed weighted sum, clamped to [0, 1].  Items scoring
<= 0 are dropped, the rest are stable-sorted by score and cut to `limit`.
"""

import argparse
from typing import FrozenSet, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .catalog_build import Catalog
from .config import (
    BRAND_BONUS_CAP,
    BRAND_BONUS_PER_MATCH,
    PACK_SCORE_NO_QUERY_PACK,
    PACK_WEIGHT,
    SEARCH_DEFAULT_LIMIT,
    SIZE_FALLOFF_ML,
    SIZE_SCORE_NO_ITEM_SIZE,
    SIZE_SCORE_NO_QUERY_SIZE,
    SIZE_WEIGHT,
    TOKEN_WEIGHT,
    SearchResponse,
)
from .constants import BRANDS
from .mapping import map_scored_to_results
from .normalize import normalize_text, unique_tokens
from .pipeline_types import QuerySizeHint, ScoredItem
from .query_analysis import detect_pack_keyword, parse_query_size, query_tokens_in_order


# =============================================================================
# Sub-scores
# =============================================================================

def clamp(value, lo: float = 0.0, hi: float = 1.0):
    return np.clip(value, lo, hi)


def jaccard_similarity(a: FrozenSet[str], b: FrozenSet[str]) -> float:
    if not a or not b:
        return 0.0
    intersection = len(a & b)
    union = len(a) + len(b) - intersection
    return intersection / union if union else 0.0


def token_score(query_tokens: FrozenSet[str], item_tokens: FrozenSet[str]) -> float:
    """Jaccard overlap plus 0.1 per shared brand token, bonus capped at 0.2."""
    overlap = jaccard_similarity(query_tokens, item_tokens)
    brand_matches = len(query_tokens & BRANDS & item_tokens)
    bonus = min(BRAND_BONUS_CAP, brand_matches * BRAND_BONUS_PER_MATCH)
    return float(clamp(overlap + bonus))


def size_scores(item_sizes_ml: np.ndarray, hint: QuerySizeHint) -> np.ndarray:
    """
    Vectorised size proximity.  `item_sizes_ml` uses NaN for unknown sizes.

    no query size -> 0.7, unknown item size -> 0.5,
    else 1 / (1 + |query - item| / 100).
    """
    sizes = np.asarray(item_sizes_ml, dtype="float64")
    if hint.size_ml is None:
        return np.full(sizes.shape, SIZE_SCORE_NO_QUERY_SIZE, dtype="float64")
    proximity = clamp(1.0 / (1.0 + np.abs(hint.size_ml - sizes) / SIZE_FALLOFF_ML))
    return np.where(np.isnan(sizes), SIZE_SCORE_NO_ITEM_SIZE, proximity)


def pack_bonuses(item_packs: Sequence[Optional[str]], query_pack: Optional[str]) -> np.ndarray:
    """1 for a pack match, 0 for a mismatch, 0.5 everywhere when the query names no pack."""
    if query_pack is None:
        return np.full(len(item_packs), PACK_SCORE_NO_QUERY_PACK, dtype="float64")
    return np.array([1.0 if p == query_pack else 0.0 for p in item_packs], dtype="float64")


def composite_scores(tokens: np.ndarray, sizes: np.ndarray, packs: np.ndarray) -> np.ndarray:
    return clamp(TOKEN_WEIGHT * tokens + SIZE_WEIGHT * sizes + PACK_WEIGHT * packs)


# =============================================================================
# Engine
# =============================================================================

class CatalogSearcher:
    """
    Ranks catalog items against free-text queries.

    Per-item sizes and packs are laid out once as arrays; token overlap is
    computed per query.  Read-only after construction, so one instance can
    serve concurrent readers.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self._items = catalog.items
        self._sizes = np.array(
            [np.nan if it.size_ml is None else it.size_ml for it in self._items],
            dtype="float64",
        )
        self._packs: List[Optional[str]] = [it.pack_canonical for it in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def score(self, query: str) -> Tuple[str, List[ScoredItem]]:
        """
        Score the whole catalog.

        Returns (normalized_query, ranked ScoredItems), highest score first,
        ties in catalog order, items with score <= 0 removed.
        """
        query = query or ""
        normalized_query = normalize_text(query)
        ordered_tokens = query_tokens_in_order(query)
        query_tokens = unique_tokens(ordered_tokens)
        hint = parse_query_size(query)
        query_pack = detect_pack_keyword(ordered_tokens)

        n = len(self._items)
        if n == 0:
            return normalized_query, []

        tok = np.fromiter(
            (token_score(query_tokens, it.tokens) for it in self._items),
            dtype="float64",
            count=n,
        )
        siz = size_scores(self._sizes, hint)
        pck = pack_bonuses(self._packs, query_pack)
        total = composite_scores(tok, siz, pck)

        order = np.argsort(-total, kind="stable")
        ranked: List[ScoredItem] = []
        for idx in order:
            if total[idx] <= 0:
                break
            ranked.append(
                ScoredItem(
                    item=self._items[idx],
                    token_score=float(tok[idx]),
                    size_score=float(siz[idx]),
                    pack_bonus=float(pck[idx]),
                    score=float(total[idx]),
                )
            )

        logger.debug(
            "Query '{}' size_hint={} pack={} -> {} positive of {} items",
            normalized_query, hint, query_pack, len(ranked), n,
        )
        return normalized_query, ranked

    def search(self, query: str, limit: int = SEARCH_DEFAULT_LIMIT) -> SearchResponse:
        normalized_query, ranked = self.score(query)
        top = ranked[: max(0, int(limit))]
        return SearchResponse(query=normalized_query, matches=map_scored_to_results(top))


def search_catalog(query: str, catalog: Catalog, limit: int = SEARCH_DEFAULT_LIMIT) -> SearchResponse:
    """One-off search; builds a throwaway CatalogSearcher."""
    return CatalogSearcher(catalog).search(query, limit)


# =============================================================================
# CLI convenience
# =============================================================================

def main(argv: Optional[List[str]] = None) -> None:
    # python -m beverage_search.search "skol lata 473ml cx" --limit 5
    from .catalog_build import load_catalog

    parser = argparse.ArgumentParser(description="Rank catalog items for a query.")
    parser.add_argument("query")
    parser.add_argument("--limit", type=int, default=SEARCH_DEFAULT_LIMIT)
    parser.add_argument("--catalog", default=None, help="Catalog file (.json/.csv)")
    args = parser.parse_args(argv)

    searcher = CatalogSearcher(load_catalog(args.catalog))
    normalized_query, ranked = searcher.score(args.query)
    print(f"query: {normalized_query}")
    for s in ranked[: args.limit]:
        print(
            f"{s.score:.4f}  tok={s.token_score:.3f} size={s.size_score:.3f} "
            f"pack={s.pack_bonus:.1f}  {s.item.name}"
        )


if __name__ == "__main__":
    main()
