from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"
CATALOG_PATH = Path(os.getenv("CATALOG_PATH", str(DATA_DIR / "catalogo.json")))


# ---------------------------
# Search ranking
# ---------------------------

SEARCH_DEFAULT_LIMIT = 5
SEARCH_MAX_LIMIT = 50

# Composite = TOKEN_WEIGHT * token + SIZE_WEIGHT * size + PACK_WEIGHT * pack
TOKEN_WEIGHT = 0.60
SIZE_WEIGHT = 0.25
PACK_WEIGHT = 0.15

BRAND_BONUS_PER_MATCH = 0.10
BRAND_BONUS_CAP = 0.20

# Neutral sub-scores when the query (or the item) carries no signal
SIZE_SCORE_NO_QUERY_SIZE = 0.70
SIZE_SCORE_NO_ITEM_SIZE = 0.50
PACK_SCORE_NO_QUERY_PACK = 0.50

# Every SIZE_FALLOFF_ML of deviation roughly halves the remaining closeness
SIZE_FALLOFF_ML = 100.0

SCORE_DECIMALS = 4


# ---------------------------
# Cart store
# ---------------------------

CART_ID_PREFIX = "CART-"
DEFAULT_CART_TTL_SECONDS = 24 * 60 * 60
CART_TTL_SECONDS = int(os.getenv("CART_TTL_SECONDS", str(DEFAULT_CART_TTL_SECONDS)))

MONEY_DECIMALS = 2


# ---------------------------
# HTTP / logging
# ---------------------------

API_HOST = os.getenv("HOST", "0.0.0.0")
API_PORT = int(os.getenv("PORT", "3001"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class SearchResult(BaseModel):
    """
    One ranked catalog match.  product_id prefers the SKU and falls back to
    the vendor item id.
    """

    product_id: Optional[str] = None
    name: str
    variant: Optional[str] = None
    pack: Optional[str] = None
    score: float = Field(ge=0, le=1)


class SearchResponse(BaseModel):
    """
    Response body for GET /catalog/search.  `query` is the normalized query.
    """

    query: str
    matches: List[SearchResult]


class CartItemInput(BaseModel):
    item_platform_id: str = Field(..., min_length=1)
    qty: int = Field(..., ge=0)


class CartItemOutcome(BaseModel):
    item_platform_id: str
    qty: int
    removed: bool = False


class CartUpsertRequest(BaseModel):
    """
    Request body for POST /cart/items.  Omitting cart_id starts a new cart.
    """

    cart_id: Optional[str] = None
    items: List[CartItemInput] = Field(..., min_length=1)


class CartUpsertResponse(BaseModel):
    cart_id: str
    items: List[CartItemOutcome]


class CartLine(BaseModel):
    item_platform_id: str
    name: str
    variant: Optional[str] = None
    pack: Optional[str] = None
    price: float
    qty: int
    line_total: float
    price_missing: bool = False


class CartSnapshot(BaseModel):
    """
    Response body for GET /cart/{cart_id}.
    """

    cart_id: str
    lines: List[CartLine]
    subtotal: float


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
