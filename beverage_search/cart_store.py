from __future__ import annotations
"""
In-memory, TTL-bound shopping carts.

A cart is a map item_platform_id -> qty (qty >= 1) keyed by an opaque cart
id.  Per cart id the life cycle is absent -> active -> absent:

- created implicitly by the first upsert (fresh id when none is given);
- every read or write refreshes its last-access time;
- deleted as soon as its map becomes empty (empty carts are never kept);
- deleted once its last access is TTL seconds old.

Expiry is lazy: each public operation first purges *every* expired cart,
whichever cart it was called for.  Nothing runs in the background, so an
idle process keeps expired carts in memory until the next call.  All state
sits behind one re-entrant lock per store and the purge runs under the same
lock as the operation it precedes.
"""

import threading
import time
import uuid
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from loguru import logger

from .catalog_build import Catalog
from .config import (
    CART_ID_PREFIX,
    CART_TTL_SECONDS,
    CartItemInput,
    CartItemOutcome,
    CartLine,
    CartSnapshot,
    CartUpsertResponse,
)
from .mapping import to_cart_line, to_money


def new_cart_id() -> str:
    return f"{CART_ID_PREFIX}{uuid.uuid4()}"


def _clean_cart_id(cart_id: Optional[str]) -> Optional[str]:
    if isinstance(cart_id, str) and cart_id.strip():
        return cart_id.strip()
    return None


class CartStore:
    def __init__(
        self,
        catalog: Catalog,
        ttl_seconds: float = CART_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = new_cart_id,
    ):
        self._catalog = catalog
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._new_id = id_factory
        self._carts: Dict[str, Dict[str, int]] = {}
        self._last_access: Dict[str, float] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Introspection (no purge, no refresh)
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._carts)

    def __contains__(self, cart_id: object) -> bool:
        with self._lock:
            return cart_id in self._carts

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    # ------------------------------------------------------------------
    # Expiry
    # ------------------------------------------------------------------

    def purge_expired(self) -> int:
        """Drop every cart whose last access is at least TTL old. Returns how many."""
        with self._lock:
            return self._purge_expired_locked(self._clock())

    def _purge_expired_locked(self, now: float) -> int:
        expired = [cid for cid, last in self._last_access.items() if last + self._ttl <= now]
        for cid in expired:
            self._drop_locked(cid)
        if expired:
            logger.debug("Purged {} expired carts", len(expired))
        return len(expired)

    def _drop_locked(self, cart_id: str) -> None:
        self._carts.pop(cart_id, None)
        self._last_access.pop(cart_id, None)

    def _active_cart_locked(self, cart_id: Optional[str]) -> Optional[Dict[str, int]]:
        """Purge, look the cart up and refresh it. None when absent."""
        now = self._clock()
        self._purge_expired_locked(now)
        cid = _clean_cart_id(cart_id)
        if cid is None or cid not in self._carts:
            return None
        self._last_access[cid] = now
        return self._carts[cid]

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def upsert_items(
        self,
        cart_id: Optional[str],
        items: Iterable[Union[CartItemInput, Mapping[str, Any]]],
    ) -> CartUpsertResponse:
        """
        Set or remove quantities in a cart, creating it when needed.

        qty == 0 removes the item (outcome flagged removed=True), qty > 0
        overwrites the stored quantity.  Outcomes keep the input order.  A cart
        left empty afterwards is deleted straight away.
        """
        lines = [i if isinstance(i, CartItemInput) else CartItemInput.model_validate(i) for i in items]

        with self._lock:
            now = self._clock()
            self._purge_expired_locked(now)

            cid = _clean_cart_id(cart_id) or self._new_id()
            cart = self._carts.setdefault(cid, {})

            outcomes: List[CartItemOutcome] = []
            for line in lines:
                if line.qty == 0:
                    cart.pop(line.item_platform_id, None)
                    outcomes.append(CartItemOutcome(item_platform_id=line.item_platform_id, qty=0, removed=True))
                else:
                    cart[line.item_platform_id] = line.qty
                    outcomes.append(CartItemOutcome(item_platform_id=line.item_platform_id, qty=line.qty))
                self._last_access[cid] = now

            if not cart:
                self._drop_locked(cid)

            logger.debug("Cart {} upserted {} lines, {} items held", cid, len(outcomes), len(cart))
            return CartUpsertResponse(cart_id=cid, items=outcomes)

    def get_cart_lines(self, cart_id: Optional[str]) -> Optional[List[CartLine]]:
        """
        Priced lines of a cart, or None when the cart does not exist (or just
        expired).  Items no longer in the catalog are left out silently.
        """
        cid = _clean_cart_id(cart_id)
        with self._lock:
            cart = self._active_cart_locked(cid)
            if cart is None:
                return None

            lines: List[CartLine] = []
            for item_id, qty in cart.items():
                item = self._catalog.find(item_id)
                if item is None:
                    logger.debug("Cart {}: item {} not in catalog; skipped", cid, item_id)
                    continue
                lines.append(to_cart_line(item, qty))
            return lines

    def get_subtotal(self, cart_id: Optional[str]) -> Optional[float]:
        """Sum of price * qty over resolvable items, rounded once. None when absent."""
        with self._lock:
            cart = self._active_cart_locked(cart_id)
            if cart is None:
                return None

            subtotal = 0.0
            for item_id, qty in cart.items():
                item = self._catalog.find(item_id)
                if item is None:
                    continue
                subtotal += item.price * qty
            return to_money(subtotal)

    def snapshot(self, cart_id: Optional[str]) -> Optional[CartSnapshot]:
        """Lines and subtotal taken under one lock acquisition."""
        with self._lock:
            lines = self.get_cart_lines(cart_id)
            if lines is None:
                return None
            subtotal = self.get_subtotal(cart_id)
            return CartSnapshot(cart_id=_clean_cart_id(cart_id) or "", lines=lines, subtotal=subtotal or 0.0)
