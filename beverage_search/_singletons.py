# beverage_search/_singletons.py
from functools import lru_cache

from .service import CatalogService


@lru_cache(maxsize=1)
def get_service() -> CatalogService:
    # Catalog is read once per process; carts live as long as this instance.
    return CatalogService.from_path()
