from __future__ import annotations

import json
import math
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple, Union

import pandas as pd
from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .config import CATALOG_PATH, MONEY_DECIMALS
from .constants import PackCategory
from .errors import CatalogLoadError
from .normalize import normalize_text, tokenize, unique_tokens
from .packs import canonical_pack, format_pack_label
from .pipeline_types import CatalogItem
from .units import format_variant_label, to_milliliters, to_number


# ---------------------------
# Raw record schema
# ---------------------------

class RawCatalogRecord(BaseModel):
    """
    One record as it comes from the catalog source.

    Every field is optional on the wire.  Text fields are coerced to stripped
    strings (blank -> None); size and price stay raw and are parsed by the
    pipeline, which falls back to None / 0.0 + price_missing.  Fields not
    listed here are kept in `model_extra` and carried onto the CatalogItem.
    """

    model_config = ConfigDict(extra="allow")

    item_platform_id: Optional[str] = None
    name: Optional[str] = None
    container_item_size: Any = None
    container_unit_of_measurement: Optional[str] = None
    pack_name: Optional[str] = None
    price: Any = None
    product_sku: Optional[str] = None
    source_vendor_item_id: Optional[str] = None

    @field_validator(
        "item_platform_id",
        "name",
        "container_unit_of_measurement",
        "pack_name",
        "product_sku",
        "source_vendor_item_id",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value):
        if value is None:
            return None
        if isinstance(value, float):
            if math.isnan(value):
                return None
            if value.is_integer():
                # ids exported as numbers: 123.0 -> "123"
                value = int(value)
        text = str(value).strip()
        return text or None


# ---------------------------
# Catalog container
# ---------------------------

class Catalog(NamedTuple):
    """
    The normalized catalog: every item in source order plus the read-only
    item_id -> CatalogItem index.  Unpacks as `items, index = build_catalog(...)`.
    """

    items: Tuple[CatalogItem, ...]
    index: Mapping[str, CatalogItem]

    def find(self, item_id: Optional[str]) -> Optional[CatalogItem]:
        if not item_id:
            return None
        return self.index.get(item_id)


# ---------------------------
# Normalization pipeline
# ---------------------------

def _parse_price(value) -> Tuple[float, bool]:
    """Return (price, price_missing)."""
    price = to_number(value)
    if price is None:
        return 0.0, True
    return round(price, MONEY_DECIMALS), False


def normalize_record(record: RawCatalogRecord) -> CatalogItem:
    """Turn one raw record into a CatalogItem. Never raises on bad field values."""
    name = record.name or ""
    container_size = to_number(record.container_item_size)
    size_ml = to_milliliters(container_size, record.container_unit_of_measurement)
    price, price_missing = _parse_price(record.price)

    return CatalogItem(
        item_id=record.item_platform_id,
        name=name,
        normalized_name=normalize_text(name),
        tokens=unique_tokens(tokenize(name)),
        size_ml=size_ml,
        pack_code=record.pack_name,
        pack_canonical=canonical_pack(record.pack_name),
        pack_label=format_pack_label(record.pack_name, name),
        variant_label=format_variant_label(size_ml),
        price=price,
        price_missing=price_missing,
        product_sku=record.product_sku,
        source_vendor_item_id=record.source_vendor_item_id,
        extra=MappingProxyType(dict(record.model_extra or {})),
    )


def build_catalog(raw_records: Iterable[Union[RawCatalogRecord, Mapping[str, Any]]]) -> Catalog:
    """
    Main normalization pipeline for the beverage catalog.

    Runs once per process.  Bad records degrade per item (price 0 with
    price_missing, size None, unknown pack code passed through); records that
    are not even mappings are skipped.  Duplicate item ids are last-write-wins
    in the index; both copies stay in `items` and stay searchable.
    """
    items: List[CatalogItem] = []
    index: Dict[str, CatalogItem] = {}

    skipped = 0
    missing_price = 0
    missing_id = 0
    duplicate_ids = 0
    unknown_packs = set()

    for raw in raw_records:
        try:
            record = raw if isinstance(raw, RawCatalogRecord) else RawCatalogRecord.model_validate(raw)
        except ValidationError as e:
            skipped += 1
            logger.warning("Skipping unparsable catalog record: {}", e)
            continue

        item = normalize_record(record)
        items.append(item)

        if item.price_missing:
            missing_price += 1
        if item.pack_canonical is not None and not isinstance(item.pack_canonical, PackCategory):
            unknown_packs.add(item.pack_canonical)

        if not item.item_id:
            missing_id += 1
            continue
        if item.item_id in index:
            duplicate_ids += 1
        index[item.item_id] = item

    if missing_price:
        logger.warning("{} catalog items have no usable price; priced at 0.00", missing_price)
    if missing_id:
        logger.warning("{} catalog items have no item_platform_id; searchable but not cart-addressable", missing_id)
    if duplicate_ids:
        logger.warning("{} duplicate item_platform_id values; later records replaced earlier ones", duplicate_ids)
    if unknown_packs:
        logger.warning("Unrecognized pack codes passed through as-is: {}", sorted(unknown_packs))
    if skipped:
        logger.warning("Skipped {} catalog records that were not objects", skipped)

    logger.info("Catalog normalization complete. Items: {}, addressable: {}", len(items), len(index))
    return Catalog(items=tuple(items), index=MappingProxyType(index))


# ---------------------------
# IO helpers
# ---------------------------

def load_raw_catalog(path: Optional[Path] = None) -> List[Dict[str, Any]]:
    """
    Load raw catalog records from a JSON array (.json) or a CSV file (.csv).

    JSON records are returned as decoded, keys and value types untouched.
    CSV cells come back as strings, empty cells as None.  Any failure to read
    or parse the file is a CatalogLoadError.
    """
    path = Path(path or CATALOG_PATH)
    if not path.exists():
        raise CatalogLoadError(f"Catalog file not found: {path}")

    ext = path.suffix.lower()
    logger.info("Loading raw catalog from {}", path)
    try:
        if ext == ".json":
            with path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise CatalogLoadError(f"Catalog {path} must hold a JSON array of records")
            records = raw
        elif ext == ".csv":
            df = pd.read_csv(path, dtype=str, encoding="utf-8")
            df = df.astype(object).where(pd.notna(df), None)
            records = df.to_dict(orient="records")
        else:
            raise CatalogLoadError(f"Unsupported catalog format '{ext}' for {path}")
    except CatalogLoadError:
        raise
    except (OSError, ValueError) as e:
        raise CatalogLoadError(f"Could not parse catalog {path}: {e}") from e

    logger.info("Loaded {} rows from raw catalog", len(records))
    return records


def load_catalog(path: Optional[Path] = None) -> Catalog:
    """End-to-end: read the catalog file -> normalize -> index."""
    return build_catalog(load_raw_catalog(path))


# ---------------------------
# CLI entrypoint
# ---------------------------

if __name__ == "__main__":
    # Quick sanity check of a catalog file:
    # python -m beverage_search.catalog_build [path]
    import sys

    catalog = load_catalog(Path(sys.argv[1]) if len(sys.argv) > 1 else None)
    for item in catalog.items[:10]:
        print(item.item_id, "|", item.name, "|", item.variant_label, "|", item.pack_label, "|", item.price)
