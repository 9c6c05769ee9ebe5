import pytest

from beverage_search.catalog_build import build_catalog


SAMPLE_RECORDS = [
    {
        "item_platform_id": "IP-SKOL-473-CX",
        "name": "Cerveja Skol Lata 473ml Cx c/12",
        "container_item_size": 473,
        "container_unit_of_measurement": "ml",
        "pack_name": "CX",
        "price": "45.90",
        "product_sku": "SKU-1001",
        "source_vendor_item_id": "V-1001",
    },
    {
        "item_platform_id": "IP-SKOL-350-UN",
        "name": "Cerveja Skol Lata 350ml",
        "container_item_size": 350,
        "container_unit_of_measurement": "ml",
        "pack_name": "UN",
        "price": 3.49,
        "product_sku": None,
        "source_vendor_item_id": "V-1002",
    },
    {
        "item_platform_id": "IP-BRAHMA-473-CX",
        "name": "Cerveja Brahma Duplo Malte Lata 473ml Cx c/12",
        "container_item_size": "473",
        "container_unit_of_measurement": "ML",
        "pack_name": "cx",
        "price": 52.9,
        "product_sku": "SKU-1003",
    },
    {
        "item_platform_id": "IP-HEINEKEN-LN-FD",
        "name": "Cerveja Heineken Long Neck 330ml Fardo 6 un",
        "container_item_size": 330,
        "container_unit_of_measurement": "ml",
        "pack_name": "FD",
        "price": 39.0,
        "product_sku": "SKU-1004",
    },
    {
        "item_platform_id": "IP-SPATEN-600",
        "name": "Cerveja Spaten Garrafa 600ml",
        "container_item_size": 0.6,
        "container_unit_of_measurement": "L",
        "pack_name": "GRF",
        "price": "consulte",
        "product_sku": "SKU-1005",
    },
    {
        "item_platform_id": None,
        "name": "Cerveja Antarctica Original 1L",
        "container_item_size": 1,
        "container_unit_of_measurement": "litro",
        "pack_name": "UN",
        "price": 8.99,
        "product_sku": "SKU-1006",
    },
]


@pytest.fixture
def sample_records():
    return [dict(r) for r in SAMPLE_RECORDS]


@pytest.fixture
def catalog(sample_records):
    return build_catalog(sample_records)
