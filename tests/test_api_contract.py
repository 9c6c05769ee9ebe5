import pytest
from fastapi.testclient import TestClient

from beverage_search._singletons import get_service
from beverage_search.api import app
from beverage_search.service import CatalogService


# No context manager: the lifespan (which loads the real catalog file) stays off.
client = TestClient(app)


@pytest.fixture(autouse=True)
def sample_service(catalog):
    service = CatalogService(catalog)
    app.dependency_overrides[get_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


def test_health_endpoint():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_search_requires_query():
    resp = client.get("/catalog/search")
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Parâmetro q é obrigatório."}

    resp = client.get("/catalog/search", params={"q": "   "})
    assert resp.status_code == 400


def test_search_returns_ranked_matches():
    resp = client.get("/catalog/search", params={"q": "skol 473ml cx", "limit": 3})
    assert resp.status_code == 200
    data = resp.json()
    assert data["query"] == "skol 473ml cx"
    assert len(data["matches"]) == 3
    top = data["matches"][0]
    assert top == {
        "product_id": "SKU-1001",
        "name": "Cerveja Skol Lata 473ml Cx c/12",
        "variant": "473ml",
        "pack": "Caixa c/ 12",
        "score": top["score"],
    }
    scores = [m["score"] for m in data["matches"]]
    assert scores == sorted(scores, reverse=True)


def test_search_default_limit():
    resp = client.get("/catalog/search", params={"q": "cerveja"})
    assert resp.status_code == 200
    assert len(resp.json()["matches"]) == 5


def test_search_limit_out_of_range():
    assert client.get("/catalog/search", params={"q": "skol", "limit": 51}).status_code == 422
    assert client.get("/catalog/search", params={"q": "skol", "limit": 0}).status_code == 422


def test_search_internal_error_is_500(sample_service, monkeypatch):
    def boom(query, limit):
        raise RuntimeError("broken index")

    monkeypatch.setattr(sample_service.searcher, "search", boom)
    resp = client.get("/catalog/search", params={"q": "skol"})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Erro interno ao processar a busca."}


def test_cart_flow():
    resp = client.post(
        "/cart/items",
        json={"items": [{"item_platform_id": "IP-SKOL-473-CX", "qty": 2}, {"item_platform_id": "IP-SKOL-350-UN", "qty": 1}]},
    )
    assert resp.status_code == 200
    body = resp.json()
    cart_id = body["cart_id"]
    assert cart_id.startswith("CART-")
    assert [i["removed"] for i in body["items"]] == [False, False]

    resp = client.get(f"/cart/{cart_id}")
    assert resp.status_code == 200
    snap = resp.json()
    assert snap["subtotal"] == 95.29
    assert {l["item_platform_id"]: l["line_total"] for l in snap["lines"]} == {
        "IP-SKOL-473-CX": 91.8,
        "IP-SKOL-350-UN": 3.49,
    }

    resp = client.post(
        "/cart/items",
        json={"cart_id": cart_id, "items": [{"item_platform_id": "IP-SKOL-473-CX", "qty": 0}, {"item_platform_id": "IP-SKOL-350-UN", "qty": 0}]},
    )
    assert resp.status_code == 200
    assert all(i["removed"] for i in resp.json()["items"])

    resp = client.get(f"/cart/{cart_id}")
    assert resp.status_code == 404


def test_unknown_cart_is_404():
    resp = client.get("/cart/CART-does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Carrinho não encontrado ou expirado."}


def test_cart_rejects_bad_payloads():
    assert client.post("/cart/items", json={"items": []}).status_code == 422
    resp = client.post("/cart/items", json={"items": [{"item_platform_id": "IP-SKOL-473-CX", "qty": -1}]})
    assert resp.status_code == 422
