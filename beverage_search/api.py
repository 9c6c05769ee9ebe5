from __future__ import annotations

"""
FastAPI application for the beverage catalog.

- GET  /health
- GET  /catalog/search?q=...&limit=...
- POST /cart/items
- GET  /cart/{cart_id}

The routes only validate wire input; ranking and cart rules live in
CatalogService.  The service comes in through a dependency so tests can
swap in their own catalog.
"""

import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from ._singletons import get_service
from .config import (
    API_HOST,
    API_PORT,
    LOG_LEVEL,
    SEARCH_DEFAULT_LIMIT,
    SEARCH_MAX_LIMIT,
    CartSnapshot,
    CartUpsertRequest,
    CartUpsertResponse,
    HealthResponse,
    SearchResponse,
)
from .errors import InputShapeError
from .log import configure_logging
from .service import CatalogService


# -----------------------
# FastAPI app + startup
# -----------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(LOG_LEVEL)
    logger.info("Starting app warmup...")
    # A catalog that cannot be loaded is fatal: let the error abort startup.
    service = get_service()
    logger.info("Warmup complete. {} catalog items loaded", len(service.catalog.items))
    yield


app = FastAPI(title="beverage-search", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("{} {} -> {} ({:.1f} ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


@app.exception_handler(InputShapeError)
async def input_shape_error_handler(request: Request, exc: InputShapeError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# -----------------------
# Routes
# -----------------------

@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/catalog/search", response_model=SearchResponse)
def catalog_search(
    q: str = "",
    limit: int = Query(SEARCH_DEFAULT_LIMIT, ge=1, le=SEARCH_MAX_LIMIT),
    service: CatalogService = Depends(get_service),
) -> SearchResponse:
    query = q.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Parâmetro q é obrigatório.")
    try:
        return service.search(query, limit)
    except InputShapeError:
        raise
    except Exception as e:
        logger.exception("Erro ao buscar catálogo: {}", e)
        raise HTTPException(status_code=500, detail="Erro interno ao processar a busca.")


@app.post("/cart/items", response_model=CartUpsertResponse)
def upsert_cart_items(
    req: CartUpsertRequest,
    service: CatalogService = Depends(get_service),
) -> CartUpsertResponse:
    return service.upsert_cart_items(req.cart_id, req.items)


@app.get("/cart/{cart_id}", response_model=CartSnapshot)
def get_cart(cart_id: str, service: CatalogService = Depends(get_service)) -> CartSnapshot:
    snapshot = service.get_cart_snapshot(cart_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Carrinho não encontrado ou expirado.")
    return snapshot


# -----------------------
# CLI convenience
# -----------------------

if __name__ == "__main__":
    # python -m beverage_search.api
    import uvicorn

    uvicorn.run(app, host=API_HOST, port=API_PORT)
