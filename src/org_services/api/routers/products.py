"""
org_services.api.routers.products

Cached product catalogue endpoints (`/api/v2/products`).

Responsibilities:
- Serve FakeStore products, categories and derived views (search, price range, stats).
- Cache every non-empty result; expose explicit cache eviction endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Response
from starlette.status import HTTP_204_NO_CONTENT

from org_services.api.deps import cache_dep, product_service_dep
from org_services.cache import Cache
from org_services.errors import NotFoundError
from org_services.schemas.products import ProductDTO, ProductStats
from org_services.services.products import ProductService

router = APIRouter(prefix="/api/v2/products", tags=["products"])

PRODUCTS_CACHE = "products"
CATEGORIES_CACHE = "categories"
STATS_CACHE = "productStats"


def _dump_list(products: list[ProductDTO]) -> list[dict[str, Any]]:
    return [p.model_dump(mode="json", by_alias=True) for p in products]


@router.get("", response_model=list[ProductDTO])
async def list_products(
    limit: int | None = Query(default=None, ge=1, le=100),
    svc: ProductService = Depends(product_service_dep),
    cache: Cache = Depends(cache_dep),
) -> list[dict[str, Any]]:
    if limit is None:

        async def load() -> list[dict[str, Any]]:
            return _dump_list(await svc.all())

        return await cache.get_or_load(PRODUCTS_CACHE, "all", load)

    async def load_limited() -> list[dict[str, Any]]:
        return _dump_list(await svc.with_limit(limit))

    return await cache.get_or_load(PRODUCTS_CACHE, f"limit:{limit}", load_limited)


@router.get("/categories", response_model=list[str])
async def list_categories(
    svc: ProductService = Depends(product_service_dep),
    cache: Cache = Depends(cache_dep),
) -> list[str]:
    return await cache.get_or_load(CATEGORIES_CACHE, "all", svc.categories)


@router.get("/category/{category}", response_model=list[ProductDTO])
async def products_by_category(
    category: str,
    svc: ProductService = Depends(product_service_dep),
    cache: Cache = Depends(cache_dep),
) -> list[dict[str, Any]]:
    async def load() -> list[dict[str, Any]]:
        return _dump_list(await svc.by_category(category))

    return await cache.get_or_load(PRODUCTS_CACHE, f"category:{category}", load)


@router.get("/search", response_model=list[ProductDTO])
async def search_products(
    q: str | None = Query(default=None),
    svc: ProductService = Depends(product_service_dep),
    cache: Cache = Depends(cache_dep),
) -> list[dict[str, Any]]:
    async def load() -> list[dict[str, Any]]:
        return _dump_list(await svc.search(q))

    return await cache.get_or_load(PRODUCTS_CACHE, f"search:{(q or '').strip().lower()}", load)


@router.get("/price-range", response_model=list[ProductDTO])
async def products_by_price_range(
    min_price: float | None = Query(default=None, alias="min"),
    max_price: float | None = Query(default=None, alias="max"),
    svc: ProductService = Depends(product_service_dep),
    cache: Cache = Depends(cache_dep),
) -> list[dict[str, Any]]:
    async def load() -> list[dict[str, Any]]:
        return _dump_list(await svc.by_price_range(min_price, max_price))

    return await cache.get_or_load(PRODUCTS_CACHE, f"price-range:{min_price}:{max_price}", load)


@router.get("/stats", response_model=ProductStats)
async def product_stats(
    svc: ProductService = Depends(product_service_dep),
    cache: Cache = Depends(cache_dep),
) -> dict[str, Any]:
    async def load() -> dict[str, Any]:
        return (await svc.stats()).model_dump(mode="json", by_alias=True)

    return await cache.get_or_load(STATS_CACHE, "all", load)


@router.post("/cache/clear", status_code=HTTP_204_NO_CONTENT)
async def clear_cache(cache: Cache = Depends(cache_dep)) -> Response:
    await cache.evict_all(PRODUCTS_CACHE, CATEGORIES_CACHE, STATS_CACHE)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get("/{product_id}", response_model=ProductDTO)
async def get_product(
    product_id: int,
    svc: ProductService = Depends(product_service_dep),
    cache: Cache = Depends(cache_dep),
) -> dict[str, Any]:
    async def load() -> dict[str, Any] | None:
        product = await svc.by_id(product_id)
        return None if product is None else product.model_dump(mode="json", by_alias=True)

    value = await cache.get_or_load(PRODUCTS_CACHE, str(product_id), load)
    if value is None:
        raise NotFoundError(f"Product with id {product_id} not found")
    return value


@router.delete("/{product_id}/cache", status_code=HTTP_204_NO_CONTENT)
async def evict_product(product_id: int, cache: Cache = Depends(cache_dep)) -> Response:
    await cache.evict(PRODUCTS_CACHE, str(product_id))
    return Response(status_code=HTTP_204_NO_CONTENT)
