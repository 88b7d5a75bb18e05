"""
org_services.clients.fakestore

Read-only client for the public FakeStore product catalogue.

Responsibilities:
- Fetch products, single products, categories and category listings.
- Never raise to callers: failures are logged and surface as empty results.
"""

from __future__ import annotations

from typing import Any

import httpx

from org_services.observability.logging import get_logger
from org_services.schemas.products import ProductDTO

log = get_logger(__name__)


class FakeStoreClient:
    def __init__(self, *, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _get_json(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        r = await self._http.get(path, params=params)
        r.raise_for_status()
        # FakeStore answers unknown ids with 200 and an empty body.
        if not r.content.strip():
            return None
        return r.json()

    async def _get_products(
        self, path: str, *, params: dict[str, Any] | None = None
    ) -> list[ProductDTO]:
        try:
            data = await self._get_json(path, params=params)
            return [ProductDTO.model_validate(p) for p in data or []]
        except (httpx.HTTPError, ValueError) as e:
            log.error("fakestore_request_failed", path=path, error=type(e).__name__, detail=str(e))
            return []

    async def get_all_products(self) -> list[ProductDTO]:
        return await self._get_products("/products")

    async def get_products_by_category(self, category: str) -> list[ProductDTO]:
        return await self._get_products(f"/products/category/{category}")

    async def get_products_with_limit(self, limit: int) -> list[ProductDTO]:
        return await self._get_products("/products", params={"limit": limit})

    async def get_product(self, product_id: int) -> ProductDTO | None:
        try:
            data = await self._get_json(f"/products/{product_id}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                log.warning("product_not_found", product_id=product_id)
            else:
                log.error("fakestore_request_failed", product_id=product_id, detail=str(e))
            return None
        except (httpx.HTTPError, ValueError) as e:
            log.error("fakestore_request_failed", product_id=product_id, detail=str(e))
            return None
        if data is None:
            return None
        try:
            return ProductDTO.model_validate(data)
        except ValueError as e:
            log.error("fakestore_bad_payload", product_id=product_id, detail=str(e))
            return None

    async def get_categories(self) -> list[str]:
        try:
            data = await self._get_json("/products/categories")
        except (httpx.HTTPError, ValueError) as e:
            log.error("fakestore_request_failed", path="/products/categories", detail=str(e))
            return []
        return [str(c) for c in data or []]
