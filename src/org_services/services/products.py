"""
org_services.services.products

Product catalogue facade over the FakeStore API.

Responsibilities:
- Pass-through reads (all, by id, categories, by category, limited).
- In-process filtering the upstream API does not offer (search, price range).
- Aggregate statistics.
"""

from __future__ import annotations

from collections import Counter

from org_services.clients.fakestore import FakeStoreClient
from org_services.schemas.products import ProductDTO, ProductStats


class ProductService:
    def __init__(self, *, client: FakeStoreClient) -> None:
        self._client = client

    async def all(self) -> list[ProductDTO]:
        return await self._client.get_all_products()

    async def by_id(self, product_id: int) -> ProductDTO | None:
        return await self._client.get_product(product_id)

    async def categories(self) -> list[str]:
        return await self._client.get_categories()

    async def by_category(self, category: str) -> list[ProductDTO]:
        return await self._client.get_products_by_category(category)

    async def with_limit(self, limit: int) -> list[ProductDTO]:
        return await self._client.get_products_with_limit(limit)

    async def search(self, query: str | None) -> list[ProductDTO]:
        products = await self._client.get_all_products()
        if query is None or not query.strip():
            return products
        needle = query.strip().lower()
        return [
            p
            for p in products
            if any(
                field is not None and needle in field.lower()
                for field in (p.title, p.description, p.category)
            )
        ]

    async def by_price_range(
        self, min_price: float | None = None, max_price: float | None = None
    ) -> list[ProductDTO]:
        products = await self._client.get_all_products()
        return [
            p
            for p in products
            if p.price is not None
            and (min_price is None or p.price >= min_price)
            and (max_price is None or p.price <= max_price)
        ]

    async def stats(self) -> ProductStats:
        products = await self._client.get_all_products()
        categories = [p.category for p in products if p.category is not None]
        prices = [p.price for p in products if p.price is not None]
        return ProductStats(
            total_products=len(products),
            categories=sorted(set(categories)),
            products_by_category=dict(Counter(categories)),
            average_price=round(sum(prices) / len(prices), 2) if prices else 0.0,
            min_price=min(prices) if prices else 0.0,
            max_price=max(prices) if prices else 0.0,
        )
