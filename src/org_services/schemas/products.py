from __future__ import annotations

from org_services.schemas.common import CamelModel


class Rating(CamelModel):
    rate: float | None = None
    count: int | None = None


class ProductDTO(CamelModel):
    id: int
    title: str | None = None
    price: float | None = None
    description: str | None = None
    category: str | None = None
    image: str | None = None
    rating: Rating | None = None


class ProductStats(CamelModel):
    total_products: int
    categories: list[str]
    products_by_category: dict[str, int]
    average_price: float
    min_price: float
    max_price: float
