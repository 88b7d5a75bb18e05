"""
org_services.schemas.common

Base model and paging envelope for the JSON contract.

Responsibilities:
- camelCase aliases on the wire, snake_case attributes in Python.
- Reusable "not blank" / "max length" validators with client-facing messages.
- `Page[T]`: the paged list envelope returned by every list endpoint.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from org_services.db.paging import PageResult

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def not_blank(message: str) -> Callable[[str], str]:
    def check(value: str) -> str:
        if not value.strip():
            raise ValueError(message)
        return value

    return check


def max_length(limit: int, message: str) -> Callable[[str], str]:
    def check(value: str) -> str:
        if len(value) > limit:
            raise ValueError(message)
        return value

    return check


class Page(CamelModel, Generic[T]):
    content: list[T]
    total_elements: int
    total_pages: int
    number: int
    size: int
    number_of_elements: int
    first: bool
    last: bool
    empty: bool

    @classmethod
    def of(cls, result: PageResult[T]) -> Page[T]:
        return cls(
            content=result.items,
            total_elements=result.total,
            total_pages=result.total_pages,
            number=result.page,
            size=result.size,
            number_of_elements=len(result.items),
            first=result.page == 0,
            last=result.page + 1 >= result.total_pages,
            empty=not result.items,
        )
