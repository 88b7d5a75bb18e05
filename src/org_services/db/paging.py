"""
org_services.db.paging

Offset paging and sorting for repository queries.

Responsibilities:
- Describe a page request (`Pageable`) independent of the HTTP layer.
- Run a count + windowed select for a statement and return a `PageResult`.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from org_services.errors import InvalidSortError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Pageable:
    page: int = 0
    size: int = 20
    # (property, descending) pairs, applied in order.
    sort: tuple[tuple[str, bool], ...] = field(default_factory=tuple)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @classmethod
    def parse(cls, *, page: int, size: int, sort: Sequence[str] = ()) -> Pageable:
        """
        Accepts `property` or `property,asc|desc`, the format clients already send.
        """

        orders: list[tuple[str, bool]] = []
        for raw in sort:
            prop, _, direction = raw.partition(",")
            prop = prop.strip()
            direction = direction.strip().lower() or "asc"
            if not prop:
                raise InvalidSortError("Sort property must not be empty")
            if direction not in ("asc", "desc"):
                raise InvalidSortError(f"Invalid sort direction '{direction}'")
            orders.append((prop, direction == "desc"))
        return cls(page=page, size=size, sort=tuple(orders))


@dataclass(frozen=True, slots=True)
class PageResult(Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0

    def map(self, fn: Callable[[T], U]) -> PageResult[U]:
        return PageResult(
            items=[fn(i) for i in self.items], total=self.total, page=self.page, size=self.size
        )


async def paginate(
    session: AsyncSession,
    stmt: Select[Any],
    pageable: Pageable,
    *,
    sortable: Mapping[str, Any],
    default_sort: str = "id",
) -> PageResult[Any]:
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await session.execute(count_stmt)).scalar_one()

    order_by = []
    for prop, descending in pageable.sort:
        column = sortable.get(prop)
        if column is None:
            raise InvalidSortError(f"No sortable property '{prop}'")
        order_by.append(column.desc() if descending else column.asc())
    if not order_by:
        order_by.append(sortable[default_sort].asc())

    rows = await session.execute(
        stmt.order_by(*order_by).offset(pageable.offset).limit(pageable.size)
    )
    return PageResult(
        items=list(rows.scalars().all()), total=total, page=pageable.page, size=pageable.size
    )
