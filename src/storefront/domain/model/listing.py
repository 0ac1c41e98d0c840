"""Catalog listing model: filters, sort order and result pages.

These types are the contract between the query engine and the product
repository: the engine describes *what* to list, the repository decides
how to fetch it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from storefront.domain.model.product import Product


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class ProductCriteria:
    """Filter applied to the catalog.

    ``text`` matches title OR description OR category; ``category`` and
    ``status`` are ANDed on top of it.  Matching is a case-insensitive
    substring test.
    """

    text: str | None = None
    category: str | None = None
    status: bool | None = None

    def matches(self, product: Product) -> bool:
        if self.text:
            needle = self.text.casefold()
            fields = (product.title, product.description, product.category)
            if not any(needle in value.casefold() for value in fields):
                return False
        if self.category and self.category.casefold() not in product.category.casefold():
            return False
        if self.status is not None and product.status != self.status:
            return False
        return True


@dataclass(frozen=True)
class ProductPage:
    """One page of a filtered listing plus the numbers needed to navigate it."""

    items: list[Product]
    total_count: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_count / self.limit))

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def prev_page(self) -> int | None:
        return self.page - 1 if self.has_prev_page else None

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.has_next_page else None


def paginate(
    products: list[Product],
    criteria: ProductCriteria,
    sort: SortOrder | None,
    page: int,
    limit: int,
) -> ProductPage:
    """Filter, sort and slice an in-memory product list.

    Used by stores that cannot push the query down to the backend.
    ``sorted`` is stable, so equal prices keep their insertion order.
    """
    matching = [p for p in products if criteria.matches(p)]
    if sort is not None:
        matching = sorted(
            matching,
            key=lambda p: p.price.amount,
            reverse=sort is SortOrder.DESC,
        )
    start = (page - 1) * limit
    return ProductPage(
        items=matching[start:start + limit],
        total_count=len(matching),
        page=page,
        limit=limit,
    )
