"""Application service: Catalog Query Engine.

Turns raw listing options (as they arrive from a query string) into a
filtered, sorted, paginated product listing wrapped in the REST result
envelope, including ready-made links to the neighbouring pages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urlencode

import structlog

from storefront.application import envelope
from storefront.application.dto import ProductDTO
from storefront.domain.exceptions import PersistenceError
from storefront.domain.model.listing import ProductCriteria, ProductPage, SortOrder
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)

DEFAULT_LIMIT = 10
DEFAULT_PAGE = 1
DEFAULT_PRODUCTS_PATH = "/api/products"


@dataclass(frozen=True)
class ProductQuery:
    """Parsed listing options.

    ``status`` keeps the raw value the caller sent so links can echo it
    back unchanged; ``criteria`` does the boolean coercion.
    """

    limit: int = DEFAULT_LIMIT
    page: int = DEFAULT_PAGE
    sort: SortOrder | None = None
    query: str | None = None
    category: str | None = None
    status: str | bool | None = None

    @staticmethod
    def from_options(options: Mapping[str, Any] | None = None) -> ProductQuery:
        options = options or {}
        return ProductQuery(
            limit=_positive_int(options.get("limit"), DEFAULT_LIMIT),
            page=_positive_int(options.get("page"), DEFAULT_PAGE),
            sort=_parse_sort(options.get("sort")),
            query=options.get("query") or None,
            category=options.get("category") or None,
            status=options.get("status"),
        )

    @property
    def criteria(self) -> ProductCriteria:
        return ProductCriteria(
            text=self.query,
            category=self.category,
            status=coerce_status(self.status) if self.status is not None else None,
        )


def coerce_status(value: Any) -> bool:
    """``True`` and ``"true"`` mean enabled; anything else means disabled."""
    return value is True or value == "true"


def build_link(
    query: ProductQuery,
    page: int,
    base_path: str = DEFAULT_PRODUCTS_PATH,
) -> str:
    """Build the URL for *page* keeping every non-default option."""
    params: list[tuple[str, Any]] = [("page", page)]
    if query.limit != DEFAULT_LIMIT:
        params.append(("limit", query.limit))
    if query.sort is not None:
        params.append(("sort", query.sort.value))
    if query.query:
        params.append(("query", query.query))
    if query.category:
        params.append(("category", query.category))
    if query.status is not None:
        params.append(("status", _status_param(query.status)))
    return f"{base_path}?{urlencode(params)}"


class CatalogQueryEngine:

    def __init__(
        self,
        product_repo: ProductRepository,
        base_path: str = DEFAULT_PRODUCTS_PATH,
    ) -> None:
        self._product_repo = product_repo
        self._base_path = base_path

    def search(self, query: ProductQuery) -> ProductPage:
        """Run the query against the repository. Store errors propagate."""
        return self._product_repo.find(
            criteria=query.criteria,
            sort=query.sort,
            page=query.page,
            limit=query.limit,
        )

    def list_products(self, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Return the listing envelope for raw *options*.

        A failing store yields an error envelope with an empty payload
        instead of an exception; listings are safe to retry.
        """
        query = ProductQuery.from_options(options)
        try:
            page = self.search(query)
        except PersistenceError as exc:
            logger.error("product_listing_failed", error=str(exc))
            return {**envelope.error(str(exc)), "payload": []}

        return envelope.success(
            [ProductDTO.from_product(p).to_dict() for p in page.items],
            totalPages=page.total_pages,
            prevPage=page.prev_page,
            nextPage=page.next_page,
            page=page.page,
            hasPrevPage=page.has_prev_page,
            hasNextPage=page.has_next_page,
            prevLink=self._link(query, page.prev_page),
            nextLink=self._link(query, page.next_page),
        )

    def list_by_category(
        self, category: str, options: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        return self.list_products({**(options or {}), "category": category})

    def list_available(self, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return self.list_products({**(options or {}), "status": True})

    def _link(self, query: ProductQuery, page: int | None) -> str | None:
        if page is None:
            return None
        return build_link(query, page, self._base_path)


# --- Option parsing -----------------------------------------------------------


def _positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _parse_sort(value: Any) -> SortOrder | None:
    if not isinstance(value, str):
        return None
    try:
        return SortOrder(value.lower())
    except ValueError:
        return None


def _status_param(value: str | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
