"""Application service: Catalog.

Product CRUD plus stock reduction.  Reads go through the query engine;
writes check code uniqueness first and, once persisted, fan the change
out to an optional notifier.  A failing notifier never undoes a write.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from storefront.application.catalog_query import CatalogQueryEngine
from storefront.application.dto import ProductDTO
from storefront.application.notifier import (
    PRODUCT_ADDED,
    PRODUCT_DELETED,
    PRODUCT_UPDATED,
    UPDATE_PRODUCTS,
    ProductNotifier,
)
from storefront.domain.exceptions import (
    DuplicateCodeError,
    EntityNotFoundError,
    InsufficientStockError,
)
from storefront.domain.model.product import UNASSIGNED_ID, Product, normalize_code
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service import stock_ledger

logger = structlog.get_logger(__name__)

# Size of the refreshed listing sent with every updateProducts event.
NOTIFY_LISTING_LIMIT = 50

_IMMUTABLE_KEYS = ("id", "_id")


class CatalogService:

    def __init__(
        self,
        product_repo: ProductRepository,
        query_engine: CatalogQueryEngine | None = None,
        notifier: ProductNotifier | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._query_engine = query_engine or CatalogQueryEngine(product_repo)
        self._notifier = notifier

    # --- Reads ----------------------------------------------------------------

    def get(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        return product

    def find(self, product_id: str) -> Product | None:
        """Like ``get`` but returns None for unknown ids."""
        return self._product_repo.get_by_id(product_id)

    def get_by_code(self, code: str) -> Product | None:
        return self._product_repo.get_by_code(normalize_code(code))

    def check_availability(self, product_id: str, quantity: int = 1) -> bool:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            return False
        return stock_ledger.can_reserve(product, quantity)

    def list_products(self, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return self._query_engine.list_products(options)

    # --- Writes ---------------------------------------------------------------

    def create(self, data: Mapping[str, Any]) -> Product:
        """Validate and persist a new product.

        Codes are compared after upper-casing, regardless of status.  The
        repository allocates the id and enforces code uniqueness in the
        same step as the insert.
        """
        product = self._product_repo.add(Product.create(UNASSIGNED_ID, dict(data)))
        logger.info("product_created", product_id=product.id, code=product.code)
        self._notify(PRODUCT_ADDED, product)
        return product

    def update(self, product_id: str, patch: Mapping[str, Any]) -> Product:
        """Apply a partial update. The id itself can never change."""
        changes = {k: v for k, v in patch.items() if k not in _IMMUTABLE_KEYS}
        product = self.get(product_id)

        if "code" in changes:
            code = normalize_code(changes["code"])
            holder = self._product_repo.get_by_code(code)
            if holder is not None and holder.id != product.id:
                raise DuplicateCodeError(code)

        updated = product.apply_changes(changes)
        self._product_repo.save(updated)
        logger.info(
            "product_updated", product_id=product_id, fields=sorted(changes)
        )
        self._notify(PRODUCT_UPDATED, updated)
        return updated

    def delete(self, product_id: str) -> Product:
        """Remove a product and return the removed record.

        Carts still pointing at it are left alone; they surface the row
        as a dangling reference when read.
        """
        removed = self._product_repo.delete(product_id)
        if removed is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        logger.info("product_deleted", product_id=product_id)
        self._notify(PRODUCT_DELETED, removed)
        return removed

    def reduce_stock(self, product_id: str, quantity: int) -> Product:
        """Take units out of stock with a single conditional update."""
        qty = Quantity(quantity)
        updated = self._product_repo.reduce_stock(product_id, qty.value)
        if updated is not None:
            logger.info(
                "stock_reduced",
                product_id=product_id,
                quantity=qty.value,
                remaining=updated.stock,
            )
            return updated

        # The conditional update refused; find out why.
        product = self.get(product_id)
        raise InsufficientStockError(
            available=product.stock,
            requested=qty.value,
            product_title=product.title,
        )

    # --- Notifications --------------------------------------------------------

    def _notify(self, event: str, product: Product) -> None:
        if self._notifier is None:
            return
        try:
            listing = self._query_engine.list_products({"limit": NOTIFY_LISTING_LIMIT})
            # Only a listing that was actually read goes out.
            if listing["status"] == "success":
                self._notifier.publish(UPDATE_PRODUCTS, listing["payload"])
            self._notifier.publish(event, ProductDTO.from_product(product).to_dict())
        except Exception:
            logger.warning(
                "product_notification_failed",
                notification=event,
                product_id=product.id,
                exc_info=True,
            )
