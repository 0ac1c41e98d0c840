"""Application service: Cart Aggregator.

Owns every change to a cart's contents.  Each mutation runs inside the
repository's atomic ``update``: the stored cart is read, checked against
the current product records, changed and written back as one step, with
duplicate rows collapsed before the write.  A stored cart never holds
two rows for the same product and concurrent changes never drop rows.

Mutations return the cart populated with product snapshots.  Rows whose
product has since been deleted stay in the cart with ``product=None``.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

import structlog

from storefront.application.catalog_service import CatalogService
from storefront.application.dto import (
    AvailabilityReportDTO,
    CartDTO,
    CartItemSpec,
    CartLineDTO,
    CartTotalDTO,
    ProductDTO,
    UnavailableItemDTO,
)
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ProductUnavailableError,
    ValidationError,
)
from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.service import stock_ledger

logger = structlog.get_logger(__name__)


class CartAggregator:

    def __init__(self, cart_repo: CartRepository, catalog: CatalogService) -> None:
        self._cart_repo = cart_repo
        self._catalog = catalog

    # --- Cart lifecycle -------------------------------------------------------

    def create_cart(self) -> CartDTO:
        cart = self._cart_repo.create()
        logger.info("cart_created", cart_id=cart.id)
        return self._populate(cart)

    def get_cart(self, cart_id: str) -> CartDTO:
        return self._populate(self._load(cart_id))

    def list_carts(self) -> list[CartDTO]:
        return [self._populate(cart) for cart in self._cart_repo.list_all()]

    def delete_cart(self, cart_id: str) -> CartDTO:
        removed = self._cart_repo.delete(cart_id)
        if removed is None:
            raise EntityNotFoundError(f"Cart '{cart_id}' not found")
        logger.info("cart_deleted", cart_id=cart_id)
        return self._populate(removed)

    # --- Item mutations -------------------------------------------------------

    def add_item(self, cart_id: str, product_id: str, quantity: int = 1) -> CartDTO:
        """Add units of a product, merging with an existing row.

        The stock check covers what is already in the cart plus the new
        units, so repeated adds can never exceed the product's stock.
        """
        qty = Quantity(quantity)
        product = self._catalog.get(product_id)
        if not stock_ledger.is_available(product):
            raise ProductUnavailableError(product.title)

        def add(cart: Cart) -> None:
            requested = cart.quantity_of(product_id) + qty.value
            if product.stock < requested:
                raise InsufficientStockError(
                    available=product.stock,
                    requested=requested,
                    product_title=product.title,
                )
            cart.add(product_id, qty)

        cart = self._update(cart_id, add)
        logger.info(
            "cart_item_added",
            cart_id=cart_id,
            product_id=product_id,
            quantity=qty.value,
            cart_quantity=cart.quantity_of(product_id),
        )
        return self._populate(cart)

    def remove_item(self, cart_id: str, product_id: str) -> CartDTO:
        cart = self._update(cart_id, lambda c: c.remove(product_id))
        logger.info("cart_item_removed", cart_id=cart_id, product_id=product_id)
        return self._populate(cart)

    def update_item_quantity(
        self, cart_id: str, product_id: str, quantity: int
    ) -> CartDTO:
        """Set the absolute quantity of a row already in the cart.

        Zero or less removes the row instead.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError("Quantity must be an integer")
        if quantity <= 0:
            return self.remove_item(cart_id, product_id)

        product = self._catalog.get(product_id)
        self._check_stock(product, quantity)

        cart = self._update(
            cart_id, lambda c: c.set_quantity(product_id, Quantity(quantity))
        )
        logger.info(
            "cart_item_quantity_set",
            cart_id=cart_id,
            product_id=product_id,
            quantity=quantity,
        )
        return self._populate(cart)

    def replace_items(
        self,
        cart_id: str,
        items: Iterable[CartItemSpec | Mapping[str, Any]],
    ) -> CartDTO:
        """Swap the whole item list in one write.

        Every row is validated before anything is stored; the first bad
        row aborts the operation and the cart keeps its old contents.
        Duplicate rows are merged first, so the stock check sees the
        combined quantity.
        """
        if isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Iterable):
            raise ValidationError("Cart items must be a list")

        staged = Cart(id=cart_id, items=[_to_cart_item(raw) for raw in items])
        staged.merge_duplicates()

        for item in staged.items:
            product = self._catalog.find(item.product_id)
            if product is None:
                raise EntityNotFoundError(f"Product '{item.product_id}' not found")
            self._check_stock(product, item.quantity)

        cart = self._update(cart_id, lambda c: c.replace_items(staged.items))
        logger.info("cart_items_replaced", cart_id=cart_id, rows=len(cart.items))
        return self._populate(cart)

    def clear(self, cart_id: str) -> CartDTO:
        cart = self._update(cart_id, Cart.clear)
        logger.info("cart_cleared", cart_id=cart_id)
        return self._populate(cart)

    # --- Reports --------------------------------------------------------------

    def compute_total(self, cart_id: str) -> CartTotalDTO:
        """Sum ``quantity * price`` over rows whose product still exists.

        Dangling rows add nothing to the total but still count as rows.
        """
        cart = self._load(cart_id)
        total = Money.zero()
        for item in cart.items:
            product = self._catalog.find(item.product_id)
            if product is not None:
                total = total + product.price * item.quantity
        return CartTotalDTO(
            cart_id=cart.id,
            total=str(total.amount),
            total_item_count=cart.total_item_count,
            unique_item_count=cart.unique_item_count,
        )

    def validate_availability(self, cart_id: str) -> AvailabilityReportDTO:
        """List every row the catalog can no longer satisfy."""
        cart = self._load(cart_id)
        problems: list[UnavailableItemDTO] = []
        for item in cart.items:
            product = self._catalog.find(item.product_id)
            if product is None:
                problems.append(
                    UnavailableItemDTO(
                        product_id=item.product_id,
                        product_title=None,
                        requested=item.quantity,
                        available=0,
                        status=False,
                    )
                )
            elif not stock_ledger.can_reserve(product, item.quantity):
                problems.append(
                    UnavailableItemDTO(
                        product_id=item.product_id,
                        product_title=product.title,
                        requested=item.quantity,
                        available=product.stock,
                        status=product.status,
                    )
                )
        return AvailabilityReportDTO(is_valid=not problems, unavailable_items=problems)

    # --- Internal helpers -----------------------------------------------------

    def _load(self, cart_id: str) -> Cart:
        cart = self._cart_repo.get_by_id(cart_id)
        if cart is None:
            raise EntityNotFoundError(f"Cart '{cart_id}' not found")
        return cart

    def _update(self, cart_id: str, mutate: Callable[[Cart], None]) -> Cart:
        cart = self._cart_repo.update(cart_id, mutate)
        if cart is None:
            raise EntityNotFoundError(f"Cart '{cart_id}' not found")
        return cart

    @staticmethod
    def _check_stock(product: Product, quantity: int) -> None:
        if not stock_ledger.is_available(product):
            raise ProductUnavailableError(product.title)
        if product.stock < quantity:
            raise InsufficientStockError(
                available=product.stock,
                requested=quantity,
                product_title=product.title,
            )

    def _populate(self, cart: Cart) -> CartDTO:
        lines = []
        for item in cart.items:
            product = self._catalog.find(item.product_id)
            lines.append(
                CartLineDTO(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    product=ProductDTO.from_product(product) if product is not None else None,
                )
            )
        return CartDTO(id=cart.id, items=lines)


def _to_cart_item(raw: CartItemSpec | Mapping[str, Any]) -> CartItem:
    """Validate the shape of one replacement row."""
    if isinstance(raw, CartItemSpec):
        product_id, quantity = raw.product_id, raw.quantity
    elif isinstance(raw, Mapping):
        product_id = raw.get("product_id", raw.get("product"))
        quantity = raw.get("quantity")
    else:
        raise ValidationError("Each item must be a product id and quantity pair")

    if not product_id:
        raise ValidationError("Each item must reference a product id")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(
            f"Quantity for product '{product_id}' must be a positive integer"
        )
    return CartItem(product_id=str(product_id), quantity=quantity)
