"""Cart aggregate: a customer's selection of products and quantities.

The cart owns its items; each item only references a product by id.
Stock rules are checked by the application layer before the cart is
touched, so the methods here only keep the item list consistent.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import ItemNotInCartError
from storefront.domain.model.value_objects import Quantity


@dataclass
class CartItem:
    product_id: str
    quantity: int


@dataclass
class Cart:
    """Aggregate root for carts.

    Invariant (after ``merge_duplicates``): at most one item per product.
    """

    id: str
    items: list[CartItem] = field(default_factory=list)

    # --- Queries --------------------------------------------------------------

    def find_item(self, product_id: str) -> CartItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def quantity_of(self, product_id: str) -> int:
        item = self.find_item(product_id)
        return item.quantity if item is not None else 0

    @property
    def total_item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def unique_item_count(self) -> int:
        return len(self.items)

    # --- Mutations ------------------------------------------------------------

    def add(self, product_id: str, quantity: Quantity) -> None:
        """Add units of a product, accumulating into an existing row."""
        item = self.find_item(product_id)
        if item is not None:
            item.quantity += quantity.value
        else:
            self.items.append(CartItem(product_id=product_id, quantity=quantity.value))

    def remove(self, product_id: str) -> None:
        """Drop every row for the product. Absent products are ignored."""
        self.items = [item for item in self.items if item.product_id != product_id]

    def set_quantity(self, product_id: str, quantity: Quantity) -> None:
        """Overwrite the quantity of an existing row."""
        item = self.find_item(product_id)
        if item is None:
            raise ItemNotInCartError(self.id, product_id)
        item.quantity = quantity.value

    def replace_items(self, items: list[CartItem]) -> None:
        self.items = [CartItem(item.product_id, item.quantity) for item in items]

    def clear(self) -> None:
        self.items = []

    def merge_duplicates(self) -> None:
        """Collapse rows sharing a product, summing quantities.

        Keeps the position of the first row seen for each product.
        """
        merged: dict[str, CartItem] = {}
        for item in self.items:
            existing = merged.get(item.product_id)
            if existing is None:
                merged[item.product_id] = CartItem(item.product_id, item.quantity)
            else:
                existing.quantity += item.quantity
        self.items = list(merged.values())
