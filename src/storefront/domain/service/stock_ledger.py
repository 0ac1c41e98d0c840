"""Domain service: Stock Ledger.

The single source of truth for "can this product absorb this quantity".
Plain functions over Product records, so they can run anywhere: in the
application layer for pre-checks and inside a repository's atomic
section for the actual decrement.
"""

from __future__ import annotations

from dataclasses import replace

from storefront.domain.exceptions import InsufficientStockError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Quantity


def is_available(product: Product) -> bool:
    """Enabled and with at least one unit in stock."""
    return product.status and product.stock > 0


def can_reserve(product: Product, quantity: int) -> bool:
    return is_available(product) and product.stock >= quantity


def reduce(product: Product, quantity: int) -> Product:
    """Return a copy of *product* with ``quantity`` units taken out of stock.

    The input record is never mutated.  Raises InsufficientStockError
    when the stock cannot cover the request.
    """
    qty = Quantity(quantity)
    if product.stock < qty.value:
        raise InsufficientStockError(
            available=product.stock,
            requested=qty.value,
            product_title=product.title,
        )
    return replace(product, stock=product.stock - qty.value)
