"""Port for the product-change fan-out channel.

The catalog publishes two events after every product mutation:
``updateProducts`` with a refreshed listing, then one of
``productAdded`` / ``productUpdated`` / ``productDeleted`` with the
affected record.  Delivery is best-effort.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

UPDATE_PRODUCTS = "updateProducts"
PRODUCT_ADDED = "productAdded"
PRODUCT_UPDATED = "productUpdated"
PRODUCT_DELETED = "productDeleted"


class ProductNotifier(ABC):

    @abstractmethod
    def publish(self, event: str, payload: Any) -> None:
        """Send *event* with a JSON-serialisable *payload* to subscribers."""
