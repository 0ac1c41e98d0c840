"""Abstract repository for Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from storefront.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def create(self) -> Cart:
        """Insert an empty cart under a freshly allocated ID and return it.

        Allocation and insertion happen as one step, so two concurrent
        creates never share an ID.
        """

    @abstractmethod
    def get_by_id(self, cart_id: str) -> Cart | None:
        """Return a cart by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Cart]:
        """Return every cart."""

    @abstractmethod
    def update(self, cart_id: str, mutate: Callable[[Cart], None]) -> Cart | None:
        """Atomically read, change and write back one cart.

        ``mutate`` receives the stored cart and changes it in place; the
        result has its duplicate rows merged before it is written.  If
        ``mutate`` raises, nothing is written and the error propagates.
        Returns the written cart, or None when the cart does not exist.
        """

    @abstractmethod
    def delete(self, cart_id: str) -> Cart | None:
        """Remove a cart and return it, or None if it did not exist."""
