"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, document store,
in-memory) live in the infrastructure layer and the test suite.

Implementations raise PersistenceError when the store itself fails.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.listing import ProductCriteria, ProductPage, SortOrder
from storefront.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Product | None:
        """Return the product holding this (upper-cased) code, or None."""

    @abstractmethod
    def find(
        self,
        criteria: ProductCriteria,
        sort: SortOrder | None,
        page: int,
        limit: int,
    ) -> ProductPage:
        """Return one page of products matching *criteria*.

        Without a sort order, products come back in insertion order.
        """

    @abstractmethod
    def add(self, product: Product) -> Product:
        """Insert a new product under a freshly allocated ID.

        The ID on *product* is ignored.  The code check, the allocation
        and the write happen as one step: raises DuplicateCodeError when
        any stored product already holds the code.  Returns the stored
        record.
        """

    @abstractmethod
    def save(self, product: Product) -> None:
        """Write *product* under its own ID, replacing any stored record."""

    @abstractmethod
    def delete(self, product_id: str) -> Product | None:
        """Remove a product and return it, or None if it did not exist."""

    @abstractmethod
    def reduce_stock(self, product_id: str, quantity: int) -> Product | None:
        """Atomically take *quantity* units out of stock.

        The check ("stock >= quantity") and the write happen as one
        conditional update. Returns the updated product, or None when
        the product is missing or its stock cannot cover the request;
        in that case nothing is written.
        """
