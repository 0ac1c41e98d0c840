"""Domain-level exceptions.

Every business rule violation is a subclass of DomainException so the
outer layers (CLI, HTTP adapters) can catch them uniformly and pick a
response from the exception type alone.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or field constraint was violated."""


class DuplicateCodeError(ValidationError):
    """Another product already uses this code."""

    def __init__(self, code: str) -> None:
        super().__init__(f"A product with code '{code}' already exists")
        self.code = code


class ProductUnavailableError(ValidationError):
    """The product is disabled or out of stock."""

    def __init__(self, product_title: str) -> None:
        super().__init__(f"Product '{product_title}' is not available")
        self.product_title = product_title


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds the product's stock."""

    def __init__(
        self,
        available: int,
        requested: int,
        product_title: str | None = None,
    ) -> None:
        subject = f" for '{product_title}'" if product_title else ""
        super().__init__(
            f"Insufficient stock{subject} "
            f"(available: {available}, requested: {requested})"
        )
        self.available = available
        self.requested = requested
        self.product_title = product_title


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ItemNotInCartError(EntityNotFoundError):
    """The cart holds no item for the given product."""

    def __init__(self, cart_id: str, product_id: str) -> None:
        super().__init__(f"Product '{product_id}' is not in cart '{cart_id}'")
        self.cart_id = cart_id
        self.product_id = product_id


class PersistenceError(DomainException):
    """The underlying store failed to read or write."""
