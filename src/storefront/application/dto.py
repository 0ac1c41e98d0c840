"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the application layer and its callers (CLI,
HTTP adapters, notification fan-out) without exposing domain records.
Prices and totals travel as decimal strings so they survive JSON.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from storefront.domain.model.product import Product


@dataclass(frozen=True)
class CartItemSpec:
    """Input: one row of a full cart replacement."""

    product_id: str | None
    quantity: object


@dataclass(frozen=True)
class ProductDTO:
    id: str
    title: str
    description: str
    code: str
    price: str
    status: bool
    stock: int
    category: str
    thumbnails: list[str]
    available: bool

    @staticmethod
    def from_product(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            title=product.title,
            description=product.description,
            code=product.code,
            price=str(product.price.amount),
            status=product.status,
            stock=product.stock,
            category=product.category,
            thumbnails=list(product.thumbnails),
            available=product.available,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CartLineDTO:
    """Output: a cart row with its product snapshot.

    ``product`` is None when the referenced product has been deleted.
    """

    product_id: str
    quantity: int
    product: ProductDTO | None


@dataclass(frozen=True)
class CartDTO:
    """Output: a populated cart."""

    id: str
    items: list[CartLineDTO]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CartTotalDTO:
    cart_id: str
    total: str
    total_item_count: int
    unique_item_count: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class UnavailableItemDTO:
    product_id: str
    product_title: str | None
    requested: int
    available: int
    status: bool


@dataclass(frozen=True)
class AvailabilityReportDTO:
    is_valid: bool
    unavailable_items: list[UnavailableItemDTO]

    def to_dict(self) -> dict:
        return asdict(self)
