"""Product aggregate.

Products live independently of carts. A cart only keeps a reference to
a product id, so deleting a product never touches the carts that point
at it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money

# ---------------------------------------------------------------------------
# Field constraints
# ---------------------------------------------------------------------------
MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MAX_CODE_LENGTH = 20
MAX_CATEGORY_LENGTH = 50
MAX_THUMBNAILS = 5

REQUIRED_FIELDS = ("title", "description", "code", "price", "stock", "category")
MUTABLE_FIELDS = REQUIRED_FIELDS + ("status", "thumbnails")

# Id carried by a new record until the repository inserts it.
UNASSIGNED_ID = ""


@dataclass
class Product:
    """A product in the catalog.

    Use ``Product.create()`` for new products and ``apply_changes()`` for
    updates; both validate every field.  ``__init__`` stays plain so the
    repository can reconstitute stored records without re-validating.
    """

    id: str
    title: str
    description: str
    code: str
    price: Money
    stock: int
    category: str
    status: bool = True
    thumbnails: list[str] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return self.status and self.stock > 0

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(product_id: str, data: dict[str, Any]) -> Product:
        """Build a validated product from raw input data."""
        missing = [
            name for name in REQUIRED_FIELDS
            if data.get(name) is None or data.get(name) == ""
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        return Product(
            id=product_id,
            title=_clean_text("title", data["title"], MAX_TITLE_LENGTH),
            description=_clean_text(
                "description", data["description"], MAX_DESCRIPTION_LENGTH
            ),
            code=normalize_code(data["code"]),
            price=Money.of(data["price"]),
            stock=_clean_stock(data["stock"]),
            category=_clean_text("category", data["category"], MAX_CATEGORY_LENGTH),
            status=_clean_status(data.get("status", True)),
            thumbnails=_clean_thumbnails(data.get("thumbnails") or []),
        )

    # --- Mutations ------------------------------------------------------------

    def apply_changes(self, patch: dict[str, Any]) -> Product:
        """Return a copy with only the provided fields replaced.

        The id is never part of a patch; callers strip it beforehand.
        """
        unknown = sorted(set(patch) - set(MUTABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown product fields: {', '.join(unknown)}")

        changes: dict[str, Any] = {}
        if "title" in patch:
            changes["title"] = _clean_text("title", patch["title"], MAX_TITLE_LENGTH)
        if "description" in patch:
            changes["description"] = _clean_text(
                "description", patch["description"], MAX_DESCRIPTION_LENGTH
            )
        if "code" in patch:
            changes["code"] = normalize_code(patch["code"])
        if "price" in patch:
            changes["price"] = Money.of(patch["price"])
        if "stock" in patch:
            changes["stock"] = _clean_stock(patch["stock"])
        if "category" in patch:
            changes["category"] = _clean_text(
                "category", patch["category"], MAX_CATEGORY_LENGTH
            )
        if "status" in patch:
            changes["status"] = _clean_status(patch["status"])
        if "thumbnails" in patch:
            changes["thumbnails"] = _clean_thumbnails(patch["thumbnails"] or [])
        return replace(self, **changes)


def normalize_code(code: Any) -> str:
    """Trim and upper-case a product code."""
    return _clean_text("code", code, MAX_CODE_LENGTH).upper()


# ---------------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------------


def _clean_text(name: str, value: Any, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"Product {name} must be a string")
    value = value.strip()
    if not value:
        raise ValidationError(f"Product {name} is required")
    if len(value) > max_length:
        raise ValidationError(
            f"Product {name} cannot exceed {max_length} characters"
        )
    return value


def _clean_stock(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Product stock must be an integer")
    if value < 0:
        raise ValidationError("Product stock cannot be negative")
    return value


def _clean_status(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError("Product status must be a boolean")
    return value


def _clean_thumbnails(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError("Product thumbnails must be a list of strings")
    if not all(isinstance(item, str) for item in value):
        raise ValidationError("Product thumbnails must be a list of strings")
    if len(value) > MAX_THUMBNAILS:
        raise ValidationError(f"A product cannot have more than {MAX_THUMBNAILS} thumbnails")
    return list(value)
