"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal, InvalidOperation
from pathlib import Path

from storefront.domain.exceptions import (
    DuplicateCodeError,
    InsufficientStockError,
    PersistenceError,
)
from storefront.domain.model.listing import (
    ProductCriteria,
    ProductPage,
    SortOrder,
    paginate,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service import stock_ledger
from storefront.infrastructure.persistence.json_file import JsonFile, next_numeric_id


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._file.read():
            if str(raw.get("id")) == str(product_id):
                return self._to_domain(raw)
        return None

    def get_by_code(self, code: str) -> Product | None:
        for raw in self._file.read():
            if raw.get("code") == code:
                return self._to_domain(raw)
        return None

    def find(
        self,
        criteria: ProductCriteria,
        sort: SortOrder | None,
        page: int,
        limit: int,
    ) -> ProductPage:
        products = [self._to_domain(raw) for raw in self._file.read()]
        return paginate(products, criteria, sort, page, limit)

    def add(self, product: Product) -> Product:
        with self._file.lock:
            records = self._file.read()
            if any(raw.get("code") == product.code for raw in records):
                raise DuplicateCodeError(product.code)
            stored = replace(product, id=next_numeric_id(records))
            records.append(self._to_raw(stored))
            self._file.write(records)
        return stored

    def save(self, product: Product) -> None:
        with self._file.lock:
            records = self._file.read()
            for i, raw in enumerate(records):
                if str(raw.get("id")) == product.id:
                    records[i] = self._to_raw(product)
                    break
            else:
                records.append(self._to_raw(product))
            self._file.write(records)

    def delete(self, product_id: str) -> Product | None:
        with self._file.lock:
            records = self._file.read()
            for i, raw in enumerate(records):
                if str(raw.get("id")) == str(product_id):
                    removed = records.pop(i)
                    self._file.write(records)
                    return self._to_domain(removed)
        return None

    def reduce_stock(self, product_id: str, quantity: int) -> Product | None:
        # Check and write under the file lock: two concurrent reductions
        # can never both pass the stock check.
        with self._file.lock:
            records = self._file.read()
            for i, raw in enumerate(records):
                if str(raw.get("id")) != str(product_id):
                    continue
                try:
                    updated = stock_ledger.reduce(self._to_domain(raw), quantity)
                except InsufficientStockError:
                    return None
                records[i] = self._to_raw(updated)
                self._file.write(records)
                return updated
        return None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "title": product.title,
            "description": product.description,
            "code": product.code,
            "price": str(product.price.amount),
            "status": product.status,
            "stock": product.stock,
            "category": product.category,
            "thumbnails": list(product.thumbnails),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        try:
            return Product(
                id=str(raw["id"]),
                title=raw["title"],
                description=raw["description"],
                code=raw["code"],
                price=Money(Decimal(str(raw["price"]))),
                stock=raw["stock"],
                category=raw["category"],
                status=raw.get("status", True),
                thumbnails=list(raw.get("thumbnails", [])),
            )
        except KeyError as exc:
            raise PersistenceError(f"Product record is missing field {exc}") from exc
        except InvalidOperation as exc:
            raise PersistenceError(f"Product record has a bad price: {raw.get('price')!r}") from exc
