"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from storefront.domain.exceptions import PersistenceError
from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.json_file import JsonFile, next_numeric_id


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- CartRepository interface ---------------------------------------------

    def create(self) -> Cart:
        with self._file.lock:
            records = self._file.read()
            cart = Cart(id=next_numeric_id(records))
            records.append(self._to_raw(cart))
            self._file.write(records)
        return cart

    def get_by_id(self, cart_id: str) -> Cart | None:
        for raw in self._file.read():
            if str(raw.get("id")) == str(cart_id):
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Cart]:
        return [self._to_domain(raw) for raw in self._file.read()]

    def update(self, cart_id: str, mutate: Callable[[Cart], None]) -> Cart | None:
        # Read, mutate and write under one lock hold so concurrent
        # updates to the same cart apply one after the other.
        with self._file.lock:
            records = self._file.read()
            for i, raw in enumerate(records):
                if str(raw.get("id")) != str(cart_id):
                    continue
                cart = self._to_domain(raw)
                mutate(cart)
                cart.merge_duplicates()
                records[i] = self._to_raw(cart)
                self._file.write(records)
                return cart
        return None

    def delete(self, cart_id: str) -> Cart | None:
        with self._file.lock:
            records = self._file.read()
            for i, raw in enumerate(records):
                if str(raw.get("id")) == str(cart_id):
                    removed = records.pop(i)
                    self._file.write(records)
                    return self._to_domain(removed)
        return None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "id": cart.id,
            "items": [
                {"product_id": item.product_id, "quantity": item.quantity}
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        try:
            return Cart(
                id=str(raw["id"]),
                items=[
                    CartItem(product_id=str(i["product_id"]), quantity=i["quantity"])
                    for i in raw.get("items", [])
                ],
            )
        except KeyError as exc:
            raise PersistenceError(f"Cart record is missing field {exc}") from exc
