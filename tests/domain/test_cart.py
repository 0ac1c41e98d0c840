"""Unit tests for the Cart aggregate."""

import pytest

from storefront.domain.exceptions import ItemNotInCartError
from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.value_objects import Quantity


class TestCartAdd:

    def test_new_product_appends_row(self):
        cart = Cart(id="1")
        cart.add("p1", Quantity(2))
        assert cart.items == [CartItem("p1", 2)]

    def test_same_product_accumulates(self):
        cart = Cart(id="1")
        cart.add("p1", Quantity(2))
        cart.add("p1", Quantity(3))
        assert cart.items == [CartItem("p1", 5)]

    def test_quantity_of_missing_product_is_zero(self):
        assert Cart(id="1").quantity_of("p1") == 0


class TestCartRemoveAndSet:

    def test_remove_absent_is_noop(self):
        cart = Cart(id="1", items=[CartItem("p1", 1)])
        cart.remove("p2")
        assert cart.items == [CartItem("p1", 1)]

    def test_set_quantity_replaces_value(self):
        cart = Cart(id="1", items=[CartItem("p1", 4)])
        cart.set_quantity("p1", Quantity(1))
        assert cart.quantity_of("p1") == 1

    def test_set_quantity_on_missing_row_rejected(self):
        cart = Cart(id="1")
        with pytest.raises(ItemNotInCartError, match="not in cart"):
            cart.set_quantity("p1", Quantity(1))

    def test_clear(self):
        cart = Cart(id="1", items=[CartItem("p1", 4), CartItem("p2", 1)])
        cart.clear()
        assert cart.items == []


class TestMergeDuplicates:

    def test_sums_and_keeps_first_seen_order(self):
        cart = Cart(
            id="1",
            items=[
                CartItem("b", 1),
                CartItem("a", 2),
                CartItem("b", 3),
                CartItem("c", 1),
                CartItem("a", 1),
            ],
        )
        cart.merge_duplicates()
        assert cart.items == [CartItem("b", 4), CartItem("a", 3), CartItem("c", 1)]

    def test_no_duplicates_is_unchanged(self):
        cart = Cart(id="1", items=[CartItem("a", 1), CartItem("b", 2)])
        cart.merge_duplicates()
        assert cart.items == [CartItem("a", 1), CartItem("b", 2)]

    def test_counts(self):
        cart = Cart(id="1", items=[CartItem("a", 2), CartItem("b", 3)])
        assert cart.total_item_count == 5
        assert cart.unique_item_count == 2
