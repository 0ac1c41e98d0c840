"""Tests for the CartAggregator use cases."""

from decimal import Decimal

import pytest

from storefront.application.cart_aggregator import CartAggregator
from storefront.application.catalog_service import CatalogService
from storefront.application.dto import CartItemSpec
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ItemNotInCartError,
    ProductUnavailableError,
    ValidationError,
)
from storefront.domain.model.cart import Cart, CartItem
from tests.fakes import FakeCartRepository, FakeProductRepository, make_product


def _setup(products=None, carts=None):
    product_repo = FakeProductRepository(
        products
        if products is not None
        else [
            make_product("1", title="Headphones", price="10.00", stock=5),
            make_product("2", title="Speaker", price="20.00", stock=3),
            make_product("3", title="Old cable", price="2.00", stock=9, status=False),
            make_product("4", title="Sold out", price="5.00", stock=0),
        ]
    )
    cart_repo = FakeCartRepository(carts if carts is not None else [Cart(id="1")])
    catalog = CatalogService(product_repo)
    return CartAggregator(cart_repo, catalog), cart_repo, catalog


def _quantities(cart_repo, cart_id="1"):
    return [(item.product_id, item.quantity) for item in cart_repo.raw_items(cart_id)]


class TestCreateAndRead:

    def test_create_cart_is_empty(self):
        agg, cart_repo, _ = _setup(carts=[])
        dto = agg.create_cart()
        assert dto.id == "1"
        assert dto.items == []
        assert cart_repo.get_by_id("1") is not None

    def test_get_missing_cart(self):
        agg, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Cart '9' not found"):
            agg.get_cart("9")

    def test_populated_lines_carry_product_snapshot(self):
        agg, _, _ = _setup()
        dto = agg.add_item("1", "2", 2)
        line = dto.items[0]
        assert (line.product_id, line.quantity) == ("2", 2)
        assert line.product.title == "Speaker"
        assert line.product.price == "20.00"

    def test_list_and_delete(self):
        agg, cart_repo, _ = _setup(carts=[Cart(id="1"), Cart(id="2")])
        assert [c.id for c in agg.list_carts()] == ["1", "2"]

        removed = agg.delete_cart("1")
        assert removed.id == "1"
        assert cart_repo.get_by_id("1") is None
        with pytest.raises(EntityNotFoundError):
            agg.delete_cart("1")


class TestAddItem:

    def test_add_then_add_again_merges(self):
        agg, cart_repo, _ = _setup()
        agg.add_item("1", "1", 2)
        agg.add_item("1", "1", 3)
        assert _quantities(cart_repo) == [("1", 5)]

    def test_second_add_over_stock_fails_and_cart_unchanged(self):
        agg, cart_repo, _ = _setup()
        agg.add_item("1", "1", 3)

        with pytest.raises(InsufficientStockError) as info:
            agg.add_item("1", "1", 3)

        assert (info.value.available, info.value.requested) == (5, 6)
        assert _quantities(cart_repo) == [("1", 3)]

    def test_default_quantity_is_one(self):
        agg, cart_repo, _ = _setup()
        agg.add_item("1", "2")
        assert _quantities(cart_repo) == [("2", 1)]

    def test_missing_product(self):
        agg, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Product '99' not found"):
            agg.add_item("1", "99")

    def test_disabled_product(self):
        agg, _, _ = _setup()
        with pytest.raises(ProductUnavailableError, match="Old cable"):
            agg.add_item("1", "3")

    def test_out_of_stock_product(self):
        agg, _, _ = _setup()
        with pytest.raises(ProductUnavailableError):
            agg.add_item("1", "4")

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2"])
    def test_bad_quantity(self, quantity):
        agg, cart_repo, _ = _setup()
        with pytest.raises(ValidationError):
            agg.add_item("1", "1", quantity)
        assert cart_repo.saves == 0

    def test_missing_cart(self):
        agg, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Cart"):
            agg.add_item("9", "1")

    def test_total_grows_by_line_value(self):
        agg, _, _ = _setup()
        agg.add_item("1", "1", 1)
        before = Decimal(agg.compute_total("1").total)
        agg.add_item("1", "2", 2)
        after = Decimal(agg.compute_total("1").total)
        assert after - before == Decimal("40.00")


class TestRemoveAndUpdate:

    def test_remove_item(self):
        agg, cart_repo, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 2), CartItem("2", 1)])])
        agg.remove_item("1", "1")
        assert _quantities(cart_repo) == [("2", 1)]

    def test_remove_absent_item_is_noop(self):
        agg, cart_repo, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 2)])])
        dto = agg.remove_item("1", "2")
        assert [line.product_id for line in dto.items] == ["1"]
        assert _quantities(cart_repo) == [("1", 2)]

    def test_update_sets_absolute_quantity(self):
        agg, cart_repo, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 2)])])
        agg.update_item_quantity("1", "1", 4)
        assert _quantities(cart_repo) == [("1", 4)]

    def test_update_checks_absolute_not_incremental(self):
        agg, cart_repo, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 4)])])
        agg.update_item_quantity("1", "1", 5)
        assert _quantities(cart_repo) == [("1", 5)]

        with pytest.raises(InsufficientStockError) as info:
            agg.update_item_quantity("1", "1", 6)
        assert (info.value.available, info.value.requested) == (5, 6)

    def test_update_to_zero_equals_remove(self):
        items = [CartItem("1", 2), CartItem("2", 1)]
        updated, updated_repo, _ = _setup(carts=[Cart(id="1", items=list(items))])
        removed, removed_repo, _ = _setup(carts=[Cart(id="1", items=list(items))])

        assert updated.update_item_quantity("1", "1", 0) == removed.remove_item("1", "1")
        assert _quantities(updated_repo) == _quantities(removed_repo)

    def test_update_negative_removes_even_deleted_product(self):
        agg, cart_repo, _ = _setup(carts=[Cart(id="1", items=[CartItem("gone", 2)])])
        agg.update_item_quantity("1", "gone", -1)
        assert _quantities(cart_repo) == []

    def test_update_item_not_in_cart(self):
        agg, _, _ = _setup()
        with pytest.raises(ItemNotInCartError):
            agg.update_item_quantity("1", "1", 2)

    def test_update_unavailable_product(self):
        agg, _, _ = _setup(carts=[Cart(id="1", items=[CartItem("3", 1)])])
        with pytest.raises(ProductUnavailableError):
            agg.update_item_quantity("1", "3", 2)

    def test_update_non_integer_rejected(self):
        agg, _, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 1)])])
        with pytest.raises(ValidationError):
            agg.update_item_quantity("1", "1", "2")


class TestReplaceItems:

    def test_replace_swaps_contents(self):
        agg, cart_repo, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 1)])])
        agg.replace_items("1", [CartItemSpec("2", 3), {"product": "1", "quantity": 2}])
        assert _quantities(cart_repo) == [("2", 3), ("1", 2)]

    def test_duplicates_in_input_are_merged(self):
        agg, cart_repo, _ = _setup()
        agg.replace_items("1", [
            {"product_id": "1", "quantity": 1},
            {"product_id": "2", "quantity": 1},
            {"product_id": "1", "quantity": 2},
        ])
        assert _quantities(cart_repo) == [("1", 3), ("2", 1)]

    def test_merged_duplicates_over_stock_rejected(self):
        agg, _, _ = _setup()
        with pytest.raises(InsufficientStockError):
            agg.replace_items("1", [CartItemSpec("2", 2), CartItemSpec("2", 2)])

    def test_first_bad_item_reported_and_nothing_written(self):
        agg, cart_repo, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 1)])])

        with pytest.raises(InsufficientStockError) as info:
            agg.replace_items("1", [CartItemSpec("1", 2), CartItemSpec("2", 7)])

        assert info.value.product_title == "Speaker"
        assert (info.value.requested, info.value.available) == (7, 3)
        assert "Speaker" in str(info.value)
        assert _quantities(cart_repo) == [("1", 1)]
        assert cart_repo.saves == 0

    @pytest.mark.parametrize(
        "bad",
        [
            {"quantity": 1},
            {"product": "1"},
            {"product": "1", "quantity": 0},
            {"product": "1", "quantity": 1.5},
            {"product": "1", "quantity": True},
            "1:2",
        ],
    )
    def test_malformed_rows_rejected(self, bad):
        agg, cart_repo, _ = _setup()
        with pytest.raises(ValidationError):
            agg.replace_items("1", [CartItemSpec("1", 1), bad])
        assert cart_repo.saves == 0

    @pytest.mark.parametrize("items", [None, 5, "1:2", {"product": "1", "quantity": 1}])
    def test_items_must_be_a_list(self, items):
        agg, cart_repo, _ = _setup()
        with pytest.raises(ValidationError, match="must be a list"):
            agg.replace_items("1", items)
        assert cart_repo.saves == 0

    def test_unknown_product_rejected(self):
        agg, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            agg.replace_items("1", [CartItemSpec("99", 1)])

    def test_unavailable_product_rejected(self):
        agg, _, _ = _setup()
        with pytest.raises(ProductUnavailableError):
            agg.replace_items("1", [CartItemSpec("4", 1)])

    def test_replace_with_nothing_empties_cart(self):
        agg, cart_repo, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 1)])])
        agg.replace_items("1", [])
        assert _quantities(cart_repo) == []


class TestClear:

    def test_clear(self):
        agg, cart_repo, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 1), CartItem("2", 1)])])
        assert agg.clear("1").items == []
        assert _quantities(cart_repo) == []


class TestMergeOnPersist:

    def test_stored_duplicates_collapse_on_next_write(self):
        agg, cart_repo, _ = _setup(
            carts=[Cart(id="1", items=[CartItem("1", 1), CartItem("2", 1), CartItem("1", 2)])]
        )
        agg.add_item("1", "2", 1)
        assert _quantities(cart_repo) == [("1", 3), ("2", 2)]

    def test_no_duplicate_rows_after_any_sequence(self):
        agg, cart_repo, _ = _setup()
        agg.add_item("1", "1", 1)
        agg.add_item("1", "2", 1)
        agg.add_item("1", "1", 1)
        agg.replace_items("1", [CartItemSpec("2", 1), CartItemSpec("1", 1), CartItemSpec("2", 1)])
        agg.add_item("1", "1", 1)

        ids = [pid for pid, _ in _quantities(cart_repo)]
        assert len(ids) == len(set(ids))


class TestTotalsAndDanglingProducts:

    def test_total(self):
        agg, _, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 2), CartItem("2", 1)])])
        totals = agg.compute_total("1")
        assert Decimal(totals.total) == Decimal("40.00")
        assert totals.total_item_count == 3
        assert totals.unique_item_count == 2

    def test_empty_cart_total(self):
        agg, _, _ = _setup()
        assert Decimal(agg.compute_total("1").total) == 0

    def test_deleted_product_stays_in_cart_but_not_in_total(self):
        agg, _, catalog = _setup(carts=[Cart(id="1", items=[CartItem("1", 2), CartItem("2", 1)])])
        catalog.delete("2")

        dto = agg.get_cart("1")
        assert [line.product_id for line in dto.items] == ["1", "2"]
        assert dto.items[1].product is None

        totals = agg.compute_total("1")
        assert Decimal(totals.total) == Decimal("20.00")
        assert totals.unique_item_count == 2
        assert totals.total_item_count == 3


class TestValidateAvailability:

    def test_valid_cart(self):
        agg, _, _ = _setup(carts=[Cart(id="1", items=[CartItem("1", 5)])])
        report = agg.validate_availability("1")
        assert report.is_valid is True
        assert report.unavailable_items == []

    def test_reports_each_problem(self):
        agg, _, catalog = _setup(
            carts=[Cart(id="1", items=[
                CartItem("1", 2),
                CartItem("2", 2),
                CartItem("3", 1),
                CartItem("5", 1),
            ])]
        )
        catalog.reduce_stock("2", 2)

        report = agg.validate_availability("1")
        assert report.is_valid is False
        rows = [(u.product_id, u.product_title, u.requested, u.available, u.status)
                for u in report.unavailable_items]
        assert rows == [
            ("2", "Speaker", 2, 1, True),
            ("3", "Old cable", 1, 9, False),
            ("5", None, 1, 0, False),
        ]
