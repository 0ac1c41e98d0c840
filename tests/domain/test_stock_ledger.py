"""Unit tests for the stock ledger functions."""

import pytest

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.service import stock_ledger
from tests.fakes import make_product


class TestAvailability:

    def test_active_with_stock_is_available(self):
        assert stock_ledger.is_available(make_product(stock=1))

    def test_disabled_is_unavailable(self):
        assert not stock_ledger.is_available(make_product(status=False))

    def test_out_of_stock_is_unavailable(self):
        assert not stock_ledger.is_available(make_product(stock=0))

    def test_can_reserve_up_to_stock(self):
        product = make_product(stock=5)
        assert stock_ledger.can_reserve(product, 5)
        assert not stock_ledger.can_reserve(product, 6)

    def test_cannot_reserve_disabled_product(self):
        assert not stock_ledger.can_reserve(make_product(stock=5, status=False), 1)


class TestReduce:

    def test_reduce_returns_updated_copy(self):
        product = make_product(stock=5)
        updated = stock_ledger.reduce(product, 5)
        assert updated.stock == 0
        assert product.stock == 5

    def test_reduce_beyond_stock_rejected(self):
        product = make_product(stock=0)
        with pytest.raises(InsufficientStockError) as info:
            stock_ledger.reduce(product, 1)
        assert info.value.available == 0
        assert info.value.requested == 1
        assert product.stock == 0

    def test_reduce_zero_rejected(self):
        with pytest.raises(ValidationError, match="positive integer"):
            stock_ledger.reduce(make_product(stock=5), 0)
