"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storefront.application.cart_aggregator import CartAggregator
from storefront.application.catalog_query import CatalogQueryEngine
from storefront.application.catalog_service import CatalogService
from storefront.infrastructure.notifications.log_notifier import LoggingNotifier
from storefront.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from storefront.infrastructure.settings import Settings


def product_repository(settings: Settings) -> JsonProductRepository:
    return JsonProductRepository(settings.products_file)


def cart_repository(settings: Settings) -> JsonCartRepository:
    return JsonCartRepository(settings.carts_file)


def query_engine(settings: Settings) -> CatalogQueryEngine:
    return CatalogQueryEngine(
        product_repository(settings), base_path=settings.products_path
    )


def catalog_service(settings: Settings) -> CatalogService:
    return CatalogService(
        product_repository(settings),
        query_engine=query_engine(settings),
        notifier=LoggingNotifier(),
    )


def cart_aggregator(settings: Settings) -> CartAggregator:
    return CartAggregator(cart_repository(settings), catalog_service(settings))
