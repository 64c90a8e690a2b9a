"""
Order Service Factory

Factory functions for creating repository instances with real dependencies.
This is the ONLY place that imports the I/O-dependent document store.

Usage:
    from .factory import create_order_repository

    repository = create_order_repository()
    async with repository:
        order = await repository.get_order(order_id)
"""
from typing import Optional

from core.config import OrderConfig, get_settings
from core.logger import setup_service_logger

from .order_repository import OrderRepository
from .protocols import DocumentStoreProtocol
from .schema import build_order_schema, build_product_schema


def create_order_repository(
    config: Optional[OrderConfig] = None,
    store: Optional[DocumentStoreProtocol] = None,
) -> OrderRepository:
    """
    Create OrderRepository with real dependencies.

    Builds a PostgreSQL document store from config unless a store is
    injected. The returned repository is not connected yet; await
    repository.initialize() or use it as an async context manager.

    Args:
        config: Order configuration (defaults to the global settings)
        store: Document store to use instead of PostgreSQL

    Returns:
        Configured OrderRepository instance
    """
    config = config or get_settings()
    collections = config.collections
    setup_service_logger(__package__, config=config.logging)

    order_schema = build_order_schema(collections.orders, collections.products)
    product_schema = build_product_schema(collections.products)

    if store is None:
        # Import real store here (not at module level)
        from core.document_store import PostgresDocumentStore

        store = PostgresDocumentStore.from_config(config.infra, [order_schema, product_schema])

    return OrderRepository(
        store=store,
        order_schema=order_schema,
        product_schema=product_schema,
        default_page_size=collections.default_page_size,
    )
