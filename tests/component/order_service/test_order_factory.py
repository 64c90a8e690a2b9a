"""
Order Repository Factory Component Tests

create_order_repository() wiring: injected stores, configured collection
names and the default PostgreSQL store.
"""
import logging

import pytest

from core.config import InfraConfig, LoggingConfig, OrderCollectionConfig, OrderConfig
from core.document_store import PostgresDocumentStore
from microservices.order_service.factory import create_order_repository
from microservices.order_service.order_repository import OrderRepository
from microservices.order_service.schema import build_order_schema, build_product_schema
from tests.component.mocks import MockDocumentStore

pytestmark = [pytest.mark.component, pytest.mark.asyncio]


@pytest.fixture(autouse=True)
def restore_service_logger():
    """Undo the handlers the factory attaches to the service logger"""
    logger = logging.getLogger("microservices.order_service")
    handlers, propagate, level = list(logger.handlers), logger.propagate, logger.level
    yield
    logger.handlers = handlers
    logger.propagate = propagate
    logger.setLevel(level)
    if hasattr(logger, "_service_configured"):
        del logger._service_configured


@pytest.fixture
def order_config():
    return OrderConfig(
        environment="testing",
        infra=InfraConfig(postgres_host="db.internal", postgres_port=6543, document_schema="shop"),
        logging=LoggingConfig(log_level="WARNING"),
        collections=OrderCollectionConfig(orders="shop_orders", products="shop_products", default_page_size=10),
    )


class TestCreateOrderRepository:
    """create_order_repository()"""

    async def test_uses_injected_store(self, order_config):
        store = MockDocumentStore([
            build_order_schema("shop_orders", "shop_products"),
            build_product_schema("shop_products"),
        ])

        repository = create_order_repository(config=order_config, store=store)

        assert isinstance(repository, OrderRepository)
        assert repository.store is store
        assert repository.orders_collection == "shop_orders"
        assert repository.products_collection == "shop_products"
        assert repository.default_page_size == 10

    async def test_order_schema_references_configured_products(self, order_config):
        repository = create_order_repository(config=order_config, store=MockDocumentStore())

        [reference] = repository.order_schema.references
        assert reference.ref == "shop_products"

    async def test_builds_postgres_store_from_config(self, order_config):
        repository = create_order_repository(config=order_config)

        store = repository.store
        assert isinstance(store, PostgresDocumentStore)
        assert store.host == "db.internal"
        assert store.port == 6543
        assert store.schema == "shop"
        assert set(store.schemas) == {"shop_orders", "shop_products"}

    async def test_configures_service_logger(self, order_config):
        create_order_repository(config=order_config, store=MockDocumentStore())

        logger = logging.getLogger("microservices.order_service")
        assert logger.level == logging.WARNING
        assert logger.propagate is False

    async def test_page_size_applies_to_list(self, order_config, order_factory):
        order_config.collections = OrderCollectionConfig(default_page_size=2)
        store = MockDocumentStore()
        products = order_factory.make_product_documents(1)
        store.seed("products", *products)
        repository = create_order_repository(config=order_config, store=store)

        for _ in range(3):
            await repository.create_order(order_factory.make_order_fields([products[0]["id"]]))

        assert len(await repository.list_orders()) == 2
