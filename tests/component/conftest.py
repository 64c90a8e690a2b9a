"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── order_service/   Repository against MockDocumentStore
    ├── core/            PostgresDocumentStore against MockAsyncpgPool
    └── mocks/           Mock implementations

Usage:
    pytest tests/component -v
"""
import pytest

from core.document_store import PostgresDocumentStore
from microservices.order_service.order_repository import OrderRepository
from microservices.order_service.schema import ORDER_SCHEMA, PRODUCT_SCHEMA
from tests.component.mocks import MockAsyncpgPool, MockDocumentStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def product_documents(order_factory):
    """Three product documents"""
    return order_factory.make_product_documents(3)


@pytest.fixture
def product_ids(product_documents):
    return [p["id"] for p in product_documents]


@pytest.fixture
def mock_store(product_documents):
    """MockDocumentStore seeded with products"""
    store = MockDocumentStore()
    store.seed(PRODUCT_SCHEMA.name, *product_documents)
    return store


@pytest.fixture
def order_repository(mock_store):
    """OrderRepository over the mock store"""
    return OrderRepository(store=mock_store)


@pytest.fixture
def mock_pool():
    """Fresh MockAsyncpgPool"""
    return MockAsyncpgPool()


@pytest.fixture
def postgres_store(mock_pool):
    """PostgresDocumentStore wired to the mock pool"""
    return PostgresDocumentStore([ORDER_SCHEMA, PRODUCT_SCHEMA], pool=mock_pool)
