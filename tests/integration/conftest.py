"""
Integration Test Layer Configuration

Runs the order repository against a real PostgreSQL document store.
Each test gets its own schema, dropped afterwards; tests are skipped when
PostgreSQL is unreachable.

Usage:
    POSTGRES_HOST=localhost pytest tests/integration -v
"""
import dataclasses
import uuid
from typing import AsyncGenerator, Dict, List, Any

import asyncpg
import pytest
import pytest_asyncio

from core.config import InfraConfig
from core.document_store import PostgresDocumentStore
from microservices.order_service.order_repository import OrderRepository
from microservices.order_service.schema import ORDER_SCHEMA, PRODUCT_SCHEMA


@pytest.fixture(scope="session")
def infra_config() -> InfraConfig:
    """Infrastructure config from the test environment"""
    return InfraConfig.from_env()


@pytest_asyncio.fixture(scope="function")
async def document_store(infra_config) -> AsyncGenerator[PostgresDocumentStore, None]:
    """
    PostgreSQL document store in a throwaway schema

    Creates the collections on connect and drops the schema after the test.
    """
    config = dataclasses.replace(infra_config, document_schema=f"orders_it_{uuid.uuid4().hex[:8]}")
    store = PostgresDocumentStore.from_config(config, [ORDER_SCHEMA, PRODUCT_SCHEMA])

    try:
        await store.connect()
    except (OSError, asyncpg.PostgresError) as e:
        await store.close()
        pytest.skip(f"PostgreSQL not available at {config.postgres_host}:{config.postgres_port}: {e}")

    try:
        yield store
    finally:
        async with store.pool.acquire() as conn:
            await conn.execute(f'DROP SCHEMA IF EXISTS "{store.schema}" CASCADE')
        await store.close()


@pytest_asyncio.fixture(scope="function")
async def stored_products(document_store, order_factory) -> List[Dict[str, Any]]:
    """Three products saved in the products collection"""
    products = order_factory.make_product_documents(3)
    for product in products:
        await document_store.save(PRODUCT_SCHEMA.name, product)
    return products


@pytest.fixture
def order_repository(document_store) -> OrderRepository:
    return OrderRepository(store=document_store)
