"""
Component Test Mocks

Shared mock implementations for component testing.
These mocks replace real I/O dependencies (asyncpg pool, document store).
"""

from .db_mock import MockAsyncpgPool, MockAsyncpgConnection
from .document_store_mock import MockDocumentStore

__all__ = [
    'MockAsyncpgPool',
    'MockAsyncpgConnection',
    'MockDocumentStore',
]
