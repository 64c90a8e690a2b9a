"""
Document Store on PostgreSQL JSONB

Stores each collection as a table of (id, data JSONB) rows and exposes a
small document-store API: filtered finds with composable sort/skip/limit,
primary key lookups, multi-id fetches for reference resolution, validated
upserts and single-document deletes.

Usage:
    from core.document_store import PostgresDocumentStore

    store = PostgresDocumentStore.from_config(settings.infra, [ORDER_SCHEMA, PRODUCT_SCHEMA])
    async with store:
        orders = await store.find("orders", {"status": "PENDING"}).sort("id").limit(10).to_list()
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import asyncpg

from core.config.infra_config import InfraConfig
from core.document_schema import CollectionSchema, DocumentValidationError

logger = logging.getLogger(__name__)

ASCENDING = 1
DESCENDING = -1

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DocumentStoreError(Exception):
    """Document store misuse (not connected, unknown collection, bad identifier)"""
    pass


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a delete operation"""
    deleted_count: int


def _identifier(name: str) -> str:
    if not _IDENTIFIER.match(name or ""):
        raise DocumentStoreError(f"Invalid identifier: {name!r}")
    return name


def _quote(name: str) -> str:
    return f'"{_identifier(name)}"'


def _affected_rows(status: str) -> int:
    """Parse the row count out of a command tag such as 'DELETE 1'"""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0


async def _init_connection(conn) -> None:
    await conn.set_type_codec(
        "jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
    )


class DocumentCursor:
    """
    Lazy find query.

    sort/skip/limit only record the request; nothing reaches the store
    until to_list() is awaited.
    """

    def __init__(self, store, collection: str, query: Dict[str, Any]):
        self._store = store
        self.collection = collection
        self.filter = query
        self.sort_field: Optional[str] = None
        self.sort_direction = ASCENDING
        self.skip_count = 0
        self.limit_count: Optional[int] = None

    def sort(self, field: str, direction: int = ASCENDING) -> "DocumentCursor":
        if direction not in (ASCENDING, DESCENDING):
            raise ValueError(f"Sort direction must be ASCENDING or DESCENDING, got {direction!r}")
        self.sort_field = field
        self.sort_direction = direction
        return self

    def skip(self, count: int) -> "DocumentCursor":
        if count < 0:
            raise ValueError(f"Skip count must be non-negative, got {count}")
        self.skip_count = count
        return self

    def limit(self, count: int) -> "DocumentCursor":
        if count <= 0:
            raise ValueError(f"Limit must be positive, got {count}")
        self.limit_count = count
        return self

    async def to_list(self) -> List[Dict[str, Any]]:
        return await self._store.fetch(self)


class PostgresDocumentStore:
    """
    Document store backed by PostgreSQL JSONB through an asyncpg pool.

    Only collections whose schema was registered at construction can be
    used; documents are validated against that schema on save and
    reference fields are checked against their target collection.
    """

    def __init__(
        self,
        schemas: Iterable[CollectionSchema],
        host: str = "localhost",
        port: int = 5432,
        database: str = "postgres",
        user: str = "postgres",
        password: str = "postgres",
        schema: str = "documents",
        min_pool_size: int = 1,
        max_pool_size: int = 10,
        command_timeout: float = 30.0,
        pool: Optional[asyncpg.Pool] = None,
    ):
        self.schemas: Dict[str, CollectionSchema] = {s.name: s for s in schemas}
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.schema = _identifier(schema)
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self.command_timeout = command_timeout
        self._pool = pool

    @classmethod
    def from_config(
        cls, config: InfraConfig, schemas: Iterable[CollectionSchema]
    ) -> "PostgresDocumentStore":
        return cls(
            schemas,
            host=config.postgres_host,
            port=config.postgres_port,
            database=config.postgres_db,
            user=config.postgres_user,
            password=config.postgres_password,
            schema=config.document_schema,
            min_pool_size=config.postgres_pool_min_size,
            max_pool_size=config.postgres_pool_max_size,
            command_timeout=config.postgres_command_timeout,
        )

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection pool and make sure every collection exists"""
        if self._pool is None:
            logger.info(f"Connecting to PostgreSQL at {self.host}:{self.port}/{self.database}")
            self._pool = await asyncpg.create_pool(
                host=self.host,
                port=self.port,
                database=self.database,
                user=self.user,
                password=self.password,
                min_size=self.min_pool_size,
                max_size=self.max_pool_size,
                command_timeout=self.command_timeout,
                init=_init_connection,
            )
        await self.ensure_collections()

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL document store closed")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise DocumentStoreError("Document store is not connected")
        return self._pool

    async def ensure_collections(self) -> None:
        """Create the schema, one table per collection and the declared indexes"""
        async with self.pool.acquire() as conn:
            await conn.execute(f"CREATE SCHEMA IF NOT EXISTS {_quote(self.schema)}")
            for collection in self.schemas.values():
                table = self._table(collection.name)
                await conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {table} "
                    f"(id TEXT PRIMARY KEY, data JSONB NOT NULL)"
                )
                if not collection.indexed_fields:
                    continue

                await conn.execute(
                    f"CREATE INDEX IF NOT EXISTS {_quote(collection.name + '_data_gin')} "
                    f"ON {table} USING GIN (data jsonb_path_ops)"
                )
                for spec in collection.indexed_fields:
                    if spec.many or spec.name == collection.primary_key:
                        continue
                    index = _quote(f"{collection.name}_{spec.name}_idx")
                    await conn.execute(
                        f"CREATE INDEX IF NOT EXISTS {index} "
                        f"ON {table} ((data->>'{_identifier(spec.name)}'))"
                    )
        logger.debug(f"Ensured collections {sorted(self.schemas)} in schema {self.schema}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find(self, collection: str, query: Optional[Mapping[str, Any]] = None) -> DocumentCursor:
        """Start a find; list fields match when they contain the filter value"""
        schema = self._schema(collection)
        return DocumentCursor(self, collection, schema.normalize_filter(query))

    async def fetch(self, cursor: DocumentCursor) -> List[Dict[str, Any]]:
        """Execute a composed cursor"""
        schema = self._schema(cursor.collection)
        sql = (
            f"SELECT data FROM {self._table(schema.name)} "
            f"WHERE data @> $1::jsonb "
            f"ORDER BY {self._order_by(schema, cursor)} "
            f"OFFSET $2 LIMIT $3"
        )
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                sql,
                self._containment(schema, cursor.filter),
                cursor.skip_count,
                cursor.limit_count,
            )
        return [row["data"] for row in rows]

    async def find_by_id(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        schema = self._schema(collection)
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT data FROM {self._table(schema.name)} WHERE id = $1", document_id
            )
        return row["data"] if row else None

    async def find_by_ids(self, collection: str, ids: Sequence[str]) -> List[Dict[str, Any]]:
        """Fetch every document whose id is in ids, in no particular order"""
        if not ids:
            return []
        schema = self._schema(collection)
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT data FROM {self._table(schema.name)} WHERE id = ANY($1::text[])",
                list(ids),
            )
        return [row["data"] for row in rows]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def save(self, collection: str, document: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate and upsert a document.

        Returns:
            The persisted document with schema defaults applied

        Raises:
            DocumentValidationError: schema violation or dangling reference
        """
        schema = self._schema(collection)
        document = schema.validate(document)

        async with self.pool.acquire() as conn:
            await self._check_references(conn, schema, document)
            await conn.execute(
                f"INSERT INTO {self._table(schema.name)} (id, data) VALUES ($1, $2::jsonb) "
                f"ON CONFLICT (id) DO UPDATE SET data = EXCLUDED.data",
                document[schema.primary_key],
                document,
            )
        return document

    async def delete_one(self, collection: str, query: Mapping[str, Any]) -> DeleteResult:
        """Delete the first document (by id) matching query"""
        schema = self._schema(collection)
        query = schema.normalize_filter(query)
        table = self._table(schema.name)

        if set(query) == {schema.primary_key}:
            sql = f"DELETE FROM {table} WHERE id = $1"
            args = [query[schema.primary_key]]
        else:
            sql = (
                f"DELETE FROM {table} WHERE id = "
                f"(SELECT id FROM {table} WHERE data @> $1::jsonb ORDER BY id LIMIT 1)"
            )
            args = [self._containment(schema, query)]

        async with self.pool.acquire() as conn:
            status = await conn.execute(sql, *args)
        return DeleteResult(deleted_count=_affected_rows(status))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _schema(self, collection: str) -> CollectionSchema:
        try:
            return self.schemas[collection]
        except KeyError:
            raise DocumentStoreError(f"Unknown collection '{collection}'") from None

    def _table(self, collection: str) -> str:
        return f"{_quote(self.schema)}.{_quote(collection)}"

    @staticmethod
    def _containment(schema: CollectionSchema, query: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            key: [value] if schema.is_list(key) else value
            for key, value in query.items()
        }

    @staticmethod
    def _order_by(schema: CollectionSchema, cursor: DocumentCursor) -> str:
        direction = "DESC" if cursor.sort_direction == DESCENDING else "ASC"
        field = cursor.sort_field or schema.primary_key
        if field == schema.primary_key:
            return f"id {direction}"
        if field not in schema.field_names:
            raise DocumentStoreError(f"Cannot sort {schema.name} on unknown field '{field}'")
        return f"data->>'{_identifier(field)}' {direction}, id ASC"

    async def _check_references(self, conn, schema: CollectionSchema, document: Mapping[str, Any]) -> None:
        for spec in schema.references:
            value = document.get(spec.name)
            if value is None:
                continue
            ids = list(value) if spec.many else [value]
            rows = await conn.fetch(
                f"SELECT id FROM {self._table(spec.ref)} WHERE id = ANY($1::text[])", ids
            )
            found = {row["id"] for row in rows}
            missing = [i for i in ids if i not in found]
            if missing:
                raise DocumentValidationError(
                    schema.name,
                    {spec.name: f"Referenced {spec.ref} not found: {', '.join(missing)}"},
                )
