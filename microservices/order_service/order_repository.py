"""
Order Repository

Data access layer for orders kept in a document store. Orders reference
products by ID; get/create/edit resolve those references, list does not.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel

from core.document_schema import CollectionSchema, DocumentValidationError
from core.document_store import ASCENDING

from .models import (
    Order, OrderCreateRequest, OrderListParams, OrderStatus,
    OrderUpdateRequest, PopulatedOrder, Product
)
from .protocols import DocumentStoreProtocol, OrderNotFoundError
from .schema import ORDER_SCHEMA, PRODUCT_SCHEMA

logger = logging.getLogger(__name__)

# Python field names accepted in place of document keys
_FIELD_ALIASES = {
    name: info.alias for name, info in Order.model_fields.items() if info.alias
}


def _coerce_product_ids(products: Any) -> Any:
    """Reduce product references (IDs, Product models, mappings) to plain IDs"""
    if isinstance(products, (str, Product, Mapping)):
        products = [products]
    if not isinstance(products, (list, tuple)):
        return products

    ids = []
    for product in products:
        if isinstance(product, Product):
            ids.append(product.id)
        elif isinstance(product, Mapping):
            ids.append(product.get("id"))
        else:
            ids.append(product)
    return ids


class OrderRepository:
    """
    Repository for order data operations

    Stateless apart from the injected store and the frozen schemas.
    """

    def __init__(
        self,
        store: DocumentStoreProtocol,
        order_schema: CollectionSchema = ORDER_SCHEMA,
        product_schema: CollectionSchema = PRODUCT_SCHEMA,
        default_page_size: int = 25,
    ):
        """Initialize Order Repository with a document store"""
        self.store = store
        self.order_schema = order_schema
        self.product_schema = product_schema
        self.orders_collection = order_schema.name
        self.products_collection = product_schema.name
        self.default_page_size = default_page_size

        logger.info(f"OrderRepository initialized for collection '{self.orders_collection}'")

    async def initialize(self):
        """Connect the underlying store when it needs connecting"""
        connect = getattr(self.store, "connect", None)
        if connect is not None:
            await connect()

    async def close(self):
        close = getattr(self.store, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def list_orders(
        self,
        offset: int = 0,
        limit: Optional[int] = None,
        product_id: Optional[str] = None,
        status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """
        List orders sorted by ascending ID.

        Products stay as raw IDs; nothing is resolved here.

        Args:
            offset: Number of orders to skip
            limit: Maximum number of orders to return (default page size when omitted)
            product_id: Only orders whose products include this ID
            status: Only orders with exactly this status

        Returns:
            Page of orders
        """
        params = OrderListParams(
            offset=offset,
            limit=limit if limit is not None else self.default_page_size,
            # blank filters mean "no filter"
            product_id=product_id or None,
            status=status or None,
        )
        query = self._build_filter(params.product_id, params.status)

        try:
            documents = await (
                self.store.find(self.orders_collection, query)
                .sort("id", ASCENDING)
                .skip(params.offset)
                .limit(params.limit)
                .to_list()
            )
        except Exception as e:
            logger.error(f"Failed to list orders: {e}")
            raise

        return [Order(**document) for document in documents]

    async def get_order(self, order_id: str) -> Optional[PopulatedOrder]:
        """Get order by ID with products resolved; None when it does not exist"""
        try:
            document = await self.store.find_by_id(self.orders_collection, order_id)
        except Exception as e:
            logger.error(f"Failed to get order {order_id}: {e}")
            raise

        if document is None:
            return None
        return await self._populate(document)

    async def create_order(
        self, fields: Union[OrderCreateRequest, Mapping[str, Any]]
    ) -> PopulatedOrder:
        """
        Create a new order.

        The store applies the schema defaults (ID, CREATED status) and
        rejects invalid documents with DocumentValidationError.
        """
        document = self._to_document(fields)

        try:
            saved = await self.store.save(self.orders_collection, document)
        except Exception as e:
            logger.error(f"Failed to create order: {e}")
            raise

        logger.info(f"Created order {saved['id']}")
        return await self._populate(saved)

    async def edit_order(
        self, order_id: str, change: Union[OrderUpdateRequest, Mapping[str, Any]]
    ) -> PopulatedOrder:
        """
        Overwrite the fields present in change and persist the order.

        Products in change are reduced to IDs before saving, so passing back
        a previously resolved order never stores product documents. An
        explicit None is kept as a value and fails validation; creation
        defaults are never reapplied to an existing order.

        Raises:
            OrderNotFoundError: no order has order_id
            DocumentValidationError: the updated order is invalid or the
                change tries to alter the ID
        """
        try:
            document = await self.store.find_by_id(self.orders_collection, order_id)
        except Exception as e:
            logger.error(f"Failed to load order {order_id} for edit: {e}")
            raise

        if document is None:
            raise OrderNotFoundError(order_id)

        updates = self._to_document(change)
        new_id = updates.pop("id", order_id)
        if new_id != order_id:
            raise DocumentValidationError(
                self.orders_collection, {"id": "Path `id` is immutable"}
            )
        document.update(updates)

        try:
            saved = await self.store.save(self.orders_collection, document)
        except Exception as e:
            logger.error(f"Failed to update order {order_id}: {e}")
            raise

        logger.info(f"Updated order {order_id}: {sorted(updates)}")
        return await self._populate(saved)

    async def destroy_order(self, order_id: str) -> None:
        """Hard-delete an order; OrderNotFoundError when nothing was deleted"""
        try:
            result = await self.store.delete_one(self.orders_collection, {"id": order_id})
        except Exception as e:
            logger.error(f"Failed to delete order {order_id}: {e}")
            raise

        if result.deleted_count == 0:
            raise OrderNotFoundError(order_id)

        logger.info(f"Deleted order {order_id}")

    async def resolve_references(self, product_ids: Sequence[str]) -> List[Product]:
        """
        Resolve product IDs into products, keeping the order of product_ids.

        IDs without a product document are dropped.
        """
        ids = list(product_ids)
        if not ids:
            return []

        try:
            documents = await self.store.find_by_ids(
                self.products_collection, list(dict.fromkeys(ids))
            )
        except Exception as e:
            logger.error(f"Failed to resolve products {ids}: {e}")
            raise

        by_id = {document["id"]: document for document in documents}
        missing = [product_id for product_id in ids if product_id not in by_id]
        if missing:
            logger.warning(f"Dropping unresolved product references: {missing}")

        return [Product(**by_id[product_id]) for product_id in ids if product_id in by_id]

    # Helpers

    async def _populate(self, document: Mapping[str, Any]) -> PopulatedOrder:
        products = await self.resolve_references(document.get("products") or [])
        return PopulatedOrder(**{**document, "products": products})

    @staticmethod
    def _build_filter(
        product_id: Optional[str], status: Optional[OrderStatus]
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if product_id:
            query["products"] = product_id
        if status:
            query["status"] = OrderStatus(status).value
        return query

    @staticmethod
    def _to_document(fields: Union[BaseModel, Mapping[str, Any]]) -> Dict[str, Any]:
        """Convert request models or mappings into document keys"""
        if isinstance(fields, BaseModel):
            data = fields.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
        else:
            data = dict(fields)

        document = {}
        for key, value in data.items():
            key = _FIELD_ALIASES.get(key, key)
            if key == "products" and value is not None:
                value = _coerce_product_ids(value)
            document[key] = value
        return document

    # Short names
    list = list_orders
    get = get_order
    create = create_order
    edit = edit_order
    destroy = destroy_order
