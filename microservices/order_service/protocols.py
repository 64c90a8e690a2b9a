"""
Order Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union, runtime_checkable

# Import only models (no I/O dependencies)
from .models import (
    Order, OrderCreateRequest, OrderStatus, OrderUpdateRequest, PopulatedOrder, Product
)


# ============================================================================
# Custom Exceptions - defined here to avoid importing repository
# ============================================================================

class OrderServiceError(Exception):
    """Base exception for order service errors"""
    pass


class OrderNotFoundError(OrderServiceError):
    """No order document has the requested ID"""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order with ID {order_id} not found")


# ============================================================================
# Document Store Protocol
# ============================================================================

@runtime_checkable
class DocumentCursorProtocol(Protocol):
    """Lazy find query composed before execution"""

    def sort(self, field: str, direction: int = 1) -> "DocumentCursorProtocol":
        ...

    def skip(self, count: int) -> "DocumentCursorProtocol":
        ...

    def limit(self, count: int) -> "DocumentCursorProtocol":
        ...

    async def to_list(self) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class DocumentStoreProtocol(Protocol):
    """
    Interface for the document store collaborator.

    Implementations validate documents on save (raising
    DocumentValidationError) and report deletions through a result
    carrying deleted_count.
    """

    def find(
        self, collection: str, query: Optional[Mapping[str, Any]] = None
    ) -> DocumentCursorProtocol:
        """Filtered find; list fields match when they contain the value"""
        ...

    async def find_by_id(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        """Get document by primary key"""
        ...

    async def find_by_ids(self, collection: str, ids: Sequence[str]) -> List[Dict[str, Any]]:
        """Get every document whose ID is listed"""
        ...

    async def save(self, collection: str, document: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert or overwrite a document"""
        ...

    async def delete_one(self, collection: str, query: Mapping[str, Any]) -> Any:
        """Delete one matching document"""
        ...


# ============================================================================
# Repository Protocol
# ============================================================================

@runtime_checkable
class OrderRepositoryProtocol(Protocol):
    """
    Interface for Order Repository.

    Implementations must provide these methods.
    Used for dependency injection to enable testing.
    """

    async def list_orders(
        self,
        offset: int = 0,
        limit: int = 25,
        product_id: Optional[str] = None,
        status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """List orders with filtering, unpopulated"""
        ...

    async def get_order(self, order_id: str) -> Optional[PopulatedOrder]:
        """Get order by ID with products resolved"""
        ...

    async def create_order(
        self, fields: Union[OrderCreateRequest, Mapping[str, Any]]
    ) -> PopulatedOrder:
        """Create a new order"""
        ...

    async def edit_order(
        self, order_id: str, change: Union[OrderUpdateRequest, Mapping[str, Any]]
    ) -> PopulatedOrder:
        """Overwrite fields of an existing order"""
        ...

    async def destroy_order(self, order_id: str) -> None:
        """Delete an order"""
        ...

    async def resolve_references(self, product_ids: Sequence[str]) -> List[Product]:
        """Resolve product IDs into product documents"""
        ...
