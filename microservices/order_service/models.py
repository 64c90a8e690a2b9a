"""
Order Service Data Models

Pydantic models for orders, the products they reference, and the
request/parameter shapes accepted by the repository. Order and Product
double as the document models the store validates on save.
"""

import time
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Union
from enum import Enum


def generate_order_id() -> str:
    """Time-prefixed order ID; lexical order follows creation order"""
    return f"ord_{time.time_ns():016x}{uuid.uuid4().hex[:8]}"


class OrderStatus(str, Enum):
    """Order status enumeration"""
    CREATED = "CREATED"
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


# Referenced Models

class Product(BaseModel):
    """Product document; owned elsewhere, so unknown fields are kept"""
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    name: Optional[str] = None
    price: Optional[Union[int, float]] = None
    description: Optional[str] = None


# Core Order Models

class Order(BaseModel):
    """Order document of record; products holds identifiers only"""
    model_config = ConfigDict(populate_by_name=True, extra="forbid", str_strip_whitespace=True)

    id: str = Field(default_factory=generate_order_id, min_length=1)
    buyer_email: str = Field(..., alias="buyerEmail", min_length=1)
    products: List[str] = Field(..., min_length=1)
    status: OrderStatus = OrderStatus.CREATED


class PopulatedOrder(BaseModel):
    """Order with its product references resolved"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    buyer_email: str = Field(..., alias="buyerEmail")
    products: List[Product] = []
    status: OrderStatus = OrderStatus.CREATED

    @property
    def product_ids(self) -> List[str]:
        return [product.id for product in self.products]


# Request Models

class OrderCreateRequest(BaseModel):
    """Create order request"""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, description="Order ID, generated when omitted")
    buyer_email: str = Field(..., alias="buyerEmail", min_length=1, description="Buyer e-mail address")
    products: List[str] = Field(..., min_length=1, description="Referenced product IDs")
    status: Optional[OrderStatus] = Field(None, description="Initial status, defaults to CREATED")

    @field_validator('buyer_email')
    @classmethod
    def validate_buyer_email(cls, v):
        if not v.strip():
            raise ValueError('buyerEmail cannot be blank')
        return v.strip()


class OrderUpdateRequest(BaseModel):
    """Partial order update; only fields that were set are applied"""
    model_config = ConfigDict(populate_by_name=True)

    buyer_email: Optional[str] = Field(None, alias="buyerEmail")
    products: Optional[List[Union[str, Product]]] = Field(None, min_length=1)
    status: Optional[OrderStatus] = None


# Query Models

class OrderListParams(BaseModel):
    """Order list paging and filtering parameters"""
    model_config = ConfigDict(populate_by_name=True)

    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=25, gt=0)
    product_id: Optional[str] = Field(None, alias="productId")
    status: Optional[OrderStatus] = None
