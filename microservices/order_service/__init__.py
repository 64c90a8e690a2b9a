"""
Order Microservice Package

Order repository over a document store: list, get, create, edit, destroy.
"""

from .models import *
from .protocols import OrderNotFoundError, OrderServiceError
from .order_repository import OrderRepository
from .factory import create_order_repository

__all__ = [
    'Order',
    'OrderStatus',
    'PopulatedOrder',
    'Product',
    'OrderCreateRequest',
    'OrderUpdateRequest',
    'OrderListParams',
    'OrderRepository',
    'OrderNotFoundError',
    'OrderServiceError',
    'create_order_repository',
]
