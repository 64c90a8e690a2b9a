"""
Order Service Contracts

Test data for order_service testing.
"""

from .data_contract import OrderTestDataFactory

__all__ = [
    "OrderTestDataFactory",
]
