#!/usr/bin/env python3
"""Order service main configuration

Combines the infrastructure and logging sub-configs with the
order-specific collection settings.
"""
import os
from dataclasses import dataclass, field

from .infra_config import InfraConfig
from .logging_config import LoggingConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


# ===========================================
# Order-Specific Resource Configuration
# ===========================================

@dataclass
class OrderCollectionConfig:
    """Document collection names and paging defaults"""
    orders: str = "orders"
    products: str = "products"
    default_page_size: int = 25

    @classmethod
    def from_env(cls) -> 'OrderCollectionConfig':
        return cls(
            orders=os.getenv("ORDER_COLLECTION", "orders"),
            products=os.getenv("PRODUCT_COLLECTION", "products"),
            default_page_size=_int(os.getenv("ORDER_DEFAULT_PAGE_SIZE", "25"), 25),
        )


# ===========================================
# Main Configuration
# ===========================================

@dataclass
class OrderConfig:
    """Top-level configuration for the order repository"""
    environment: str = "development"
    debug: bool = False

    infra: InfraConfig = field(default_factory=InfraConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    collections: OrderCollectionConfig = field(default_factory=OrderCollectionConfig)

    @property
    def is_production(self) -> bool:
        return self.environment in ("production", "prod")

    @classmethod
    def from_env(cls) -> 'OrderConfig':
        """Load the full configuration from environment variables"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "false")),
            infra=InfraConfig.from_env(),
            logging=LoggingConfig.from_env(),
            collections=OrderCollectionConfig.from_env(),
        )
