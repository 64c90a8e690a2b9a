#!/usr/bin/env python3
"""Modular configuration system for the order repository

Configuration hierarchy:
- infra_config: Document store endpoint (PostgreSQL through asyncpg)
- logging_config: Logging configuration
- order_config: Collection names, paging defaults, combines the above
"""
import os
from dotenv import load_dotenv
from .logging_config import LoggingConfig
from .infra_config import InfraConfig
from .order_config import OrderConfig, OrderCollectionConfig

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)

# Create global settings instance
settings = OrderConfig.from_env()

def get_settings() -> OrderConfig:
    """Get global settings instance"""
    return settings

def reload_settings() -> OrderConfig:
    """Reload settings from environment"""
    global settings
    settings = OrderConfig.from_env()
    return settings

__all__ = [
    # Main config
    'OrderConfig',
    'get_settings',
    'reload_settings',
    'settings',
    # Sub-configs
    'LoggingConfig',
    'InfraConfig',
    'OrderCollectionConfig',
]
