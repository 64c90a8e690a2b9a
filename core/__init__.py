#!/usr/bin/env python3
"""
Core Module

Shared infrastructure for the order repository.

COMPONENTS:
    - config/: Environment-driven configuration (dotenv + dataclasses)
    - logger.py: Service logger setup
    - document_schema.py: Frozen collection/field declarations and validation
    - document_store.py: PostgreSQL JSONB document store (asyncpg)

USAGE:
    from core.config import get_settings
    from core.logger import setup_service_logger

    settings = get_settings()
    logger = setup_service_logger(settings.logging.service_name)
"""

__version__ = "1.0.0"
