"""
Unit Test Layer Configuration

Structure:
    tests/unit/
    ├── order_service/   Models and collection schemas
    └── core/            Document schema, config, logger

Usage:
    pytest tests/unit -v                 # All unit tests
    pytest tests/unit -m unit -v         # By marker
"""
import pytest

from core.config import reload_settings


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every configuration variable so from_env() falls back to defaults"""
    for name in (
        "ENV", "ENVIRONMENT", "DEBUG",
        "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB", "POSTGRES_USER", "POSTGRES_PASSWORD",
        "POSTGRES_POOL_MIN_SIZE", "POSTGRES_POOL_MAX_SIZE", "POSTGRES_COMMAND_TIMEOUT",
        "DOCUMENT_SCHEMA", "LOG_LEVEL", "LOG_FORMAT", "LOG_FILE", "SERVICE_NAME",
        "ORDER_COLLECTION", "PRODUCT_COLLECTION", "ORDER_DEFAULT_PAGE_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    monkeypatch.undo()
    reload_settings()
