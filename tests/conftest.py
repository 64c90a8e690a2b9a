"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - integration/: Repository against a real PostgreSQL document store
    - component/  : Repository and store with mocked dependencies
    - unit/       : Pure models, schemas, config (no I/O)
"""
import os
import sys

import pytest

# Set testing environment BEFORE any project imports
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("ENVIRONMENT", "testing")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.contracts.order.data_contract import OrderTestDataFactory


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line("markers", "unit: pure unit tests, no I/O")
    config.addinivalue_line("markers", "component: tests with mocked dependencies")
    config.addinivalue_line("markers", "integration: tests against a real PostgreSQL")


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def order_factory() -> OrderTestDataFactory:
    """Order test data factory"""
    return OrderTestDataFactory()
