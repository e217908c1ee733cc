"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── golden/      Characterization of service behavior, one dir per service
    └── mocks/       Shared HTTP and database mocks

Usage:
    pytest tests/component -v
    pytest tests/component/golden/order_service -v
"""
import pytest

from tests.component.mocks import MockPostgresClient, MockHttpClient


@pytest.fixture
def mock_db() -> MockPostgresClient:
    """Mock PostgreSQL client"""
    return MockPostgresClient()


@pytest.fixture
def mock_http() -> MockHttpClient:
    """Mock httpx.AsyncClient"""
    return MockHttpClient()
