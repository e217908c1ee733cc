"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (mocked repositories, providers, HTTP)
    - unit/       : Unit tests (pure functions and models, no I/O)
"""
import os
from datetime import datetime
from typing import Any, Dict

import pytest

# Set testing environment BEFORE any service imports
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("INTERNAL_SERVICE_SECRET", "test-internal-secret")


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "component: marks tests as component tests")
    config.addinivalue_line("markers", "golden: characterization tests of current behavior")


# =============================================================================
# Test Data Generators
# =============================================================================

class TestDataGenerator:
    """Generate unique test data"""

    __test__ = False
    _counter = 0

    @classmethod
    def _next_id(cls) -> str:
        cls._counter += 1
        return f"{datetime.now().strftime('%Y%m%d%H%M%S')}_{cls._counter:04d}"

    @classmethod
    def user_id(cls) -> str:
        return f"usr_test_{cls._next_id()}"

    @classmethod
    def phone(cls) -> str:
        cls._counter += 1
        return f"98{cls._counter:08d}"


@pytest.fixture
def generate() -> TestDataGenerator:
    """Provide test data generator"""
    return TestDataGenerator()


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def sample_shipping_address() -> Dict[str, Any]:
    """Shipping address as a client submits it"""
    return {
        "full_name": "Asha Verma",
        "phone": "9876543210",
        "address": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "postal_code": "560001",
        "landmark": "Near metro",
        "email": "asha@example.com",
    }
