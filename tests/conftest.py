# ===============================================================================
# PYTEST CONFIGURATION FOR THE LUMICLOUD PLATFORM
# ===============================================================================
"""
Global test configuration for the LumiCloud platform.

Test Structure:
- tests/ mirrors apps/ structure for app-specific tests
- tests/mocks/ holds the stateful Hestia gateway mock
- Naming convention: test_{app}_{feature}.py

Django settings come from ``config.settings.test`` (see pyproject.toml).
"""

import pytest
from django.core.cache import cache

from tests.factories import create_admin, create_customer
from tests.mocks.hestia_mock import MockHestiaGateway


@pytest.fixture(autouse=True)
def clear_cache():
    """Throttle counters and task locks live in the cache"""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin_user(db):
    return create_admin()


@pytest.fixture
def customer(db):
    return create_customer(email="john@example.com", hestia_username="custjohn1a2b")


@pytest.fixture
def mock_gateway():
    return MockHestiaGateway()
