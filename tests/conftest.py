# ===============================================================================
# PYTEST CONFIGURATION FOR THE MUNICIPAL CMS PLATFORM
# ===============================================================================
"""
Global test configuration.

Test Structure:
- tests/ mirrors apps/ structure for app-specific tests
- tests/api/ holds endpoint tests driven through DRF's APIClient
- tests/factories/ holds create_* helpers shared across test modules

Run specific app tests: pytest tests/content/
Run all tests: pytest tests/
"""

import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def clear_cache():
    """Settings values, setup state and debounce flags live in the cache"""
    cache.clear()
    yield
    cache.clear()
