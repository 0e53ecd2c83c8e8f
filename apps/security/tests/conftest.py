import pytest
from unittest.mock import patch
from django.core.cache import cache


@pytest.fixture(autouse=True)
def clear_cache():
    """Throttle and ban counters live in the cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def frozen_throttle_clock():
    """Keep every request of a test inside one throttle window."""
    with patch('apps.security.throttles.time') as clock:
        clock.time.return_value = 1_700_000_000.0
        yield clock
