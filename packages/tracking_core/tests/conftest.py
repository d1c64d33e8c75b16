"""
Pytest fixtures for tracking tests.
"""

from unittest.mock import MagicMock

import pytest
import redis


@pytest.fixture
def sample_order_id():
    """Sample order UUID."""
    from uuid import UUID
    return UUID("12345678-1234-1234-1234-123456789012")


@pytest.fixture
def sample_date():
    """Sample completion timestamp."""
    return "2024-01-01T12:30:00.123456Z"


@pytest.fixture
def redis_client():
    """Redis client double; stream commands are configured per test."""
    client = MagicMock(spec=redis.Redis)
    client.xadd.return_value = "1704067200000-0"
    client.xack.return_value = 1
    return client
