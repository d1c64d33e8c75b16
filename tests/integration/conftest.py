"""
Pytest configuration for integration tests.

Integration tests need a running Redis (docker run -p 6379:6379 redis:7).
They use database 15 unless REDIS_URL says otherwise and are skipped when
Redis is unreachable.
"""

import os

os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
