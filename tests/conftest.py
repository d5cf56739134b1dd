"""Shared fixtures: test configuration and a fake documentation backend."""

from typing import Optional

import pytest

from jamf_docs_mcp.config import CacheSettings, RequestSettings, ServerConfig
from jamf_docs_mcp.core.cache import DocsCache, NullCache
from jamf_docs_mcp.core.docs_service import DocsService
from jamf_docs_mcp.core.http import DocsHttpClient, RequestThrottle
from tests.fakes import FakeBackend, no_sleep


@pytest.fixture
def test_config(tmp_path):
    """Configuration with no request spacing, no retries and caching off."""
    return ServerConfig(
        log_level="WARNING",
        structured_logging=False,
        requests=RequestSettings(rate_limit_delay=0.0, max_retries=0, retry_delay=0.0),
        cache=CacheSettings(enabled=False, cache_dir=str(tmp_path / "cache")),
    )


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def make_service(test_config, backend):
    """Factory for a DocsService wired to the fake backend."""
    def factory(cache: Optional[DocsCache] = None, config: Optional[ServerConfig] = None) -> DocsService:
        cfg = config or test_config
        client = DocsHttpClient(
            cfg.requests,
            throttle=RequestThrottle(0.0, sleep_func=no_sleep),
            transport=backend.transport(),
            sleep_func=no_sleep,
        )
        return DocsService(cfg, client, cache or NullCache())

    return factory
