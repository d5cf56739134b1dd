"""Shared fixtures for integration tests."""

import pytest

from jamf_docs_mcp.server import create_server


@pytest.fixture
def mcp_server(test_config, make_service):
    """A server whose documentation service talks to the fake backend."""
    return create_server(test_config, service=make_service())


@pytest.fixture
def tools(mcp_server):
    return mcp_server._tool_manager._tools


@pytest.fixture
def resources(mcp_server):
    return mcp_server._resource_manager._resources
