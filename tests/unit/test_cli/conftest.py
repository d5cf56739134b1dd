"""Shared fixtures for CLI command tests."""

import pytest
from click.testing import CliRunner

from jamf_docs_mcp.config import set_config


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def config_file(tmp_path, cache_dir, monkeypatch):
    """A TOML config pointing the cache at a temporary directory."""
    for name in ("CACHE_DIR", "JAMF_DOCS_MCP_CACHE_DIR", "JAMF_DOCS_MCP_CACHE_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "jamf-docs-mcp.toml"
    path.write_text(f'[cache]\nenabled = true\ncache_dir = "{cache_dir.as_posix()}"\n')
    yield path
    set_config(None)
