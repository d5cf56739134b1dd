"""Tests for ServerConfig loading from TOML and environment variables."""

import logging

import pytest

from jamf_docs_mcp.config import ServerConfig, get_config, set_config

ENV_NAMES = [
    "LOG_LEVEL", "STRUCTURED_LOGGING", "DISABLED_TOOLS", "CONFIG_FILE", "CACHE_ENABLED",
    "DEFAULT_MAX_TOKENS", "CHARS_PER_TOKEN", "CODE_CHARS_PER_TOKEN",
    "REQUEST_TIMEOUT", "MAX_RETRIES", "RETRY_DELAY", "RATE_LIMIT_DELAY", "USER_AGENT",
    "CACHE_DIR", "CACHE_TTL_SEARCH", "CACHE_TTL_ARTICLE", "CACHE_TTL_PRODUCTS", "CACHE_TTL_TOC",
]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep user and project config files and stray env vars out of the tests."""
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"JAMF_DOCS_MCP_{name}", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = ServerConfig.from_env()
        assert config.tokens.default_max_tokens == 5000
        assert config.requests.timeout == 15.0
        assert config.requests.rate_limit_delay == 0.5
        assert config.cache.enabled
        assert config.cache.ttl_search == 1800
        assert config.cache.ttl_products == 604800
        assert config.disabled_tools == []
        assert config.startup_warnings == []

    def test_token_ratios(self):
        ratios = ServerConfig().token_ratios()
        assert (ratios.chars_per_token, ratios.code_chars_per_token) == (4, 3)


class TestEnvironment:
    """Tests for environment overrides."""

    def test_bare_names(self, monkeypatch):
        """Test the unprefixed variable names."""
        monkeypatch.setenv("REQUEST_TIMEOUT", "30000")
        monkeypatch.setenv("RATE_LIMIT_DELAY", "250")
        monkeypatch.setenv("CACHE_TTL_SEARCH", "60000")
        monkeypatch.setenv("CACHE_DIR", "/tmp/jamf-cache")
        config = ServerConfig.from_env()

        assert config.requests.timeout == 30.0
        assert config.requests.rate_limit_delay == 0.25
        assert config.cache.ttl_search == 60
        assert config.cache.cache_dir == "/tmp/jamf-cache"

    def test_prefixed_wins(self, monkeypatch):
        """Test that the prefixed name takes precedence."""
        monkeypatch.setenv("MAX_RETRIES", "5")
        monkeypatch.setenv("JAMF_DOCS_MCP_MAX_RETRIES", "1")
        assert ServerConfig.from_env().requests.max_retries == 1

    def test_disabled_tools(self, monkeypatch):
        monkeypatch.setenv("JAMF_DOCS_MCP_DISABLED_TOOLS", "jamf_docs_get_toc, ,jamf_docs_search")
        assert ServerConfig.from_env().disabled_tools == ["jamf_docs_get_toc", "jamf_docs_search"]

    def test_cache_disabled(self, monkeypatch):
        monkeypatch.setenv("JAMF_DOCS_MCP_CACHE_ENABLED", "false")
        assert not ServerConfig.from_env().cache.enabled

    def test_malformed_number_warns(self, monkeypatch):
        """Test that a bad value keeps the default and records a warning."""
        monkeypatch.setenv("MAX_RETRIES", "lots")
        config = ServerConfig.from_env()
        assert config.requests.max_retries == 3
        assert config.startup_warnings == ["Ignoring MAX_RETRIES='lots': expected an integer, keeping 3"]


class TestToml:
    """Tests for TOML configuration files."""

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(
            '[logging]\nlevel = "debug"\nstructured = false\n'
            '[tools]\ndisabled_tools = ["jamf_docs_get_toc"]\n'
            "[tokens]\ndefault_max_tokens = 8000\n"
            "[requests]\nmax_retries = 1\n"
            '[cache]\nenabled = false\ncache_dir = "/var/cache/jamf"\n'
        )
        config = ServerConfig.from_env(str(path))

        assert config.log_level == "DEBUG"
        assert not config.structured_logging
        assert config.disabled_tools == ["jamf_docs_get_toc"]
        assert config.tokens.default_max_tokens == 8000
        assert config.requests.max_retries == 1
        assert not config.cache.enabled
        assert config.cache.cache_dir == "/var/cache/jamf"

    def test_project_file_discovered(self, tmp_path):
        (tmp_path / "jamf-docs-mcp.toml").write_text("[requests]\nrate_limit_delay = 0.1\n")
        assert ServerConfig.from_env().requests.rate_limit_delay == 0.1

    def test_env_overrides_toml(self, tmp_path, monkeypatch):
        (tmp_path / "jamf-docs-mcp.toml").write_text("[tokens]\ndefault_max_tokens = 8000\n")
        monkeypatch.setenv("DEFAULT_MAX_TOKENS", "3000")
        assert ServerConfig.from_env().tokens.default_max_tokens == 3000

    def test_missing_file_keeps_defaults(self, tmp_path):
        config = ServerConfig.from_env(str(tmp_path / "absent.toml"))
        assert config.tokens.default_max_tokens == 5000

    def test_invalid_toml_keeps_defaults(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[tokens\n")
        assert ServerConfig.from_env(str(path)).tokens.default_max_tokens == 5000


class TestValidation:
    """Tests for clamping of unusable values."""

    def test_default_budget_clamped(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_MAX_TOKENS", "50000")
        config = ServerConfig.from_env()
        assert config.tokens.default_max_tokens == 20000
        assert any("default_max_tokens=50000" in w for w in config.startup_warnings)

    def test_ratio_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("CHARS_PER_TOKEN", "0")
        config = ServerConfig.from_env()
        assert config.tokens.chars_per_token == 4
        assert "chars_per_token must be positive; using 4" in config.startup_warnings

    def test_negative_retries(self, monkeypatch):
        monkeypatch.setenv("MAX_RETRIES", "-2")
        assert ServerConfig.from_env().requests.max_retries == 0


class TestGlobalConfig:
    """Tests for get_config/set_config."""

    def test_set_then_get(self):
        config = ServerConfig(server_name="custom")
        set_config(config)
        try:
            assert get_config() is config
        finally:
            set_config(None)


def test_setup_logging_attaches_stderr_handler():
    config = ServerConfig(log_level="DEBUG", structured_logging=False)
    logger = logging.getLogger("jamf_docs_mcp")
    before = list(logger.handlers)
    try:
        config.setup_logging()
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == len(before) + 1
    finally:
        logger.handlers = before
        logger.setLevel(logging.NOTSET)
