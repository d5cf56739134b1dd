"""ServerConfig loading logic.

Provides ``_ServerConfigLoader``, a mixin class whose methods are inherited by
``ServerConfig`` (defined in ``server.py``).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, cast

if TYPE_CHECKING:
    from jamf_docs_mcp.config.server import ServerConfig

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from jamf_docs_mcp.config.domains import (
    CacheSettings,
    PaginationSettings,
    RequestSettings,
    TokenSettings,
)
from jamf_docs_mcp.config.parsing import (
    _parse_bool,
    _parse_int,
    _parse_millis,
    _parse_millis_to_seconds,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "JAMF_DOCS_MCP_"


class _ServerConfigLoader:
    """Mixin providing config-loading methods for ``ServerConfig``."""

    if TYPE_CHECKING:

        log_level: str
        structured_logging: bool
        server_name: str
        server_version: str
        disabled_tools: List[str]
        tokens: TokenSettings
        pagination: PaginationSettings
        requests: RequestSettings
        cache: CacheSettings
        startup_warnings: List[str]

        def _add_startup_warning(self, message: str) -> None: ...

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "ServerConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. Project TOML config (./jamf-docs-mcp.toml or ./.jamf-docs-mcp.toml)
        3. User TOML config (~/.jamf-docs-mcp.toml)
        4. XDG config (~/.config/jamf-docs-mcp/config.toml)
        5. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get(f"{ENV_PREFIX}CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
            xdg_config = Path(xdg_config_home) / "jamf-docs-mcp" / "config.toml"
            if xdg_config.exists():
                config._load_toml(xdg_config)
                logger.debug(f"Loaded XDG config from {xdg_config}")

            home_config = Path.home() / ".jamf-docs-mcp.toml"
            if home_config.exists():
                config._load_toml(home_config)
                logger.debug(f"Loaded user config from {home_config}")

            project_config = Path("jamf-docs-mcp.toml")
            if project_config.exists():
                config._load_toml(project_config)
                logger.debug(f"Loaded project config from {project_config}")
            else:
                hidden_config = Path(".jamf-docs-mcp.toml")
                if hidden_config.exists():
                    config._load_toml(hidden_config)
                    logger.debug(f"Loaded project config from {hidden_config}")

        config._load_env()
        config._validate()

        return cast("ServerConfig", config)

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)

            if "logging" in data:
                log = data["logging"]
                if "level" in log:
                    self.log_level = str(log["level"]).upper()
                if "structured" in log:
                    self.structured_logging = _parse_bool(log["structured"])

            if "server" in data:
                srv = data["server"]
                if "name" in srv:
                    self.server_name = srv["name"]
                if "version" in srv:
                    self.server_version = srv["version"]

            if "tools" in data:
                tools_cfg = data["tools"]
                if "disabled_tools" in tools_cfg:
                    self.disabled_tools = list(tools_cfg["disabled_tools"])

            if "tokens" in data:
                self.tokens = TokenSettings.from_toml_dict(data["tokens"])
            if "pagination" in data:
                self.pagination = PaginationSettings.from_toml_dict(data["pagination"])
            if "requests" in data:
                self.requests = RequestSettings.from_toml_dict(data["requests"])
            if "cache" in data:
                self.cache = CacheSettings.from_toml_dict(data["cache"])

        except Exception as e:
            logger.error(f"Error loading config file {path}: {e}")

    def _env(self, name: str) -> Optional[str]:
        """Read ``JAMF_DOCS_MCP_<name>``, falling back to the bare ``<name>``."""
        value = os.environ.get(f"{ENV_PREFIX}{name}")
        if value is None:
            value = os.environ.get(name)
        return value or None

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        warnings: List[str] = []

        if level := os.environ.get(f"{ENV_PREFIX}LOG_LEVEL"):
            self.log_level = level.upper()
        if structured := os.environ.get(f"{ENV_PREFIX}STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)
        if disabled := os.environ.get(f"{ENV_PREFIX}DISABLED_TOOLS"):
            self.disabled_tools = [t.strip() for t in disabled.split(",") if t.strip()]

        # Token settings
        if raw := self._env("DEFAULT_MAX_TOKENS"):
            self.tokens.default_max_tokens = _parse_int(
                raw, self.tokens.default_max_tokens, "DEFAULT_MAX_TOKENS", warnings
            )
        if raw := self._env("CHARS_PER_TOKEN"):
            self.tokens.chars_per_token = _parse_int(
                raw, self.tokens.chars_per_token, "CHARS_PER_TOKEN", warnings
            )
        if raw := self._env("CODE_CHARS_PER_TOKEN"):
            self.tokens.code_chars_per_token = _parse_int(
                raw, self.tokens.code_chars_per_token, "CODE_CHARS_PER_TOKEN", warnings
            )

        # Request settings (durations in milliseconds)
        req = self.requests
        if raw := self._env("REQUEST_TIMEOUT"):
            req.timeout = _parse_millis(raw, req.timeout, "REQUEST_TIMEOUT", warnings)
        if raw := self._env("MAX_RETRIES"):
            req.max_retries = _parse_int(raw, req.max_retries, "MAX_RETRIES", warnings)
        if raw := self._env("RETRY_DELAY"):
            req.retry_delay = _parse_millis(raw, req.retry_delay, "RETRY_DELAY", warnings)
        if raw := self._env("RATE_LIMIT_DELAY"):
            req.rate_limit_delay = _parse_millis(raw, req.rate_limit_delay, "RATE_LIMIT_DELAY", warnings)
        if raw := self._env("USER_AGENT"):
            req.user_agent = raw

        # Cache settings (TTLs in milliseconds)
        cache = self.cache
        if raw := os.environ.get(f"{ENV_PREFIX}CACHE_ENABLED"):
            cache.enabled = _parse_bool(raw)
        if raw := self._env("CACHE_DIR"):
            cache.cache_dir = raw
        if raw := self._env("CACHE_TTL_SEARCH"):
            cache.ttl_search = _parse_millis_to_seconds(raw, cache.ttl_search, "CACHE_TTL_SEARCH", warnings)
        if raw := self._env("CACHE_TTL_ARTICLE"):
            cache.ttl_article = _parse_millis_to_seconds(raw, cache.ttl_article, "CACHE_TTL_ARTICLE", warnings)
        if raw := self._env("CACHE_TTL_PRODUCTS"):
            cache.ttl_products = _parse_millis_to_seconds(
                raw, cache.ttl_products, "CACHE_TTL_PRODUCTS", warnings
            )
        if raw := self._env("CACHE_TTL_TOC"):
            cache.ttl_toc = _parse_millis_to_seconds(raw, cache.ttl_toc, "CACHE_TTL_TOC", warnings)

        for message in warnings:
            self._add_startup_warning(message)

    def _validate(self) -> None:
        """Clamp settings that would break the token budget or pagination."""
        tokens = self.tokens
        if tokens.chars_per_token <= 0:
            self._add_startup_warning("chars_per_token must be positive; using 4")
            tokens.chars_per_token = 4
        if tokens.code_chars_per_token <= 0:
            self._add_startup_warning("code_chars_per_token must be positive; using 3")
            tokens.code_chars_per_token = 3
        if not tokens.min_tokens <= tokens.default_max_tokens <= tokens.max_tokens_limit:
            clamped = max(tokens.min_tokens, min(tokens.default_max_tokens, tokens.max_tokens_limit))
            self._add_startup_warning(
                f"default_max_tokens={tokens.default_max_tokens} outside "
                f"[{tokens.min_tokens}, {tokens.max_tokens_limit}]; using {clamped}"
            )
            tokens.default_max_tokens = clamped
        if self.pagination.default_page_size <= 0:
            self._add_startup_warning("default_page_size must be positive; using 10")
            self.pagination.default_page_size = 10
        if self.requests.max_retries < 0:
            self._add_startup_warning("max_retries must not be negative; using 0")
            self.requests.max_retries = 0
