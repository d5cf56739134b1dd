"""ServerConfig dataclass and global configuration state.

This module defines the ``ServerConfig`` class (field declarations and simple
accessor methods) and the global ``get_config`` / ``set_config`` helpers.
Loading logic lives in the ``_ServerConfigLoader`` mixin (``loader.py``).
"""

import logging
import sys
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_package_version
from typing import List, Optional

from jamf_docs_mcp.config.domains import (
    CacheSettings,
    PaginationSettings,
    RequestSettings,
    TokenSettings,
)
from jamf_docs_mcp.config.loader import _ServerConfigLoader
from jamf_docs_mcp.core.content import TokenRatios


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("jamf-docs-mcp")
    except PackageNotFoundError:
        return "1.0.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()


@dataclass
class ServerConfig(_ServerConfigLoader):
    """Server configuration with support for env vars and TOML overrides."""

    # Logging configuration
    log_level: str = "INFO"
    structured_logging: bool = True

    # Server configuration
    server_name: str = "jamf-docs-mcp"
    server_version: str = field(default_factory=lambda: _PACKAGE_VERSION)

    tokens: TokenSettings = field(default_factory=TokenSettings)
    pagination: PaginationSettings = field(default_factory=PaginationSettings)
    requests: RequestSettings = field(default_factory=RequestSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)

    # Tool registration control
    disabled_tools: List[str] = field(default_factory=list)

    startup_warnings: List[str] = field(default_factory=list, repr=False)

    def _add_startup_warning(self, message: str) -> None:
        if message and message not in self.startup_warnings:
            self.startup_warnings.append(message)

    def token_ratios(self) -> TokenRatios:
        """Character-per-token ratios for the content pipeline."""
        return TokenRatios(
            chars_per_token=self.tokens.chars_per_token,
            code_chars_per_token=self.tokens.code_chars_per_token,
        )

    def setup_logging(self) -> None:
        """Configure logging based on settings.

        Logs go to stderr; stdout carries the MCP stdio transport.
        """
        level = getattr(logging, self.log_level, logging.INFO)

        if self.structured_logging:
            formatter = logging.Formatter(
                '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'
            )
        else:
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)

        root_logger = logging.getLogger("jamf_docs_mcp")
        root_logger.setLevel(level)
        root_logger.addHandler(handler)


# Global configuration instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def set_config(config: ServerConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
