"""Domain-specific configuration dataclasses.

Contains small, focused configuration classes for token budgeting,
pagination, upstream HTTP requests, and the response cache.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from jamf_docs_mcp.config.parsing import _parse_bool

DEFAULT_USER_AGENT = "JamfDocsMCP/1.0 (https://github.com/GET-Technology-Inc/jamf-docs-mcp-server)"


@dataclass
class TokenSettings:
    """Token budget settings.

    Attributes:
        default_max_tokens: Budget applied when a tool call gives none
        max_tokens_limit: Largest budget a caller may request
        min_tokens: Smallest budget a caller may request
        chars_per_token: Prose characters per estimated token
        code_chars_per_token: Fenced-code characters per estimated token
    """

    default_max_tokens: int = 5000
    max_tokens_limit: int = 20000
    min_tokens: int = 100
    chars_per_token: int = 4
    code_chars_per_token: int = 3

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "TokenSettings":
        """Create settings from the [tokens] TOML section."""
        return cls(
            default_max_tokens=int(data.get("default_max_tokens", 5000)),
            max_tokens_limit=int(data.get("max_tokens_limit", 20000)),
            min_tokens=int(data.get("min_tokens", 100)),
            chars_per_token=int(data.get("chars_per_token", 4)),
            code_chars_per_token=int(data.get("code_chars_per_token", 3)),
        )


@dataclass
class PaginationSettings:
    """Pagination and result-size limits."""

    default_page: int = 1
    default_page_size: int = 10
    max_page: int = 100
    max_search_results: int = 50
    max_snippet_length: int = 500

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "PaginationSettings":
        """Create settings from the [pagination] TOML section."""
        return cls(
            default_page=int(data.get("default_page", 1)),
            default_page_size=int(data.get("default_page_size", 10)),
            max_page=int(data.get("max_page", 100)),
            max_search_results=int(data.get("max_search_results", 50)),
            max_snippet_length=int(data.get("max_snippet_length", 500)),
        )


@dataclass
class RequestSettings:
    """Upstream HTTP request settings.

    Attributes:
        timeout: Per-request timeout (seconds)
        max_retries: Retries after the first attempt for retryable failures
        retry_delay: Base delay for exponential backoff (seconds)
        rate_limit_delay: Minimum spacing between outgoing requests (seconds)
        user_agent: User-Agent header sent upstream
        docs_base_url: Public documentation site
        docs_api_url: Backend host serving search, TOC and rendered pages
    """

    timeout: float = 15.0
    max_retries: int = 3
    retry_delay: float = 1.0
    rate_limit_delay: float = 0.5
    user_agent: str = DEFAULT_USER_AGENT
    docs_base_url: str = "https://learn.jamf.com"
    docs_api_url: str = "https://learn-be.jamf.com"

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "RequestSettings":
        """Create settings from the [requests] TOML section."""
        return cls(
            timeout=float(data.get("timeout", 15.0)),
            max_retries=int(data.get("max_retries", 3)),
            retry_delay=float(data.get("retry_delay", 1.0)),
            rate_limit_delay=float(data.get("rate_limit_delay", 0.5)),
            user_agent=str(data.get("user_agent", DEFAULT_USER_AGENT)),
            docs_base_url=str(data.get("docs_base_url", "https://learn.jamf.com")).rstrip("/"),
            docs_api_url=str(data.get("docs_api_url", "https://learn-be.jamf.com")).rstrip("/"),
        )


@dataclass
class CacheSettings:
    """Response cache settings. TTLs are in seconds."""

    enabled: bool = True
    cache_dir: str = ".cache"
    ttl_search: int = 30 * 60
    ttl_article: int = 24 * 60 * 60
    ttl_products: int = 7 * 24 * 60 * 60
    ttl_toc: int = 24 * 60 * 60

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "CacheSettings":
        """Create settings from the [cache] TOML section."""
        defaults = cls()
        return cls(
            enabled=_parse_bool(data.get("enabled", True)),
            cache_dir=str(data.get("cache_dir", defaults.cache_dir)),
            ttl_search=int(data.get("ttl_search", defaults.ttl_search)),
            ttl_article=int(data.get("ttl_article", defaults.ttl_article)),
            ttl_products=int(data.get("ttl_products", defaults.ttl_products)),
            ttl_toc=int(data.get("ttl_toc", defaults.ttl_toc)),
        )

    def get_cache_dir(self) -> Path:
        """Get the resolved cache directory path."""
        return Path(self.cache_dir).expanduser()
