"""Input models for the documentation tools.

Tool handlers take plain keyword arguments (FastMCP derives the JSON schema
from the signature) and validate them through these models before doing
any work.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from jamf_docs_mcp.core.catalog import JAMF_PRODUCTS, JAMF_TOPICS, OutputMode, ResponseFormat

MIN_TOKENS = 100
MAX_TOKENS = 20000

ALLOWED_DOC_HOSTS = ("docs.jamf.com", "learn.jamf.com")


def _check_product(value: str) -> str:
    if value not in JAMF_PRODUCTS:
        raise ValueError(f'Invalid product ID: "{value}". Valid options: {", ".join(JAMF_PRODUCTS)}')
    return value


class _ToolInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_tokens: Optional[int] = Field(
        default=None,
        ge=MIN_TOKENS,
        le=MAX_TOKENS,
        description="Maximum tokens in the response",
    )
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description="markdown or json")


class ListProductsInput(_ToolInput):
    """Arguments of ``jamf_docs_list_products``."""


class SearchInput(_ToolInput):
    """Arguments of ``jamf_docs_search``."""

    query: str = Field(..., description="Search keywords (2-200 characters)")
    product: Optional[str] = Field(default=None, description="Product ID filter")
    topic: Optional[str] = Field(default=None, description="Topic ID filter")
    version: Optional[str] = Field(default=None, description="Documentation version")
    limit: int = Field(default=10, ge=1, le=50, description="Results per page")
    page: int = Field(default=1, ge=1, le=100, description="Page number")
    output_mode: OutputMode = Field(default=OutputMode.FULL, description="full or compact")

    @field_validator("query")
    @classmethod
    def validate_query(cls, value: str) -> str:
        if len(value) < 2:
            raise ValueError("Query must be at least 2 characters")
        if len(value) > 200:
            raise ValueError("Query must not exceed 200 characters")
        return value

    @field_validator("product")
    @classmethod
    def validate_product(cls, value: Optional[str]) -> Optional[str]:
        return _check_product(value) if value is not None else None

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in JAMF_TOPICS:
            raise ValueError(f'Invalid topic ID: "{value}". Valid options: {", ".join(JAMF_TOPICS)}')
        return value


class GetArticleInput(_ToolInput):
    """Arguments of ``jamf_docs_get_article``."""

    url: str = Field(..., description="Full article URL on docs.jamf.com or learn.jamf.com")
    section: Optional[str] = Field(default=None, description="Section title or ID to extract")
    summary_only: bool = Field(default=False, description="Return only the summary and outline")
    include_related: bool = Field(default=False, description="Include related article links")
    output_mode: OutputMode = Field(default=OutputMode.FULL, description="full or compact")

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Must be a valid URL")
        if not any(host in value for host in ALLOWED_DOC_HOSTS):
            raise ValueError("URL must be from docs.jamf.com or learn.jamf.com")
        return value


class GetTocInput(_ToolInput):
    """Arguments of ``jamf_docs_get_toc``."""

    product: str = Field(..., description="Product ID")
    version: Optional[str] = Field(default=None, description="Documentation version (defaults to latest)")
    page: int = Field(default=1, ge=1, le=100, description="Page number")
    output_mode: OutputMode = Field(default=OutputMode.FULL, description="full or compact")

    @field_validator("product")
    @classmethod
    def validate_product(cls, value: str) -> str:
        return _check_product(value)


def describe_validation_error(exc: ValidationError) -> List[str]:
    """Flatten a pydantic error into ``"field: message"`` strings."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        messages.append(f"{location}: {message}" if location else message)
    return messages
