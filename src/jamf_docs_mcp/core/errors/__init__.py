"""Centralized error classes for jamf-docs-mcp.

Sub-modules:
    docs  - DocsError hierarchy and DocsErrorCode
    base  - ERROR_MAPPINGS registry and error_to_response()
"""

from jamf_docs_mcp.core.errors.docs import (  # noqa: F401
    DocsError,
    DocsErrorCode,
    DocsNetworkError,
    DocsNotFoundError,
    DocsParseError,
    DocsRateLimitError,
    DocsTimeoutError,
    InvalidProductError,
    VersionNotFoundError,
)
from jamf_docs_mcp.core.errors.base import (  # noqa: F401
    ERROR_MAPPINGS,
    classify_error,
    error_to_response,
)
