"""Error-to-ErrorCode mapping registry.

Provides a centralized mapping from exception types to (ErrorCode, ErrorType)
tuples, plus user-facing remediation hints, so every tool reports backend
failures the same way.

Usage:
    from jamf_docs_mcp.core.errors.base import error_to_response

    try:
        do_something()
    except Exception as e:
        result = error_to_response(e)
        if result is not None:
            return result
        raise  # Unknown error, re-raise
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Dict, Optional, Tuple, Type

from jamf_docs_mcp.core.errors.docs import (
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
from jamf_docs_mcp.core.responses.builders import error_response
from jamf_docs_mcp.core.responses.types import ErrorCode, ErrorType

ERROR_MAPPINGS: Dict[Type[Exception], Tuple[ErrorCode, ErrorType]] = {
    DocsNotFoundError: (ErrorCode.NOT_FOUND, ErrorType.NOT_FOUND),
    VersionNotFoundError: (ErrorCode.VERSION_NOT_FOUND, ErrorType.NOT_FOUND),
    DocsRateLimitError: (ErrorCode.RATE_LIMITED, ErrorType.RATE_LIMIT),
    DocsTimeoutError: (ErrorCode.TIMEOUT, ErrorType.UNAVAILABLE),
    DocsNetworkError: (ErrorCode.NETWORK_ERROR, ErrorType.UNAVAILABLE),
    DocsParseError: (ErrorCode.PARSE_ERROR, ErrorType.INTERNAL),
    InvalidProductError: (ErrorCode.INVALID_PRODUCT, ErrorType.VALIDATION),
}

# Fallback for bare DocsError instances, keyed on their code.
_CODE_MAPPINGS: Dict[DocsErrorCode, Tuple[ErrorCode, ErrorType]] = {
    DocsErrorCode.NOT_FOUND: (ErrorCode.NOT_FOUND, ErrorType.NOT_FOUND),
    DocsErrorCode.RATE_LIMITED: (ErrorCode.RATE_LIMITED, ErrorType.RATE_LIMIT),
    DocsErrorCode.TIMEOUT: (ErrorCode.TIMEOUT, ErrorType.UNAVAILABLE),
    DocsErrorCode.NETWORK_ERROR: (ErrorCode.NETWORK_ERROR, ErrorType.UNAVAILABLE),
    DocsErrorCode.PARSE_ERROR: (ErrorCode.PARSE_ERROR, ErrorType.INTERNAL),
    DocsErrorCode.INVALID_URL: (ErrorCode.INVALID_URL, ErrorType.VALIDATION),
    DocsErrorCode.INVALID_PRODUCT: (ErrorCode.INVALID_PRODUCT, ErrorType.VALIDATION),
    DocsErrorCode.CACHE_ERROR: (ErrorCode.CACHE_ERROR, ErrorType.INTERNAL),
}

REMEDIATIONS: Dict[ErrorCode, str] = {
    ErrorCode.NOT_FOUND: (
        "The article may have been moved or deleted. Try searching with "
        "`jamf_docs_search` to find the current URL."
    ),
    ErrorCode.VERSION_NOT_FOUND: "Omit `version` to use the latest documentation.",
    ErrorCode.RATE_LIMITED: "Please wait a moment and try again.",
    ErrorCode.TIMEOUT: "The documentation site is slow to respond. Try again shortly.",
    ErrorCode.NETWORK_ERROR: "Check network connectivity to learn.jamf.com and try again.",
    ErrorCode.INVALID_PRODUCT: "Use `jamf_docs_list_products` to see valid product IDs.",
}


def classify_error(exc: Exception) -> Optional[Tuple[ErrorCode, ErrorType]]:
    """Return the (ErrorCode, ErrorType) for ``exc`` or None if unknown."""
    mapping = ERROR_MAPPINGS.get(type(exc))
    if mapping is None and isinstance(exc, DocsError):
        mapping = _CODE_MAPPINGS.get(exc.code)
    return mapping


def error_to_response(exc: Exception, context: str = "") -> Optional[dict]:
    """Convert a known exception to a standard error_response dict, or None if unknown.

    Args:
        exc: The exception to convert.
        context: Optional prefix for the message (e.g. ``"Error fetching article"``).

    Returns:
        A dict suitable for an MCP tool response, or None if the exception
        type is not a documentation error.
    """
    mapping = classify_error(exc)
    if mapping is None:
        return None

    code, error_type = mapping
    message = f"{context}: {exc}" if context else str(exc)
    details = {}
    if isinstance(exc, DocsError):
        if exc.url:
            details["url"] = exc.url
        if exc.status_code is not None:
            details["status_code"] = exc.status_code
    if isinstance(exc, DocsRateLimitError) and exc.retry_after is not None:
        details["retry_after"] = exc.retry_after

    return asdict(
        error_response(
            message,
            error_code=code,
            error_type=error_type,
            remediation=REMEDIATIONS.get(code),
            details=details or None,
        )
    )
