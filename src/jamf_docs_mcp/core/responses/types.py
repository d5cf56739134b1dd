"""
Core types for MCP tool response contracts.

Defines the error codes, error types, the standard ToolResponse dataclass,
and the internal _build_meta() helper.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

from jamf_docs_mcp.core.context import get_correlation_id


class ErrorCode(str, Enum):
    """Machine-readable error codes for MCP tool responses.

    Categories:
        - Validation (input errors)
        - Resource (not found)
        - Access (rate limits)
        - System (upstream, internal)
    """

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_URL = "INVALID_URL"
    INVALID_PRODUCT = "INVALID_PRODUCT"
    INVALID_TOPIC = "INVALID_TOPIC"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    VERSION_NOT_FOUND = "VERSION_NOT_FOUND"

    # Access errors
    RATE_LIMITED = "RATE_LIMITED"

    # System errors
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    CACHE_ERROR = "CACHE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNAVAILABLE = "UNAVAILABLE"


class ErrorType(str, Enum):
    """Error categories for routing and client-side handling.

    Each type corresponds to an HTTP status code analog and indicates
    whether the operation should be retried.
    """

    VALIDATION = "validation"  # 400 - No retry, fix input
    NOT_FOUND = "not_found"  # 404 - No retry
    RATE_LIMIT = "rate_limit"  # 429 - Yes, after delay
    INTERNAL = "internal"  # 500 - Yes, with backoff
    UNAVAILABLE = "unavailable"  # 503 - Yes, with backoff


@dataclass
class ToolResponse:
    """
    Standard response structure for MCP tool operations.

    Attributes:
        success: Whether the operation completed successfully
        data: The primary payload (operation-specific structured data)
        error: Error message if success is False, None otherwise
        meta: Response metadata including version identifier
    """

    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=lambda: {"version": "response-v2"})


def _build_meta(
    *,
    request_id: Optional[str] = None,
    warnings: Optional[Sequence[str]] = None,
    pagination: Optional[Mapping[str, Any]] = None,
    telemetry: Optional[Mapping[str, Any]] = None,
    content_fidelity: Optional[str] = None,
    extra: Optional[Mapping[str, Any]] = None,
    auto_inject_request_id: bool = True,
) -> Dict[str, Any]:
    """Construct a metadata payload that always includes the response version.

    Args:
        request_id: Explicit correlation ID (takes precedence if provided)
        warnings: Non-fatal issues to surface (string array)
        pagination: Page window for list results
        telemetry: Timing/performance metadata
        content_fidelity: Response completeness level (full|partial|summary)
        extra: Arbitrary extra metadata to merge
        auto_inject_request_id: If True (default), auto-inject correlation_id
            from context when request_id is not explicitly provided
    """
    meta: Dict[str, Any] = {"version": "response-v2"}

    effective_request_id = request_id
    if effective_request_id is None and auto_inject_request_id:
        effective_request_id = get_correlation_id() or None

    if effective_request_id:
        meta["request_id"] = effective_request_id
    if warnings:
        meta["warnings"] = list(warnings)
    if pagination:
        meta["pagination"] = dict(pagination)
    if telemetry:
        meta["telemetry"] = dict(telemetry)
    if content_fidelity:
        meta["content_fidelity"] = content_fidelity
    if extra:
        meta.update(dict(extra))

    return meta
