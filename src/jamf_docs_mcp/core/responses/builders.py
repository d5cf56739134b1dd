"""
Response builder functions for MCP tool operations.

Provides success_response() and error_response(), the two constructors for
standardized ToolResponse objects, plus the HTTP-analog helpers tools use
for input problems.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from jamf_docs_mcp.core.responses.types import (
    ErrorCode,
    ErrorType,
    ToolResponse,
    _build_meta,
)


def success_response(
    data: Optional[Mapping[str, Any]] = None,
    *,
    warnings: Optional[Sequence[str]] = None,
    pagination: Optional[Mapping[str, Any]] = None,
    telemetry: Optional[Mapping[str, Any]] = None,
    content_fidelity: Optional[str] = None,
    request_id: Optional[str] = None,
    meta: Optional[Mapping[str, Any]] = None,
    **fields: Any,
) -> ToolResponse:
    """Create a standardized success response.

    Args:
        data: Optional mapping used as the base payload.
        warnings: Non-fatal issues to surface in ``meta.warnings``.
        pagination: Page window for list results.
        telemetry: Timing/performance metadata.
        content_fidelity: ``full`` or ``partial`` when content was truncated
            to fit the token budget, ``summary`` for summary-only articles.
        request_id: Correlation identifier propagated through logs.
        meta: Arbitrary extra metadata to merge into ``meta``.
        **fields: Additional payload fields (shorthand for ``data.update``).

    Example:
        >>> success_response(
        ...     data={"results": [...]},
        ...     pagination={"page": 2, "hasNext": True},
        ...     content_fidelity="partial",
        ... )
    """
    payload: Dict[str, Any] = {}
    if data:
        payload.update(dict(data))
    if fields:
        payload.update(fields)

    meta_payload = _build_meta(
        request_id=request_id,
        warnings=warnings,
        pagination=pagination,
        telemetry=telemetry,
        content_fidelity=content_fidelity,
        extra=meta,
    )

    return ToolResponse(success=True, data=payload, error=None, meta=meta_payload)


def error_response(
    message: str,
    *,
    data: Optional[Mapping[str, Any]] = None,
    error_code: Optional[Union[ErrorCode, str]] = None,
    error_type: Optional[Union[ErrorType, str]] = None,
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
    request_id: Optional[str] = None,
    telemetry: Optional[Mapping[str, Any]] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> ToolResponse:
    """Create a standardized error response.

    Args:
        message: Human-readable description of the failure.
        data: Optional mapping with additional machine-readable context.
        error_code: Canonical error code (``ErrorCode`` or string).
        error_type: Error category for routing (``ErrorType`` or string).
        remediation: User-facing guidance on how to fix the issue.
        details: Nested structure describing validation failures or metadata.
        request_id: Correlation identifier propagated through logs.
        telemetry: Timing/performance metadata captured before failure.
        meta: Arbitrary extra metadata to merge into ``meta``.

    Example:
        >>> error_response(
        ...     "Article not found: https://learn.jamf.com/...",
        ...     error_code=ErrorCode.NOT_FOUND,
        ...     error_type=ErrorType.NOT_FOUND,
        ...     remediation="Search with jamf_docs_search to find the current URL",
        ... )
    """
    payload: Dict[str, Any] = {}
    if data:
        payload.update(dict(data))

    effective_error_code: Union[ErrorCode, str] = error_code if error_code is not None else ErrorCode.INTERNAL_ERROR
    effective_error_type: Union[ErrorType, str] = error_type if error_type is not None else ErrorType.INTERNAL

    if "error_code" not in payload:
        payload["error_code"] = (
            effective_error_code.value if isinstance(effective_error_code, Enum) else effective_error_code
        )
    if "error_type" not in payload:
        payload["error_type"] = (
            effective_error_type.value if isinstance(effective_error_type, Enum) else effective_error_type
        )
    if remediation is not None and "remediation" not in payload:
        payload["remediation"] = remediation
    if details and "details" not in payload:
        payload["details"] = dict(details)

    meta_payload = _build_meta(
        request_id=request_id,
        telemetry=telemetry,
        extra=meta,
    )

    return ToolResponse(success=False, data=payload, error=message, meta=meta_payload)


def validation_error(
    message: str,
    *,
    field: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
    remediation: Optional[str] = None,
    error_code: Union[ErrorCode, str] = ErrorCode.VALIDATION_ERROR,
) -> ToolResponse:
    """Create a validation error response (HTTP 400 analog).

    Args:
        message: Human-readable description of the validation failure.
        field: The parameter that failed validation.
        details: Additional context (e.g., constraint violated, value received).
        remediation: Guidance on how to fix the input.
        error_code: Specific code when more precise than VALIDATION_ERROR.
    """
    error_details = dict(details) if details else {}
    if field and "field" not in error_details:
        error_details["field"] = field

    return error_response(
        message,
        error_code=error_code,
        error_type=ErrorType.VALIDATION,
        details=error_details if error_details else None,
        remediation=remediation,
    )
