"""
Standard response contracts for MCP tool operations.

Callers can use ``from jamf_docs_mcp.core.responses import success_response``
or import from the sub-modules directly.

Sub-modules:
    types     - ErrorCode, ErrorType, ToolResponse, _build_meta
    builders  - success_response, error_response, validation_error
"""

from jamf_docs_mcp.core.responses.types import (  # noqa: F401
    ErrorCode,
    ErrorType,
    ToolResponse,
    _build_meta,
)
from jamf_docs_mcp.core.responses.builders import (  # noqa: F401
    error_response,
    success_response,
    validation_error,
)
