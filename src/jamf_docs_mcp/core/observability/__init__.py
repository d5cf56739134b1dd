"""
Observability utilities for jamf-docs-mcp.

Provides metrics collection and audit logging for MCP tools and resources.

FastMCP Integration:
    The decorators in this module sit under the FastMCP registration
    decorator:

        from mcp.server.fastmcp import FastMCP
        from jamf_docs_mcp.core.observability import mcp_tool

        mcp = FastMCP("jamf-docs-mcp")

        @mcp.tool()
        @mcp_tool(tool_name="jamf_docs_search")
        async def jamf_docs_search(query: str) -> str:
            ...

    For resources, use the mcp_resource decorator:

        @mcp.resource("jamf://products")
        @mcp_resource(resource_type="products")
        async def products_resource() -> str:
            ...
"""

from jamf_docs_mcp.core.observability.audit import (
    AuditEvent,
    AuditEventType,
    AuditLogger,
    get_audit_logger,
)
from jamf_docs_mcp.core.observability.decorators import (
    mcp_resource,
    mcp_tool,
)
from jamf_docs_mcp.core.observability.metrics import (
    Metric,
    MetricsCollector,
    MetricType,
    get_metrics,
)

__all__ = [
    "AuditEvent",
    "AuditEventType",
    "AuditLogger",
    "get_audit_logger",
    "mcp_resource",
    "mcp_tool",
    "Metric",
    "MetricsCollector",
    "MetricType",
    "get_metrics",
]
