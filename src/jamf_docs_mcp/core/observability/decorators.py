"""MCP tool and resource decorators with observability.

Provides @mcp_tool and @mcp_resource decorators that add correlation ids,
latency and status metrics, and audit records to FastMCP handlers.
"""

import functools
import inspect
import time
from typing import Any, Callable, Optional, TypeVar

from jamf_docs_mcp.core.context import (
    generate_correlation_id,
    get_correlation_id,
    sync_request_context,
)
from jamf_docs_mcp.core.observability.audit import _audit
from jamf_docs_mcp.core.observability.metrics import _metrics

T = TypeVar("T")


def _record_tool(name: str, corr_id: str, success: bool, error_msg: Optional[str], start: float,
                 emit_metrics: bool, audit: bool) -> None:
    duration_ms = (time.perf_counter() - start) * 1000

    if emit_metrics:
        labels = {"tool": name, "status": "success" if success else "error"}
        _metrics.counter("tool.invocations", labels=labels)
        _metrics.timer("tool.latency", duration_ms, labels={"tool": name})

    if audit:
        _audit.tool_invocation(
            tool_name=name,
            success=success,
            duration_ms=round(duration_ms, 2),
            error=error_msg,
            correlation_id=corr_id,
        )


def mcp_tool(
    tool_name: Optional[str] = None, emit_metrics: bool = True, audit: bool = True
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator for MCP tool handlers with observability.

    Automatically:
    - Binds a correlation id for the call (reusing one already in context)
    - Emits latency and status metrics
    - Creates audit log entries

    Args:
        tool_name: Override tool name (defaults to function name)
        emit_metrics: Whether to emit metrics
        audit: Whether to create audit log entries
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = tool_name or func.__name__

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> T:
            corr_id = get_correlation_id() or generate_correlation_id(prefix="tool")
            with sync_request_context(correlation_id=corr_id):
                start = time.perf_counter()
                success = True
                error_msg = None
                try:
                    return await func(*args, **kwargs)  # type: ignore[misc]
                except Exception as e:
                    success = False
                    error_msg = str(e)
                    raise
                finally:
                    _record_tool(name, corr_id, success, error_msg, start, emit_metrics, audit)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> T:
            corr_id = get_correlation_id() or generate_correlation_id(prefix="tool")
            with sync_request_context(correlation_id=corr_id):
                start = time.perf_counter()
                success = True
                error_msg = None
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    success = False
                    error_msg = str(e)
                    raise
                finally:
                    _record_tool(name, corr_id, success, error_msg, start, emit_metrics, audit)

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore[return-value]
        return sync_wrapper

    return decorator


def mcp_resource(
    resource_type: Optional[str] = None, emit_metrics: bool = True, audit: bool = True
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator for async MCP resource handlers with observability.

    Args:
        resource_type: Type of resource (e.g., "products", "topics")
        emit_metrics: Whether to emit metrics
        audit: Whether to create audit log entries
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        rtype = resource_type or "resource"

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> T:
            start = time.perf_counter()
            success = True
            error_msg = None
            try:
                return await func(*args, **kwargs)  # type: ignore[misc]
            except Exception as e:
                success = False
                error_msg = str(e)
                raise
            finally:
                duration_ms = (time.perf_counter() - start) * 1000

                if emit_metrics:
                    labels = {
                        "resource_type": rtype,
                        "status": "success" if success else "error",
                    }
                    _metrics.counter("resource.access", labels=labels)
                    _metrics.timer("resource.latency", duration_ms, labels={"resource_type": rtype})

                if audit:
                    _audit.resource_access(
                        resource_type=rtype,
                        resource_id=rtype,
                        action="read",
                        success=success,
                        duration_ms=round(duration_ms, 2),
                        error=error_msg,
                    )

        return async_wrapper  # type: ignore[return-value]

    return decorator
