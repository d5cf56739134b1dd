"""Naming helpers for MCP tool registration."""

from __future__ import annotations

import logging
from typing import Any, Callable, Collection

from mcp.server.fastmcp import FastMCP

from jamf_docs_mcp.core.observability import mcp_tool

logger = logging.getLogger(__name__)


def canonical_tool(
    mcp: FastMCP,
    *,
    canonical_name: str,
    disabled_tools: Collection[str] = (),
    **tool_kwargs: Any,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator that registers a tool under its canonical name.

    Tools listed in ``disabled_tools`` are wrapped but not registered.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        wrapped = mcp_tool(tool_name=canonical_name)(func)
        if canonical_name in disabled_tools:
            logger.info("Tool %s disabled by configuration", canonical_name)
            return wrapped
        return mcp.tool(name=canonical_name, **tool_kwargs)(wrapped)

    return decorator
