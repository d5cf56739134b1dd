"""
MCP server entry point for jamf-docs-mcp.

Builds the FastMCP instance, wires the shared HTTP client, cache and
documentation service, and registers tools and resources.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx
from mcp.server.fastmcp import FastMCP

from jamf_docs_mcp.config import ServerConfig, get_config
from jamf_docs_mcp.core.cache import create_cache
from jamf_docs_mcp.core.docs_service import DocsService
from jamf_docs_mcp.core.http import DocsHttpClient
from jamf_docs_mcp.tools import (
    register_article_tools,
    register_products_tools,
    register_resources,
    register_search_tools,
    register_toc_tools,
)

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = (
    "Search and read Jamf product documentation (Jamf Pro, Jamf School, Jamf Connect, "
    "Jamf Protect). Every tool accepts max_tokens; long articles are truncated on "
    "section boundaries and can be read one section at a time."
)


def create_service(config: ServerConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> DocsService:
    """Build the documentation service with its HTTP client and cache."""
    client = DocsHttpClient(config.requests, transport=transport)
    cache = create_cache(
        enabled=config.cache.enabled,
        cache_dir=config.cache.get_cache_dir(),
        default_ttl=config.cache.ttl_article,
    )
    return DocsService(config, client, cache)


def create_server(
    config: Optional[ServerConfig] = None,
    service: Optional[DocsService] = None,
) -> FastMCP:
    """
    Create and configure the FastMCP server.

    Args:
        config: Server configuration (default: loaded from environment)
        service: Documentation service to serve from (default: built from config)

    Returns:
        Configured FastMCP server instance
    """
    config = config or get_config()
    service = service or create_service(config)

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[Dict[str, Any]]:
        try:
            yield {}
        finally:
            await service.client.aclose()

    mcp = FastMCP(config.server_name, instructions=SERVER_INSTRUCTIONS, lifespan=lifespan)

    register_products_tools(mcp, config)
    register_search_tools(mcp, config, service)
    register_article_tools(mcp, config, service)
    register_toc_tools(mcp, config, service)
    register_resources(mcp, service)

    if config.disabled_tools:
        logger.info("Disabled tools: %s", ", ".join(config.disabled_tools))
    logger.info("Server %s v%s ready", config.server_name, config.server_version)
    return mcp


def main() -> None:
    """Run the server over stdio."""
    config = get_config()
    config.setup_logging()
    for warning in config.startup_warnings:
        logger.warning(warning)

    mcp = create_server(config)
    logger.info("Starting %s over stdio", config.server_name)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
