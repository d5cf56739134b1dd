"""
MCP resources exposing the product and topic catalogs.

Both resources serve discovered metadata (versions, TOC-derived topics)
and degrade to the static catalog when the backend is unreachable.
"""

import json
import logging

from mcp.server.fastmcp import FastMCP

from jamf_docs_mcp.core.docs_service import DocsService
from jamf_docs_mcp.core.observability import mcp_resource

logger = logging.getLogger(__name__)

PRODUCTS_URI = "jamf://products"
TOPICS_URI = "jamf://topics"


def register_resources(mcp: FastMCP, service: DocsService) -> None:
    """
    Register catalog resources with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        service: Shared documentation service
    """

    @mcp.resource(
        PRODUCTS_URI,
        name="Jamf Products",
        description="List of Jamf products with available documentation, including version information",
        mime_type="application/json",
    )
    @mcp_resource(resource_type="products")
    async def products_resource() -> str:
        return json.dumps(await service.metadata.get_products_resource_data(), indent=2)

    @mcp.resource(
        TOPICS_URI,
        name="Documentation Topics",
        description="Topic categories for filtering Jamf documentation searches",
        mime_type="application/json",
    )
    @mcp_resource(resource_type="topics")
    async def topics_resource() -> str:
        return json.dumps(await service.metadata.get_topics_resource_data(), indent=2)
