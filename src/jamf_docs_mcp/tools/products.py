"""
Product listing tool.

Lists the documented Jamf products and the topic ids usable as search
filters. Served from the static catalog, so it never touches the network.
"""

import json
import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from jamf_docs_mcp.config import ServerConfig
from jamf_docs_mcp.core.catalog import JAMF_PRODUCTS, JAMF_TOPICS, ResponseFormat
from jamf_docs_mcp.core.content import create_token_info, estimate_tokens
from jamf_docs_mcp.core.naming import canonical_tool
from jamf_docs_mcp.core.responses import success_response
from jamf_docs_mcp.tools.common import READ_ONLY_LOCAL, dump_response, failure, invalid_input
from jamf_docs_mcp.tools.formatters import format_products, format_products_footer
from jamf_docs_mcp.tools.schemas import ListProductsInput

logger = logging.getLogger(__name__)


def register_products_tools(mcp: FastMCP, config: ServerConfig) -> None:
    """
    Register the product listing tool with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        config: Server configuration
    """
    ratios = config.token_ratios()

    @canonical_tool(
        mcp,
        canonical_name="jamf_docs_list_products",
        disabled_tools=config.disabled_tools,
        title="List Jamf Products",
        annotations=READ_ONLY_LOCAL,
    )
    def jamf_docs_list_products(
        max_tokens: Optional[int] = None,
        response_format: str = "markdown",
    ) -> str:
        """
        List all available Jamf products, topics, and their documentation versions.

        Covers Jamf Pro, Jamf School, Jamf Connect and Jamf Protect, plus the
        topic ids accepted by the `topic` filter of `jamf_docs_search`.

        WHEN TO USE:
        - "What Jamf products are available?"
        - "What topics can I filter by?"

        Args:
            max_tokens: Maximum tokens in response 100-20000 (default: 5000)
            response_format: 'markdown' or 'json' (default: 'markdown')

        Returns:
            Markdown listing, or a JSON envelope with products, topics and tokenInfo
        """
        try:
            params = ListProductsInput(max_tokens=max_tokens, response_format=response_format)
        except ValidationError as e:
            return invalid_input(e)

        budget = params.max_tokens or config.tokens.default_max_tokens
        try:
            products = list(JAMF_PRODUCTS.values())
            topics = list(JAMF_TOPICS.values())

            if params.response_format == ResponseFormat.JSON:
                product_data = [
                    {
                        "id": p.id,
                        "name": p.name,
                        "description": p.description,
                        "currentVersion": p.latest_version,
                        "availableVersions": list(p.versions),
                    }
                    for p in products
                ]
                topic_data = [{"id": t.id, "name": t.name, "keywords": list(t.keywords)} for t in topics]
                token_info = create_token_info(
                    json.dumps({"products": product_data, "topics": topic_data}), budget, ratios=ratios
                )
                return dump_response(
                    success_response(products=product_data, topics=topic_data, tokenInfo=token_info.to_dict())
                )

            markdown = format_products(products, topics)
            return markdown + format_products_footer(estimate_tokens(markdown, ratios))
        except Exception as e:
            return failure(e, "Error listing products")
