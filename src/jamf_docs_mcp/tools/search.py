"""
Documentation search tool.

Searches learn.jamf.com and returns a page of results sized to the token
budget. Empty result sets come back as query suggestions instead.
"""

import logging
from typing import Dict, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from jamf_docs_mcp.config import ServerConfig
from jamf_docs_mcp.core.catalog import OutputMode, ResponseFormat
from jamf_docs_mcp.core.docs_service import DocsService, SearchParams
from jamf_docs_mcp.core.naming import canonical_tool
from jamf_docs_mcp.core.responses import success_response
from jamf_docs_mcp.core.suggestions import format_search_suggestions, generate_search_suggestions
from jamf_docs_mcp.tools.common import READ_ONLY, content_fidelity, dump_response, failure, invalid_input
from jamf_docs_mcp.tools.formatters import format_search_results, format_search_results_compact
from jamf_docs_mcp.tools.schemas import SearchInput

logger = logging.getLogger(__name__)


def register_search_tools(mcp: FastMCP, config: ServerConfig, service: DocsService) -> None:
    """
    Register the search tool with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        config: Server configuration
        service: Shared documentation service
    """

    @canonical_tool(
        mcp,
        canonical_name="jamf_docs_search",
        disabled_tools=config.disabled_tools,
        title="Search Jamf Documentation",
        annotations=READ_ONLY,
    )
    async def jamf_docs_search(
        query: str,
        product: Optional[str] = None,
        topic: Optional[str] = None,
        version: Optional[str] = None,
        limit: int = 10,
        page: int = 1,
        max_tokens: Optional[int] = None,
        output_mode: str = "full",
        response_format: str = "markdown",
    ) -> str:
        """
        Search Jamf documentation for articles matching your query.

        Searches across Jamf Pro, Jamf School, Jamf Connect and Jamf Protect
        documentation. Results include article titles, snippets and direct links.

        WHEN TO USE:
        - "How to configure SSO" -> query="SSO configuration"
        - "MDM enrollment steps" -> query="MDM enrollment", topic="enrollment"
        - Next page of results -> query="policy", page=2

        Args:
            query: Search keywords (2-200 characters)
            product: Filter by product ID (jamf-pro, jamf-school, jamf-connect, jamf-protect)
            topic: Filter by topic ID (see jamf_docs_list_products)
            version: Documentation version, e.g. "11.5.0"
            limit: Maximum results per page 1-50 (default: 10)
            page: Page number 1-100 (default: 1)
            max_tokens: Maximum tokens in response 100-20000 (default: 5000)
            output_mode: 'full' or 'compact' (default: 'full')
            response_format: 'markdown' or 'json' (default: 'markdown')

        Returns:
            Markdown result list, or a JSON envelope with total, query, results,
            filters, tokenInfo and pagination. No matches return search suggestions.
        """
        try:
            params = SearchInput(
                query=query,
                product=product,
                topic=topic,
                version=version,
                limit=limit,
                page=page,
                max_tokens=max_tokens,
                output_mode=output_mode,
                response_format=response_format,
            )
        except ValidationError as e:
            return invalid_input(e)

        try:
            found = await service.search_documentation(
                SearchParams(
                    query=params.query,
                    product=params.product,
                    topic=params.topic,
                    version=params.version,
                    limit=params.limit,
                    page=params.page,
                    max_tokens=params.max_tokens,
                )
            )
        except Exception as e:
            return failure(e, "Error searching documentation")

        if not found.results and found.pagination.total_items == 0:
            suggestions = generate_search_suggestions(
                params.query,
                has_product_filter=params.product is not None,
                has_topic_filter=params.topic is not None,
            )
            return format_search_suggestions(params.query, suggestions)

        filters: Dict[str, str] = {}
        if params.product is not None:
            filters["product"] = params.product
        if params.version is not None:
            filters["version"] = params.version
        if params.topic is not None:
            filters["topic"] = params.topic

        if params.response_format == ResponseFormat.JSON:
            return dump_response(
                success_response(
                    data={
                        "total": found.pagination.total_items,
                        "query": params.query,
                        "results": [result.to_dict() for result in found.results],
                        "filters": filters,
                        "tokenInfo": found.token_info.to_dict(),
                        "pagination": found.pagination.to_dict(),
                    },
                    content_fidelity=content_fidelity(found.token_info),
                )
            )

        if params.output_mode == OutputMode.COMPACT:
            return format_search_results_compact(
                params.query, found.results, filters, found.pagination, found.token_info
            )
        return format_search_results(params.query, found.results, filters, found.pagination, found.token_info)
