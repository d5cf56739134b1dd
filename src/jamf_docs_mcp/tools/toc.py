"""
Table-of-contents tool.

Browses the navigation tree of a product's documentation, one page of
top-level entries at a time.
"""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from jamf_docs_mcp.config import ServerConfig
from jamf_docs_mcp.core.catalog import JAMF_PRODUCTS, OutputMode, ResponseFormat
from jamf_docs_mcp.core.docs_service import DocsService
from jamf_docs_mcp.core.errors import VersionNotFoundError
from jamf_docs_mcp.core.naming import canonical_tool
from jamf_docs_mcp.core.responses import success_response
from jamf_docs_mcp.tools.common import READ_ONLY, content_fidelity, dump_response, failure, invalid_input
from jamf_docs_mcp.tools.formatters import format_toc, format_toc_compact
from jamf_docs_mcp.tools.schemas import GetTocInput

logger = logging.getLogger(__name__)

LATEST_ALIASES = ("", "current", "latest")


def register_toc_tools(mcp: FastMCP, config: ServerConfig, service: DocsService) -> None:
    """
    Register the table-of-contents tool with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        config: Server configuration
        service: Shared documentation service
    """

    async def _check_version(product_id: str, version: Optional[str]) -> None:
        # Unknown versions are only rejected when discovery found some.
        if version is None or version in LATEST_ALIASES:
            return
        available = await service.metadata.get_available_versions(product_id)
        if available and version not in available:
            raise VersionNotFoundError(JAMF_PRODUCTS[product_id].name, version, available)

    @canonical_tool(
        mcp,
        canonical_name="jamf_docs_get_toc",
        disabled_tools=config.disabled_tools,
        title="Get Documentation Table of Contents",
        annotations=READ_ONLY,
    )
    async def jamf_docs_get_toc(
        product: str,
        version: Optional[str] = None,
        page: int = 1,
        max_tokens: Optional[int] = None,
        output_mode: str = "full",
        response_format: str = "markdown",
    ) -> str:
        """
        Get the table of contents for a Jamf product's documentation.

        Use this to discover what topics exist before searching or reading
        specific articles. Large tables of contents are paginated.

        Args:
            product: Product ID, one of jamf-pro, jamf-school, jamf-connect, jamf-protect
            version: Specific version (defaults to latest)
            page: Page number 1-100 (default: 1)
            max_tokens: Maximum tokens in response 100-20000 (default: 5000)
            output_mode: 'full' or 'compact' (compact lists top-level entries only)
            response_format: 'markdown' or 'json' (default: 'markdown')

        Returns:
            Markdown tree, or a JSON envelope with product, version, toc,
            tokenInfo and pagination
        """
        try:
            params = GetTocInput(
                product=product,
                version=version,
                page=page,
                max_tokens=max_tokens,
                output_mode=output_mode,
                response_format=response_format,
            )
        except ValidationError as e:
            return invalid_input(e)

        product_name = JAMF_PRODUCTS[params.product].name
        resolved_version = params.version or "current"
        try:
            await _check_version(params.product, params.version)
            toc = await service.fetch_table_of_contents(
                params.product,
                version=resolved_version,
                page=params.page,
                max_tokens=params.max_tokens,
            )
        except Exception as e:
            return failure(e, "Error fetching table of contents")

        if params.response_format == ResponseFormat.JSON:
            return dump_response(
                success_response(
                    data={
                        "product": product_name,
                        "version": resolved_version,
                        "toc": [entry.to_dict() for entry in toc.toc],
                        "tokenInfo": toc.token_info.to_dict(),
                        "pagination": toc.pagination.to_dict(),
                    },
                    content_fidelity=content_fidelity(toc.token_info),
                )
            )

        if params.output_mode == OutputMode.COMPACT:
            return format_toc_compact(product_name, toc.toc, toc.pagination)
        return format_toc(product_name, resolved_version, toc.toc, toc.pagination, toc.token_info)
