"""
Article retrieval tool.

Fetches one documentation page and returns it whole, as a single section,
or as a summary with an outline, always within the token budget.
"""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from jamf_docs_mcp.config import ServerConfig
from jamf_docs_mcp.core.catalog import OutputMode, ResponseFormat
from jamf_docs_mcp.core.docs_service import ArticleResult, DocsService
from jamf_docs_mcp.core.naming import canonical_tool
from jamf_docs_mcp.core.responses import success_response
from jamf_docs_mcp.tools.common import READ_ONLY, content_fidelity, dump_response, failure, invalid_input
from jamf_docs_mcp.tools.formatters import format_article, format_article_compact
from jamf_docs_mcp.tools.schemas import GetArticleInput

logger = logging.getLogger(__name__)


def article_payload(article: ArticleResult) -> dict:
    """camelCase JSON payload for an article."""
    return {
        "title": article.title,
        "content": article.content,
        "url": article.url,
        "product": article.product,
        "version": article.version,
        "breadcrumb": list(article.breadcrumb),
        "relatedArticles": [{"title": r.title, "url": r.url} for r in article.related_articles],
        "tokenInfo": article.token_info.to_dict(),
        "sections": [section.to_dict() for section in article.sections],
    }


def register_article_tools(mcp: FastMCP, config: ServerConfig, service: DocsService) -> None:
    """
    Register the article tool with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        config: Server configuration
        service: Shared documentation service
    """

    @canonical_tool(
        mcp,
        canonical_name="jamf_docs_get_article",
        disabled_tools=config.disabled_tools,
        title="Get Jamf Documentation Article",
        annotations=READ_ONLY,
    )
    async def jamf_docs_get_article(
        url: str,
        section: Optional[str] = None,
        summary_only: bool = False,
        include_related: bool = False,
        max_tokens: Optional[int] = None,
        output_mode: str = "full",
        response_format: str = "markdown",
    ) -> str:
        """
        Retrieve the content of a specific Jamf documentation article.

        Fetches and parses an article from docs.jamf.com or learn.jamf.com
        and converts it to Markdown. Large articles are truncated on section
        boundaries and the remaining sections are listed; use `section` to
        read one of them.

        WHEN TO USE:
        - Reading an article found with jamf_docs_search or jamf_docs_get_toc
        - Previewing a long article cheaply with summary_only=True

        Args:
            url: Full article URL (docs.jamf.com or learn.jamf.com)
            section: Section title or ID to extract, e.g. "Prerequisites"
            summary_only: Return only the summary and outline (default: False)
            include_related: Include links to related articles (default: False)
            max_tokens: Maximum tokens in response 100-20000 (default: 5000)
            output_mode: 'full' or 'compact' (default: 'full')
            response_format: 'markdown' or 'json' (default: 'markdown')

        Returns:
            Markdown article, or a JSON envelope with title, content, url,
            product, version, breadcrumb, relatedArticles, tokenInfo and sections
        """
        try:
            params = GetArticleInput(
                url=url,
                section=section,
                summary_only=summary_only,
                include_related=include_related,
                max_tokens=max_tokens,
                output_mode=output_mode,
                response_format=response_format,
            )
        except ValidationError as e:
            return invalid_input(e)

        try:
            article = await service.fetch_article(
                params.url,
                include_related=params.include_related,
                section=params.section,
                summary_only=params.summary_only,
                max_tokens=params.max_tokens,
            )
        except Exception as e:
            return failure(e, "Error fetching article")

        if params.response_format == ResponseFormat.JSON:
            fidelity = "summary" if params.summary_only else content_fidelity(article.token_info)
            return dump_response(success_response(data=article_payload(article), content_fidelity=fidelity))

        if params.output_mode == OutputMode.COMPACT:
            return format_article_compact(article)
        return format_article(article, section=params.section, include_related=params.include_related)
