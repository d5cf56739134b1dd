"""MCP tool and resource registrations for jamf-docs-mcp."""

from jamf_docs_mcp.tools.article import register_article_tools  # noqa: F401
from jamf_docs_mcp.tools.products import register_products_tools  # noqa: F401
from jamf_docs_mcp.tools.resources import register_resources  # noqa: F401
from jamf_docs_mcp.tools.search import register_search_tools  # noqa: F401
from jamf_docs_mcp.tools.toc import register_toc_tools  # noqa: F401
