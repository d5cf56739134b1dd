"""Markdown renderers for tool output.

Each tool has a full layout and, where it makes sense, a compact one that
drops metadata and nesting to save tokens.
"""

from typing import Dict, List, Optional, Sequence

from jamf_docs_mcp.core.catalog import Product, Topic
from jamf_docs_mcp.core.content import PaginationInfo, Section, TokenInfo
from jamf_docs_mcp.core.docs_service import ArticleResult, SearchResult
from jamf_docs_mcp.core.scraper import RelatedArticle, TocEntry

MAX_LISTED_SECTIONS = 15
COMPACT_SNIPPET_CHARS = 80
TOPIC_KEYWORDS_SHOWN = 4

GET_ARTICLE_HINT = "*Use `jamf_docs_get_article` with any URL above to read the full article.*\n"


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


def format_filters_line(filters: Dict[str, str]) -> str:
    parts = [f"{name}: {filters[name]}" for name in ("product", "topic", "version") if filters.get(name)]
    return f"\n*Filtered by: {', '.join(parts)}*" if parts else ""


def format_search_result(result: SearchResult) -> str:
    output = f"### [{result.title}]({result.url})\n\n"
    output += f"> {result.snippet}\n\n"
    meta = []
    if result.product:
        meta.append(f"**Product**: {result.product}")
    if result.version:
        meta.append(f"**Version**: {result.version}")
    if meta:
        output += " | ".join(meta) + "\n\n"
    return output + "---\n\n"


def format_search_footer(pagination: PaginationInfo, token_info: TokenInfo, compact: bool = False) -> str:
    if compact:
        footer = f"\n---\n*Page {pagination.page}/{pagination.total_pages}"
        if pagination.has_next:
            footer += f" | page={pagination.page + 1} for more"
        return footer + "*\n"

    footer = f"**Page {pagination.page} of {pagination.total_pages}** ({token_info.token_count:,} tokens)"
    if pagination.has_next:
        footer += f" | Use `page={pagination.page + 1}` for more results"
    if token_info.truncated:
        footer += "\n*Results truncated due to token limit. Use a smaller `limit` or increase `maxTokens`.*"
    return footer + "\n\n" + GET_ARTICLE_HINT


def format_search_results(
    query: str,
    results: Sequence[SearchResult],
    filters: Dict[str, str],
    pagination: PaginationInfo,
    token_info: TokenInfo,
) -> str:
    markdown = f'# Search Results for "{query}"\n\n'
    markdown += (
        f"Found {pagination.total_items} result(s) | **Page {pagination.page} of {pagination.total_pages}**"
        f" | {token_info.token_count:,} tokens"
    )
    markdown += format_filters_line(filters)
    markdown += "\n\n---\n\n"
    for result in results:
        markdown += format_search_result(result)
    return markdown + format_search_footer(pagination, token_info)


def format_search_results_compact(
    query: str,
    results: Sequence[SearchResult],
    filters: Dict[str, str],
    pagination: PaginationInfo,
    token_info: TokenInfo,
) -> str:
    """One line per result, numbered across pages."""
    markdown = f'## "{query}" ({pagination.total_items} results)\n'
    markdown += format_filters_line(filters)
    markdown += "\n\n"
    first_number = (pagination.page - 1) * pagination.page_size + 1
    for offset, result in enumerate(results):
        snippet = result.snippet
        if len(snippet) > COMPACT_SNIPPET_CHARS:
            snippet = snippet[: COMPACT_SNIPPET_CHARS - 3] + "..."
        markdown += f"{first_number + offset}. [{result.title}]({result.url}) - {snippet}\n"
    return markdown + format_search_footer(pagination, token_info, compact=True)


# ---------------------------------------------------------------------------
# Articles
# ---------------------------------------------------------------------------


def format_breadcrumb(breadcrumb: Sequence[str]) -> str:
    return f"*{' > '.join(breadcrumb)}*\n\n" if breadcrumb else ""


def format_article_metadata(product: Optional[str], version: Optional[str], token_info: TokenInfo) -> str:
    meta = []
    if product:
        meta.append(f"**Product**: {product}")
    if version:
        meta.append(f"**Version**: {version}")
    meta.append(f"**Tokens**: {token_info.token_count:,}/{token_info.max_tokens:,}")
    if token_info.truncated:
        meta.append("*(truncated)*")
    return " | ".join(meta) + "\n\n"


def format_sections_list(sections: Sequence[Section], token_info: TokenInfo) -> str:
    """List sections of a truncated article so the caller can fetch one."""
    if not sections or not token_info.truncated:
        return ""
    output = "\n\n---\n\n## Available Sections\n\n"
    for section in sections[:MAX_LISTED_SECTIONS]:
        indent = "  " * max(0, section.level - 1)
        output += f"{indent}- **{section.title}** (~{section.token_count} tokens)\n"
    if len(sections) > MAX_LISTED_SECTIONS:
        output += f"\n*...and {len(sections) - MAX_LISTED_SECTIONS} more sections*\n"
    return output + "\n*Use `section` parameter to retrieve a specific section.*\n"


def format_related_articles(articles: Sequence[RelatedArticle]) -> str:
    if not articles:
        return ""
    output = "\n\n---\n\n## Related Articles\n\n"
    for related in articles:
        output += f"- [{related.title}]({related.url})\n"
    return output


def format_article_footer(url: str, token_info: TokenInfo, compact: bool = False) -> str:
    if compact:
        suffix = " (truncated)" if token_info.truncated else ""
        return f"\n---\n*[Source]({url}) | {token_info.token_count} tokens{suffix}*\n"

    footer = f"\n\n---\n\n*Source: [{url}]({url})*\n*{token_info.token_count:,} tokens"
    if token_info.truncated:
        footer += f" (truncated from original, max: {token_info.max_tokens:,})"
    return footer + "*\n"


def format_article(
    article: ArticleResult,
    section: Optional[str] = None,
    include_related: bool = False,
) -> str:
    markdown = format_breadcrumb(article.breadcrumb)
    markdown += f"# {article.title}\n\n"
    markdown += format_article_metadata(article.product, article.version, article.token_info)
    if section:
        markdown += f'*Showing section: "{section}"*\n\n'
    markdown += "---\n\n"
    markdown += article.content
    if not section:
        markdown += format_sections_list(article.sections, article.token_info)
    if include_related:
        markdown += format_related_articles(article.related_articles)
    return markdown + format_article_footer(article.url, article.token_info)


def format_article_compact(article: ArticleResult) -> str:
    markdown = f"# {article.title}\n\n"
    meta = []
    if article.product:
        meta.append(article.product)
    if article.version:
        meta.append(f"v{article.version}")
    if meta:
        markdown += f"*{' | '.join(meta)}*\n\n"
    markdown += article.content
    return markdown + format_article_footer(article.url, article.token_info, compact=True)


# ---------------------------------------------------------------------------
# Table of contents
# ---------------------------------------------------------------------------


def render_toc_entries(entries: Sequence[TocEntry], nested: bool = True) -> str:
    """Render entries as ``- [title](url)`` lines, children indented beneath."""
    lines: List[str] = []
    stack = [(entry, 0) for entry in reversed(entries)]
    while stack:
        entry, depth = stack.pop()
        lines.append(f"{'  ' * depth}- [{entry.title}]({entry.url})\n")
        if nested:
            stack.extend((child, depth + 1) for child in reversed(entry.children))
    return "".join(lines)


def format_toc(
    product_name: str,
    version: str,
    toc: Sequence[TocEntry],
    pagination: PaginationInfo,
    token_info: TokenInfo,
) -> str:
    markdown = f"# {product_name} Documentation\n\n"
    markdown += (
        f"**Version**: {version} | **Page {pagination.page} of {pagination.total_pages}**"
        f" | {token_info.token_count:,} tokens\n\n"
    )
    markdown += "---\n\n## Table of Contents\n\n"
    markdown += render_toc_entries(toc)
    markdown += "\n---\n\n"
    markdown += (
        f"**Page {pagination.page} of {pagination.total_pages}** ({token_info.token_count:,} tokens,"
        f" {pagination.total_items} total entries)"
    )
    if pagination.has_next:
        markdown += f" | Use `page={pagination.page + 1}` for more"
    if token_info.truncated:
        markdown += "\n*TOC truncated due to token limit. Use `page` parameter or increase `maxTokens`.*"
    return markdown + "\n\n*Use `jamf_docs_get_article` with any URL above to read the full content.*\n"


def format_toc_compact(product_name: str, toc: Sequence[TocEntry], pagination: PaginationInfo) -> str:
    """Top-level entries only."""
    markdown = f"## {product_name} TOC ({pagination.total_items} entries)\n\n"
    markdown += render_toc_entries(toc, nested=False)
    markdown += f"\n---\n*Page {pagination.page}/{pagination.total_pages}"
    if pagination.has_next:
        markdown += f" | page={pagination.page + 1} for more"
    return markdown + "*\n"


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def format_products(products: Sequence[Product], topics: Sequence[Topic]) -> str:
    """Product and topic listing, without the trailing token line."""
    markdown = "# Jamf Documentation Products\n\n"
    for product in products:
        markdown += f"## {product.name}\n\n"
        markdown += f"- **ID**: `{product.id}`\n"
        markdown += f"- **Description**: {product.description}\n"
        markdown += f"- **Current Version**: {product.latest_version}\n"
        markdown += f"- **Available Versions**: {', '.join(product.versions)}\n\n"

    markdown += "---\n\n# Available Topics for Filtering\n\n"
    markdown += "Use these topic IDs with the `topic` parameter in `jamf_docs_search`:\n\n"
    for topic in topics:
        keywords = ", ".join(topic.keywords[:TOPIC_KEYWORDS_SHOWN])
        more = "..." if len(topic.keywords) > TOPIC_KEYWORDS_SHOWN else ""
        markdown += f"- **`{topic.id}`**: {topic.name}\n"
        markdown += f"  *Keywords: {keywords}{more}*\n"
    return markdown + "\n---\n\n"


def format_products_footer(token_count: int) -> str:
    return (
        f"*{token_count:,} tokens*\n\n"
        "*Use `jamf_docs_search` to search within these products, "
        "or `jamf_docs_get_toc` to browse the table of contents.*\n"
    )
