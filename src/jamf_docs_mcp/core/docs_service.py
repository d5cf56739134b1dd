"""Documentation retrieval: search, articles and tables of contents.

``DocsService`` composes the HTTP client, the cache and the scraper with the
token-budgeted content pipeline. Every public method returns content already
sized to the caller's token budget.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jamf_docs_mcp.config.server import ServerConfig
from jamf_docs_mcp.core.cache import DocsCache
from jamf_docs_mcp.core.catalog import JAMF_PRODUCTS, JAMF_TOPICS, get_product, topic_matches
from jamf_docs_mcp.core.content import (
    PaginationInfo,
    Section,
    TokenInfo,
    create_token_info,
    extract_section,
    extract_sections,
    extract_summary,
    render_outline,
    truncate_items_to_token_limit,
    truncate_to_token_limit,
)
from jamf_docs_mcp.core.errors import DocsError, DocsNotFoundError
from jamf_docs_mcp.core.http import DocsHttpClient, to_backend_url, to_frontend_url
from jamf_docs_mcp.core.metadata import MetadataService
from jamf_docs_mcp.core.scraper import (
    ParsedArticle,
    RelatedArticle,
    TocEntry,
    count_toc_entries,
    parse_article_html,
    parse_toc_html,
    strip_html,
    toc_entry_to_string,
)

logger = logging.getLogger(__name__)

TOC_PAGE_SIZE = 10
BUNDLE_DISCOVERY_RESULTS = 10

_BUNDLE_SLUG = re.compile(r"^(jamf-[a-z]+)-documentation")


@dataclass
class SearchParams:
    query: str
    product: Optional[str] = None
    topic: Optional[str] = None
    version: Optional[str] = None
    limit: int = 10
    page: int = 1
    max_tokens: Optional[int] = None

    def cache_key(self) -> str:
        """Key for the unfiltered result list; page and budget do not affect it."""
        return "search:" + json.dumps({"query": self.query, "version": self.version}, sort_keys=True)


@dataclass
class SearchResult:
    title: str
    url: str
    snippet: str
    product: str
    version: str = "current"
    relevance: Optional[float] = None
    bundle_slug: Optional[str] = None
    matched_topics: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "product": self.product,
            "version": self.version,
        }
        if self.relevance is not None:
            data["relevance"] = self.relevance
        return data

    def to_cache(self) -> Dict[str, Any]:
        return {**self.to_dict(), "bundle_slug": self.bundle_slug, "matched_topics": self.matched_topics}

    @classmethod
    def from_cache(cls, data: Dict[str, Any]) -> "SearchResult":
        return cls(
            title=data["title"],
            url=data["url"],
            snippet=data["snippet"],
            product=data["product"],
            version=data.get("version", "current"),
            relevance=data.get("relevance"),
            bundle_slug=data.get("bundle_slug"),
            matched_topics=list(data.get("matched_topics") or []),
        )

    def to_budget_string(self) -> str:
        return f"{self.title}\n{self.snippet}\n{self.url}"


@dataclass
class SearchDocumentationResult:
    results: List[SearchResult]
    pagination: PaginationInfo
    token_info: TokenInfo


@dataclass
class ArticleResult:
    """A fetched article with its content sized to the requested budget."""

    title: str
    content: str
    url: str
    product: Optional[str]
    version: Optional[str]
    breadcrumb: List[str]
    related_articles: List[RelatedArticle]
    token_info: TokenInfo
    sections: List[Section]


@dataclass
class TocResult:
    toc: List[TocEntry]
    pagination: PaginationInfo
    token_info: TokenInfo


class DocsService:
    """Entry point for all documentation retrieval.

    Example:
        service = DocsService(config, client, cache)
        found = await service.search_documentation(SearchParams(query="filevault"))
    """

    def __init__(
        self,
        config: ServerConfig,
        client: DocsHttpClient,
        cache: DocsCache,
        metadata: Optional[MetadataService] = None,
    ):
        self.config = config
        self.client = client
        self.cache = cache
        self.api_url = config.requests.docs_api_url.rstrip("/")
        self.ratios = config.token_ratios()
        self.metadata = metadata or MetadataService(client, cache, self.api_url, config.cache.ttl_products)

    def _budget(self, max_tokens: Optional[int]) -> int:
        return max_tokens if max_tokens is not None else self.config.tokens.default_max_tokens

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _to_search_result(self, raw: Dict[str, Any]) -> SearchResult:
        match = _BUNDLE_SLUG.match(raw.get("bundle_id") or "")
        bundle_slug = match.group(1) if match else None

        product_entry = JAMF_PRODUCTS.get(bundle_slug) if bundle_slug else None
        if product_entry is not None:
            product_name = product_entry.name
        else:
            product_name = raw.get("publication_title") or "Jamf"

        max_snippet = self.config.pagination.max_snippet_length
        result = SearchResult(
            title=raw.get("title") or "Untitled",
            url=to_frontend_url(raw.get("url") or ""),
            snippet=strip_html(raw.get("snippet") or "")[:max_snippet],
            product=product_name,
            relevance=raw.get("score"),
            bundle_slug=bundle_slug,
        )
        haystack = f"{result.title} {result.snippet}"
        result.matched_topics = [topic_id for topic_id in JAMF_TOPICS if topic_matches(topic_id, haystack)]
        return result

    async def _fetch_search_results(self, params: SearchParams) -> List[SearchResult]:
        data = await self.client.get_json(
            f"{self.api_url}/api/search",
            params={"q": params.query, "rpp": self.config.pagination.max_search_results},
        )
        wrappers = data.get("Results") if isinstance(data, dict) else None
        if not isinstance(wrappers, list):
            raise ValueError("search response has no Results list")
        return [
            self._to_search_result(wrapper["leading_result"])
            for wrapper in wrappers
            if isinstance(wrapper, dict) and isinstance(wrapper.get("leading_result"), dict)
        ]

    async def search_documentation(self, params: SearchParams) -> SearchDocumentationResult:
        """Search, filter by product/topic, paginate and fit to the token budget.

        The unfiltered result list is cached, so paging and re-filtering the
        same query does not refetch.

        Raises:
            DocsError: When the backend request fails
        """
        max_tokens = self._budget(params.max_tokens)
        cache_key = params.cache_key()

        cached = self.cache.get(cache_key)
        if cached is not None:
            all_results = [SearchResult.from_cache(item) for item in cached]
        else:
            logger.info(
                "Search query=%r product=%s topic=%s",
                params.query,
                params.product or "all",
                params.topic or "all",
            )
            try:
                all_results = await self._fetch_search_results(params)
            except DocsError:
                raise
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.error("Unreadable search response for %r: %s", params.query, e)
                return SearchDocumentationResult(
                    results=[],
                    pagination=PaginationInfo(
                        page=1,
                        page_size=params.limit,
                        total_pages=0,
                        total_items=0,
                        has_next=False,
                        has_prev=False,
                        start_index=0,
                        end_index=0,
                    ),
                    token_info=create_token_info("", max_tokens, ratios=self.ratios),
                )
            self.cache.set(cache_key, [r.to_cache() for r in all_results], self.config.cache.ttl_search)

        filtered = all_results
        if params.product:
            filtered = [r for r in filtered if r.bundle_slug == params.product]
        if params.topic:
            filtered = [r for r in filtered if params.topic in r.matched_topics]

        fitted = truncate_items_to_token_limit(
            filtered,
            max_tokens,
            SearchResult.to_budget_string,
            page=params.page,
            page_size=params.limit,
            ratios=self.ratios,
        )
        return SearchDocumentationResult(
            results=fitted.items, pagination=fitted.pagination, token_info=fitted.token_info
        )

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------

    async def _load_article(self, url: str, include_related: bool) -> ParsedArticle:
        display_url = to_frontend_url(url)
        cache_key = f"article:{display_url}:related={int(include_related)}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return ParsedArticle.from_dict(cached)

        html = await self.client.get_html(to_backend_url(url))
        article = parse_article_html(html, display_url, include_related=include_related)
        self.cache.set(cache_key, article.to_dict(), self.config.cache.ttl_article)
        return article

    async def fetch_article(
        self,
        url: str,
        include_related: bool = False,
        section: Optional[str] = None,
        summary_only: bool = False,
        max_tokens: Optional[int] = None,
    ) -> ArticleResult:
        """Fetch an article and size it to the budget.

        Modes, in priority order: ``summary_only`` returns the outline body;
        ``section`` returns that section (or a list of available sections
        when it does not exist); otherwise the whole article is truncated.

        Raises:
            DocsError: When the page cannot be fetched
        """
        budget = self._budget(max_tokens)
        article = await self._load_article(url, include_related)
        all_sections = extract_sections(article.content, self.ratios)

        if summary_only:
            summary = extract_summary(article.content, article.title, budget, self.ratios)
            content = render_outline(summary)
            token_info = summary.token_info
        elif section:
            extracted = extract_section(article.content, section, budget, self.ratios)
            content = extracted.content
            token_info = extracted.token_info
            if extracted.section is None:
                listed = "\n".join(f"- {s.title}" for s in all_sections)
                content = f'*Section "{section}" not found.*\n\n**Available sections:**\n{listed}'
                token_info = create_token_info(content, budget, ratios=self.ratios)
        else:
            truncated = truncate_to_token_limit(article.content, budget, self.ratios)
            content = truncated.content
            token_info = truncated.token_info

        return ArticleResult(
            title=article.title,
            content=content,
            url=article.url,
            product=article.product,
            version=article.version,
            breadcrumb=article.breadcrumb,
            related_articles=article.related_articles,
            token_info=token_info,
            sections=all_sections,
        )

    # ------------------------------------------------------------------
    # Table of contents
    # ------------------------------------------------------------------

    async def discover_latest_bundle_id(self, product_id: str) -> Optional[str]:
        """Find the newest bundle of a product by probing search results."""
        product = get_product(product_id)
        try:
            data = await self.client.get_json(
                f"{self.api_url}/api/search",
                params={"q": product.name, "rpp": BUNDLE_DISCOVERY_RESULTS},
            )
        except DocsError as e:
            logger.warning("Error discovering bundle version for %s: %s", product_id, e)
            return None

        for wrapper in (data.get("Results") if isinstance(data, dict) else None) or []:
            leading = wrapper.get("leading_result") if isinstance(wrapper, dict) else None
            bundle_id = (leading or {}).get("bundle_id") or ""
            if bundle_id.startswith(product.bundle_id):
                return bundle_id
        return None

    async def _load_toc(self, product_id: str, version: str) -> List[TocEntry]:
        cache_key = f"toc:{product_id}:{version}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return [TocEntry.from_dict(item) for item in cached]

        bundle_id = await self.metadata.get_bundle_id_for_version(product_id, version)
        if not bundle_id:
            bundle_id = await self.discover_latest_bundle_id(product_id)
        if not bundle_id:
            raise DocsNotFoundError(f"Could not find bundle for {product_id} version {version}", status_code=None)

        toc_url = f"{self.api_url}/bundle/{bundle_id}/toc"
        logger.info("Fetching TOC from %s", toc_url)
        toc_json = await self.client.get_json(toc_url)

        entries: List[TocEntry] = []
        if isinstance(toc_json, dict):
            for html in toc_json.values():
                if isinstance(html, str) and "<ul" in html:
                    entries.extend(parse_toc_html(html))

        self.cache.set(cache_key, [e.to_dict() for e in entries], self.config.cache.ttl_toc)
        return entries

    async def fetch_table_of_contents(
        self,
        product_id: str,
        version: str = "current",
        page: int = 1,
        max_tokens: Optional[int] = None,
    ) -> TocResult:
        """Return one page of top-level TOC entries, children included.

        ``pagination.total_items`` counts every entry at every depth.

        Raises:
            InvalidProductError: Unknown product id
            DocsNotFoundError: No bundle exists for the product/version
        """
        get_product(product_id)
        budget = self._budget(max_tokens)
        entries = await self._load_toc(product_id, version or "current")

        fitted = truncate_items_to_token_limit(
            entries,
            budget,
            toc_entry_to_string,
            page=page,
            page_size=TOC_PAGE_SIZE,
            ratios=self.ratios,
        )
        fitted.pagination.total_items = count_toc_entries(entries)
        return TocResult(toc=fitted.items, pagination=fitted.pagination, token_info=fitted.token_info)
