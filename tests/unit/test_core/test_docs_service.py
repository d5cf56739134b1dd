"""Tests for DocsService search, article and table-of-contents retrieval."""

import pytest

from jamf_docs_mcp.core.cache import DocsCache
from jamf_docs_mcp.core.docs_service import SearchParams, SearchResult
from jamf_docs_mcp.core.errors import DocsNotFoundError, InvalidProductError
from jamf_docs_mcp.core.scraper import ParsedArticle, RelatedArticle
from tests.fakes import search_hit, search_payload

ARTICLE_URL = "https://learn.jamf.com/en-US/bundle/jamf-pro-documentation/page/FileVault.html"
ARTICLE_PATH = "/en-US/bundle/jamf-pro-documentation/page/FileVault.html"

ARTICLE_MARKDOWN = """## Overview

FileVault encrypts the startup disk of managed computers so data stays protected.

## Requirements

You need Jamf Pro 10.40 or later and a configuration profile for key escrow.

### Escrow

Recovery keys are escrowed to Jamf Pro.
"""

ARTICLE_HTML = """
<html><body><h1>Configuring FileVault</h1>
<article><p>FileVault encrypts the startup disk of managed computers so data stays protected.</p></article>
<div class="related-topics"><a href="https://learn-be.jamf.com/en-US/bundle/jamf-pro-documentation/page/Escrow.html">Escrow</a></div>
</body></html>
"""


def _toc_fragment(titles, nested=None):
    nested = nested or {}
    items = []
    for title in titles:
        children = ""
        if title in nested:
            children = '<ul class="list-links">' + "".join(
                f'<li class="toc"><div class="inner"><a href="https://learn-be.jamf.com/{c}.html">{c}</a></div></li>'
                for c in nested[title]
            ) + "</ul>"
        items.append(
            f'<li class="toc"><div class="inner"><a href="https://learn-be.jamf.com/{title}.html">{title}</a></div>'
            f"{children}</li>"
        )
    return '<ul class="list-links">' + "".join(items) + "</ul>"


def _seed_article(cache, related=False, content=ARTICLE_MARKDOWN):
    article = ParsedArticle(
        title="Configuring FileVault",
        content=content,
        url=ARTICLE_URL,
        product="Jamf Pro",
        version="current",
        breadcrumb=["Jamf Pro", "Computers"],
    )
    cache.set(f"article:{ARTICLE_URL}:related={int(related)}", article.to_dict())


class TestSearchDocumentation:
    """Tests for DocsService.search_documentation()."""

    @pytest.mark.asyncio
    async def test_results_mapped(self, backend, make_service):
        """Test hit mapping: public URL, product name, stripped snippet."""
        backend.json(
            "/api/search",
            search_payload(search_hit("FileVault", "FileVault", snippet="<b>Encrypt</b> disks", score=3.5)),
        )
        found = await make_service().search_documentation(SearchParams(query="filevault"))

        assert len(found.results) == 1
        result = found.results[0]
        assert result.url == "https://learn.jamf.com/en-US/bundle/jamf-pro-documentation/page/FileVault.html"
        assert result.product == "Jamf Pro"
        assert result.snippet == "Encrypt disks"
        assert result.to_dict()["relevance"] == 3.5
        assert found.pagination.total_items == 1

    @pytest.mark.asyncio
    async def test_product_filter(self, backend, make_service):
        """Test that only hits from the requested product remain."""
        backend.json(
            "/api/search",
            search_payload(
                search_hit("Pro enrollment", "A"),
                search_hit("School enrollment", "B", bundle_id="jamf-school-documentation"),
            ),
        )
        found = await make_service().search_documentation(SearchParams(query="enrollment", product="jamf-school"))
        assert [r.title for r in found.results] == ["School enrollment"]
        assert found.results[0].product == "Jamf School"

    @pytest.mark.asyncio
    async def test_topic_filter(self, backend, make_service):
        """Test keyword-based topic filtering."""
        backend.json(
            "/api/search",
            search_payload(
                search_hit("FileVault recovery key", "A"),
                search_hit("Printers", "B", snippet="Add a CUPS printer"),
            ),
        )
        found = await make_service().search_documentation(SearchParams(query="keys", topic="filevault"))
        assert [r.title for r in found.results] == ["FileVault recovery key"]

    @pytest.mark.asyncio
    async def test_unknown_bundle_uses_publication_title(self, backend, make_service):
        """Test the product label for bundles outside the catalog."""
        hit = search_hit("Trust", "T", bundle_id="jamf-trust-guide")
        hit["publication_title"] = "Jamf Trust Guide"
        backend.json("/api/search", search_payload(hit))
        found = await make_service().search_documentation(SearchParams(query="trust"))
        assert found.results[0].product == "Jamf Trust Guide"

    @pytest.mark.asyncio
    async def test_snippet_length_capped(self, backend, make_service, test_config):
        """Test that snippets are cut to the configured length."""
        backend.json("/api/search", search_payload(search_hit("Long", "L", snippet="x" * 2000)))
        found = await make_service().search_documentation(SearchParams(query="long"))
        assert len(found.results[0].snippet) == test_config.pagination.max_snippet_length

    @pytest.mark.asyncio
    async def test_unfiltered_list_cached(self, backend, make_service, tmp_path):
        """Test that paging and re-filtering reuse the cached result list."""
        backend.json(
            "/api/search",
            search_payload(*[search_hit(f"Policy {i}", f"P{i}") for i in range(15)]),
        )
        service = make_service(cache=DocsCache(tmp_path / "c"))

        first = await service.search_documentation(SearchParams(query="policy", limit=10))
        second = await service.search_documentation(SearchParams(query="policy", limit=10, page=2))
        third = await service.search_documentation(SearchParams(query="policy", product="jamf-pro"))

        assert backend.paths() == ["/api/search"]
        assert len(first.results) == 10
        assert [r.title for r in second.results] == [f"Policy {i}" for i in range(10, 15)]
        assert third.pagination.total_items == 15

    @pytest.mark.asyncio
    async def test_budget_truncates_page(self, backend, make_service):
        """Test that a small budget cuts the page and flags more results."""
        backend.json(
            "/api/search",
            search_payload(*[search_hit(f"Result {i}", f"R{i}", snippet="word " * 80) for i in range(5)]),
        )
        found = await make_service().search_documentation(SearchParams(query="result", max_tokens=150))
        assert 0 < len(found.results) < 5
        assert found.token_info.truncated
        assert found.pagination.has_next
        assert found.token_info.token_count <= 150

    @pytest.mark.asyncio
    async def test_unreadable_response_is_empty(self, backend, make_service):
        """Test that a malformed payload yields an empty result set."""
        backend.json("/api/search", {"unexpected": True})
        found = await make_service().search_documentation(SearchParams(query="anything"))
        assert found.results == []
        assert found.pagination.total_items == 0

    @pytest.mark.asyncio
    async def test_backend_errors_propagate(self, backend, make_service):
        """Test that HTTP failures surface as DocsError."""
        with pytest.raises(DocsNotFoundError):
            await make_service().search_documentation(SearchParams(query="anything"))

    def test_cache_round_trip(self):
        """Test SearchResult cache serialization keeps filter fields."""
        result = SearchResult(
            title="T", url="u", snippet="s", product="Jamf Pro", bundle_slug="jamf-pro", matched_topics=["api"]
        )
        assert SearchResult.from_cache(result.to_cache()) == result
        assert "bundle_slug" not in result.to_dict()


class TestFetchArticle:
    """Tests for DocsService.fetch_article()."""

    @pytest.mark.asyncio
    async def test_fetches_from_backend_host(self, backend, make_service):
        """Test that articles are fetched from the pre-rendering host."""
        backend.html(ARTICLE_PATH, ARTICLE_HTML)
        article = await make_service().fetch_article(ARTICLE_URL)

        assert backend.requests[0].url.host == "learn-be.jamf.com"
        assert article.title == "Configuring FileVault"
        assert article.url == ARTICLE_URL
        assert article.product == "Jamf Pro"
        assert "FileVault encrypts" in article.content
        assert not article.token_info.truncated

    @pytest.mark.asyncio
    async def test_missing_article(self, backend, make_service):
        """Test that a 404 raises DocsNotFoundError."""
        with pytest.raises(DocsNotFoundError):
            await make_service().fetch_article(ARTICLE_URL)

    @pytest.mark.asyncio
    async def test_related_variant_cached_separately(self, backend, make_service, tmp_path):
        """Test that asking for related links after a plain fetch refetches."""
        backend.html(ARTICLE_PATH, ARTICLE_HTML)
        service = make_service(cache=DocsCache(tmp_path / "c"))

        plain = await service.fetch_article(ARTICLE_URL)
        related = await service.fetch_article(ARTICLE_URL, include_related=True)
        again = await service.fetch_article(ARTICLE_URL, include_related=True)

        assert plain.related_articles == []
        assert related.related_articles == [
            RelatedArticle(
                title="Escrow",
                url="https://learn.jamf.com/en-US/bundle/jamf-pro-documentation/page/Escrow.html",
            )
        ]
        assert again.related_articles == related.related_articles
        assert len(backend.requests) == 2

    @pytest.mark.asyncio
    async def test_section_extraction(self, make_service, tmp_path):
        """Test that a named section is returned alone."""
        cache = DocsCache(tmp_path / "c")
        _seed_article(cache)
        article = await make_service(cache=cache).fetch_article(ARTICLE_URL, section="Requirements")

        assert "Jamf Pro 10.40" in article.content
        assert "Recovery keys" in article.content
        assert "FileVault encrypts" not in article.content
        assert [s.title for s in article.sections] == ["Overview", "Requirements", "Escrow"]

    @pytest.mark.asyncio
    async def test_missing_section_lists_available(self, make_service, tmp_path):
        """Test the not-found message for an unknown section."""
        cache = DocsCache(tmp_path / "c")
        _seed_article(cache)
        article = await make_service(cache=cache).fetch_article(ARTICLE_URL, section="Nope")

        assert article.content.startswith('*Section "Nope" not found.*')
        assert "- Requirements" in article.content

    @pytest.mark.asyncio
    async def test_summary_only(self, make_service, tmp_path):
        """Test summary mode returns the outline body."""
        cache = DocsCache(tmp_path / "c")
        _seed_article(cache)
        article = await make_service(cache=cache).fetch_article(ARTICLE_URL, summary_only=True)

        assert article.content.startswith("## Summary\n\nFileVault encrypts")
        assert "## Article Outline (3 sections)" in article.content

    @pytest.mark.asyncio
    async def test_long_article_truncated(self, make_service, tmp_path):
        """Test that the whole-article mode respects the budget."""
        cache = DocsCache(tmp_path / "c")
        body = "\n\n".join(f"## Part {i}\n\n" + "lorem ipsum " * 40 for i in range(30))
        _seed_article(cache, content=body)
        article = await make_service(cache=cache).fetch_article(ARTICLE_URL, max_tokens=500)

        assert article.token_info.truncated
        assert article.token_info.max_tokens == 500
        assert len(article.sections) == 30


class TestFetchTableOfContents:
    """Tests for DocsService.fetch_table_of_contents()."""

    @pytest.fixture
    def toc_backend(self, backend):
        backend.json(
            "/api/search",
            search_payload(search_hit("Jamf Pro", "X", bundle_id="jamf-pro-documentation-11.5.0")),
        )
        titles = [f"Chapter {i}" for i in range(12)]
        backend.json(
            "/bundle/jamf-pro-documentation-11.5.0/toc",
            {
                "nav-0": _toc_fragment(titles[:6], nested={"Chapter 0": ["Intro A", "Intro B"]}),
                "nav-1": _toc_fragment(titles[6:]),
                "meta": 7,
            },
        )
        return backend

    @pytest.mark.asyncio
    async def test_first_page(self, toc_backend, make_service):
        """Test page size and recursive total."""
        toc = await make_service().fetch_table_of_contents("jamf-pro")

        assert [entry.title for entry in toc.toc] == [f"Chapter {i}" for i in range(10)]
        assert [child.title for child in toc.toc[0].children] == ["Intro A", "Intro B"]
        assert toc.pagination.total_items == 14
        assert toc.pagination.total_pages == 2
        assert toc.pagination.has_next

    @pytest.mark.asyncio
    async def test_second_page(self, toc_backend, make_service):
        """Test the final page window."""
        toc = await make_service().fetch_table_of_contents("jamf-pro", page=2)
        assert [entry.title for entry in toc.toc] == ["Chapter 10", "Chapter 11"]
        assert not toc.pagination.has_next

    @pytest.mark.asyncio
    async def test_explicit_version(self, toc_backend, make_service):
        """Test that a discovered version maps to its bundle."""
        toc = await make_service().fetch_table_of_contents("jamf-pro", version="11.5.0")
        assert "/bundle/jamf-pro-documentation-11.5.0/toc" in toc_backend.paths()
        assert len(toc.toc) == 10

    @pytest.mark.asyncio
    async def test_unknown_product(self, make_service):
        """Test that an unknown product id is rejected."""
        with pytest.raises(InvalidProductError):
            await make_service().fetch_table_of_contents("jamf-nothing")

    @pytest.mark.asyncio
    async def test_missing_toc(self, backend, make_service):
        """Test that a product without a TOC raises DocsNotFoundError."""
        backend.json("/api/search", search_payload())
        with pytest.raises(DocsNotFoundError):
            await make_service().fetch_table_of_contents("jamf-school")

    @pytest.mark.asyncio
    async def test_toc_cached(self, toc_backend, make_service, tmp_path):
        """Test that a cached TOC is served without requests."""
        service = make_service(cache=DocsCache(tmp_path / "c"))
        await service.fetch_table_of_contents("jamf-pro")
        count = len(toc_backend.requests)
        await service.fetch_table_of_contents("jamf-pro", page=2)
        assert len(toc_backend.requests) == count
