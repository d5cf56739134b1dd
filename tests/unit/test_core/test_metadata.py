"""Tests for product version and topic discovery."""

import pytest

from jamf_docs_mcp.core.cache import DocsCache
from jamf_docs_mcp.core.catalog import JAMF_PRODUCTS, JAMF_TOPICS
from jamf_docs_mcp.core.metadata import (
    category_to_topic_id,
    parse_toc_categories,
    sort_versions_desc,
)
from tests.fakes import search_hit, search_payload


def _versioned_hits():
    return search_payload(
        search_hit("A", "A", bundle_id="jamf-pro-documentation-11.5.0"),
        search_hit("B", "B", bundle_id="jamf-pro-documentation-11.24.0"),
        search_hit("C", "C", bundle_id="jamf-protect-documentation-5.0.0"),
        search_hit("D", "D", bundle_id="jamf-pro-documentation"),
    )


class TestHelpers:
    """Tests for the pure helpers."""

    def test_sort_versions_numeric(self):
        """Test numeric ordering and de-duplication."""
        assert sort_versions_desc(["10.2.0", "11.5.0", "10.10.0", "11.5.0"]) == ["11.5.0", "10.10.0", "10.2.0"]

    def test_topic_id_slug(self):
        """Test slugification of section titles."""
        assert category_to_topic_id("Self Service & Apps!") == "self-service-apps"
        assert category_to_topic_id("  --Leading--  ") == "leading"

    def test_topic_id_length(self):
        """Test that long slugs are cut to 30 characters."""
        assert len(category_to_topic_id("a very long section title about many things")) == 30

    def test_parse_toc_categories(self):
        """Test nav-N ordering, counts and skipped fragments."""
        categories = parse_toc_categories(
            {
                "nav-10": "<ul><li><a>Later</a></li></ul>",
                "nav-2": "<ul><li><a>Enrollment</a></li><li><a>ADE</a></li><li><a> </a></li></ul>",
                "meta": "<ul><li><a>Ignored</a></li></ul>",
                "nav-3": "no list here",
            }
        )
        assert [(c.nav_id, c.title, c.article_count) for c in categories] == [
            ("nav-2", "Enrollment", 2),
            ("nav-10", "Later", 1),
        ]
        assert categories[0].children == ["ADE"]


class TestProductMetadata:
    """Tests for version discovery and product metadata."""

    @pytest.mark.asyncio
    async def test_discover_versions(self, backend, make_service):
        """Test that only the product's own versioned bundles count."""
        backend.json("/api/search", _versioned_hits())
        metadata = make_service().metadata
        versions = await metadata.discover_product_versions(JAMF_PRODUCTS["jamf-pro"])
        assert versions == ["11.24.0", "11.5.0"]

    @pytest.mark.asyncio
    async def test_discovery_failure_returns_empty(self, backend, make_service):
        """Test that a backend failure is not fatal."""
        backend.status("/api/search", 500)
        metadata = make_service().metadata
        assert await metadata.discover_product_versions(JAMF_PRODUCTS["jamf-pro"]) == []

    @pytest.mark.asyncio
    async def test_products_fall_back_to_catalog(self, backend, make_service):
        """Test static metadata when discovery finds nothing."""
        backend.status("/api/search", 500)
        products = await make_service().metadata.get_products_metadata()

        assert [p.id for p in products] == list(JAMF_PRODUCTS)
        pro = products[0]
        assert pro.bundle_id == "jamf-pro-documentation"
        assert pro.latest_version == "current"
        assert pro.available_versions == ["current"]
        assert pro.label_key == "product-pro"

    @pytest.mark.asyncio
    async def test_product_label_key(self, backend, make_service):
        """Test that a single-hyphen product label replaces the default."""
        hit = search_hit("A", "A", bundle_id="jamf-pro-documentation-11.5.0")
        hit["labels"] = [{"key": "product-pro-admin"}, {"key": "product-jamfpro"}]
        backend.json("/api/search", search_payload(hit))

        metadata = await make_service().metadata.fetch_product_metadata(JAMF_PRODUCTS["jamf-pro"])
        assert metadata.label_key == "product-jamfpro"
        assert metadata.latest_version == "11.5.0"
        assert metadata.bundle_id == "jamf-pro-documentation-11.5.0"
        assert metadata.available_versions == ["11.5.0"]

    @pytest.mark.asyncio
    async def test_bundle_for_version(self, backend, make_service):
        """Test bundle resolution for latest, known and unknown versions."""
        backend.json("/api/search", _versioned_hits())
        metadata = make_service().metadata

        assert await metadata.get_bundle_id_for_version("jamf-pro") == "jamf-pro-documentation-11.5.0"
        assert await metadata.get_bundle_id_for_version("jamf-pro", "latest") == "jamf-pro-documentation-11.5.0"
        assert await metadata.get_bundle_id_for_version("jamf-pro", "11.24.0") == "jamf-pro-documentation-11.24.0"
        assert await metadata.get_bundle_id_for_version("jamf-pro", "9.0.0") is None
        assert await metadata.get_bundle_id_for_version("jamf-nothing") is None

    @pytest.mark.asyncio
    async def test_available_versions(self, backend, make_service):
        """Test get_available_versions for known and unknown products."""
        backend.json("/api/search", _versioned_hits())
        metadata = make_service().metadata
        assert await metadata.get_available_versions("jamf-pro") == ["11.24.0", "11.5.0"]
        assert await metadata.get_available_versions("jamf-nothing") == []

    @pytest.mark.asyncio
    async def test_products_cached(self, backend, make_service, tmp_path):
        """Test that product metadata is computed once per TTL."""
        backend.json("/api/search", _versioned_hits())
        metadata = make_service(cache=DocsCache(tmp_path / "c")).metadata

        first = await metadata.get_products_metadata()
        count = len(backend.requests)
        second = await metadata.get_products_metadata()
        assert len(backend.requests) == count
        assert second == first


class TestTopicsMetadata:
    """Tests for topic discovery."""

    @pytest.mark.asyncio
    async def test_merges_toc_sections(self, backend, make_service):
        """Test that TOC sections extend the curated topics."""
        backend.json("/api/search", search_payload())
        backend.json(
            "/bundle/jamf-pro-documentation/toc",
            {
                "nav-0": "<ul><li><a>Enrollment</a></li><li><a>Methods</a></li></ul>",
                "nav-1": "<ul><li><a>Smart Computer Groups</a></li></ul>",
            },
        )
        topics = await make_service().metadata.get_topics_metadata()
        by_id = {topic.id: topic for topic in topics}

        assert len(topics) == len(JAMF_TOPICS) + 1
        assert by_id["enrollment"].source == "manual"
        assert by_id["enrollment"].article_count == 2
        assert by_id["smart-computer-groups"].source == "toc"
        assert by_id["smart-computer-groups"].article_count == 1
        assert by_id["filevault"].article_count is None

    @pytest.mark.asyncio
    async def test_resource_payloads(self, backend, make_service):
        """Test the JSON shapes served as MCP resources."""
        backend.json("/api/search", search_payload())
        backend.json("/bundle/jamf-pro-documentation/toc", {"nav-0": "<ul><li><a>Enrollment</a></li></ul>"})
        metadata = make_service().metadata

        products = await metadata.get_products_resource_data()
        assert [p["id"] for p in products["products"]] == list(JAMF_PRODUCTS)
        assert set(products["products"][0]) == {
            "id", "name", "description", "latestVersion", "availableVersions", "bundleId",
        }
        assert "lastUpdated" in products

        topics = await metadata.get_topics_resource_data()
        assert topics["totalTopics"] == len(JAMF_TOPICS)
        entries = {entry["id"]: entry for entry in topics["topics"]}
        assert entries["enrollment"]["articleCount"] == 1
        assert "articleCount" not in entries["api"]
