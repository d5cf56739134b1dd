"""Product version and topic discovery.

Versions come from the bundle ids the search API returns
(``jamf-pro-documentation-11.24.0``); topics combine the curated catalog
with section titles from each product's table of contents. Both fall back
to the static catalog when the backend is unreachable.
"""

import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from jamf_docs_mcp.core.cache import DocsCache
from jamf_docs_mcp.core.catalog import JAMF_PRODUCTS, JAMF_TOPICS, Product
from jamf_docs_mcp.core.errors import DocsError
from jamf_docs_mcp.core.http import DocsHttpClient

logger = logging.getLogger(__name__)

PRODUCTS_CACHE_KEY = "metadata:products"
TOPICS_CACHE_KEY = "metadata:topics"

VERSION_DISCOVERY_RESULTS = 100
METADATA_PROBE_RESULTS = 5
TOPIC_ID_MAX_LENGTH = 30

_BUNDLE_VERSION = re.compile(r"-(\d+\.\d+\.\d+)$")
_NAV_KEY = re.compile(r"^nav-(\d+)$")


@dataclass
class ProductMetadata:
    id: str
    name: str
    description: str
    bundle_id: str
    latest_version: str
    available_versions: List[str]
    label_key: str


@dataclass
class TopicMetadata:
    id: str
    name: str
    source: str  # "manual" or "toc"
    article_count: Optional[int] = None


@dataclass
class TocCategory:
    nav_id: str
    title: str
    article_count: int
    children: List[str] = field(default_factory=list)


def _version_key(version: str) -> List[int]:
    return [int(part) for part in version.split(".")]


def sort_versions_desc(versions: List[str]) -> List[str]:
    """Sort dotted numeric versions newest first."""
    return sorted(set(versions), key=_version_key, reverse=True)


def category_to_topic_id(title: str) -> str:
    """Slugify a TOC section title into a topic id."""
    slug = re.sub(r"[^a-z0-9\s-]", "", title.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")
    return slug[:TOPIC_ID_MAX_LENGTH]


def parse_toc_categories(toc_data: Dict[str, Any]) -> List[TocCategory]:
    """Extract one category per ``nav-N`` TOC fragment, ordered by N.

    The first link text in a fragment is the section title; the article
    count is the number of non-empty link texts.
    """
    navs = []
    for key, html in toc_data.items():
        match = _NAV_KEY.match(key)
        if match and isinstance(html, str) and "<ul" in html:
            navs.append((int(match.group(1)), key, html))

    categories: List[TocCategory] = []
    for _, nav_id, html in sorted(navs):
        soup = BeautifulSoup(html, "html.parser")
        titles = [a.get_text(strip=True) for a in soup.find_all("a")]
        titles = [t for t in titles if t]
        if titles:
            categories.append(
                TocCategory(nav_id=nav_id, title=titles[0], article_count=len(titles), children=titles[1:])
            )
    return categories


class MetadataService:
    """Discovers product versions and topic categories from the docs backend."""

    def __init__(self, client: DocsHttpClient, cache: DocsCache, api_url: str, ttl: int):
        self.client = client
        self.cache = cache
        self.api_url = api_url.rstrip("/")
        self.ttl = ttl

    async def _search(self, query: str, rpp: int) -> List[Dict[str, Any]]:
        data = await self.client.get_json(f"{self.api_url}/api/search", params={"q": query, "rpp": rpp})
        results = data.get("Results") if isinstance(data, dict) else None
        leading = []
        for wrapper in results or []:
            if isinstance(wrapper, dict) and isinstance(wrapper.get("leading_result"), dict):
                leading.append(wrapper["leading_result"])
        return leading

    async def discover_product_versions(self, product: Product) -> List[str]:
        """Versions with a published bundle for ``product``, newest first."""
        versions: List[str] = []
        try:
            results = await self._search(product.name, VERSION_DISCOVERY_RESULTS)
        except DocsError as e:
            logger.warning("Error discovering versions for %s: %s", product.id, e)
            return versions

        prefix = f"{product.bundle_id}-"
        for result in results:
            bundle_id = result.get("bundle_id")
            if not bundle_id:
                continue
            if bundle_id.startswith(prefix) or bundle_id == product.bundle_id:
                match = _BUNDLE_VERSION.search(bundle_id)
                if match:
                    versions.append(match.group(1))
        return sort_versions_desc(versions)

    async def fetch_product_metadata(self, product: Product) -> Optional[ProductMetadata]:
        available = await self.discover_product_versions(product)
        try:
            results = await self._search(product.name, METADATA_PROBE_RESULTS)
        except DocsError as e:
            logger.warning("Error fetching metadata for %s: %s", product.id, e)
            return None

        for result in results:
            bundle_id = result.get("bundle_id") or ""
            if not bundle_id.startswith(product.bundle_id):
                continue
            match = _BUNDLE_VERSION.search(bundle_id)
            latest = match.group(1) if match else "current"
            label_key = product.search_label
            for label in result.get("labels") or []:
                key = label.get("key", "") if isinstance(label, dict) else ""
                if key.startswith("product-") and key.count("-") == 1:
                    label_key = key
                    break
            return ProductMetadata(
                id=product.id,
                name=product.name,
                description=product.description,
                bundle_id=bundle_id,
                latest_version=latest,
                available_versions=available or [latest],
                label_key=label_key,
            )
        return None

    async def get_products_metadata(self) -> List[ProductMetadata]:
        """Metadata for every catalog product, cached under ``metadata:products``."""
        cached = self.cache.get(PRODUCTS_CACHE_KEY)
        if cached is not None:
            return [ProductMetadata(**item) for item in cached]

        products: List[ProductMetadata] = []
        for product in JAMF_PRODUCTS.values():
            metadata = await self.fetch_product_metadata(product)
            if metadata is None:
                metadata = ProductMetadata(
                    id=product.id,
                    name=product.name,
                    description=product.description,
                    bundle_id=product.bundle_id,
                    latest_version=product.latest_version,
                    available_versions=[product.latest_version],
                    label_key=product.search_label,
                )
            products.append(metadata)

        self.cache.set(PRODUCTS_CACHE_KEY, [asdict(p) for p in products], self.ttl)
        return products

    async def _find_product(self, product_id: str) -> Optional[ProductMetadata]:
        for metadata in await self.get_products_metadata():
            if metadata.id == product_id:
                return metadata
        return None

    async def get_bundle_id_for_version(self, product_id: str, version: Optional[str] = None) -> Optional[str]:
        """Bundle id serving ``version`` of a product, or None when unavailable.

        ``None``, ``"current"`` and ``"latest"`` select the newest bundle.
        """
        metadata = await self._find_product(product_id)
        if metadata is None:
            return None
        if version in (None, "", "current", "latest"):
            return metadata.bundle_id
        if version not in metadata.available_versions:
            logger.info(
                "Version %s not available for %s. Available: %s",
                version,
                product_id,
                ", ".join(metadata.available_versions),
            )
            return None
        return f"{JAMF_PRODUCTS[product_id].bundle_id}-{version}"

    async def get_available_versions(self, product_id: str) -> List[str]:
        metadata = await self._find_product(product_id)
        return list(metadata.available_versions) if metadata else []

    async def fetch_topic_categories(self, product_id: str) -> List[TocCategory]:
        metadata = await self._find_product(product_id)
        if metadata is None:
            return []
        try:
            toc_data = await self.client.get_json(f"{self.api_url}/bundle/{metadata.bundle_id}/toc")
        except DocsError as e:
            logger.warning("Error fetching TOC categories for %s: %s", product_id, e)
            return []
        if not isinstance(toc_data, dict):
            return []
        return parse_toc_categories(toc_data)

    async def get_topics_metadata(self) -> List[TopicMetadata]:
        """Curated topics merged with TOC sections of every product.

        A TOC section whose slug matches an existing topic adds its article
        count to that topic instead of creating a new one.
        """
        cached = self.cache.get(TOPICS_CACHE_KEY)
        if cached is not None:
            return [TopicMetadata(**item) for item in cached]

        topics: Dict[str, TopicMetadata] = {
            topic_id: TopicMetadata(id=topic_id, name=topic.name, source="manual")
            for topic_id, topic in JAMF_TOPICS.items()
        }

        for product_id in JAMF_PRODUCTS:
            for category in await self.fetch_topic_categories(product_id):
                topic_id = category_to_topic_id(category.title)
                existing = topics.get(topic_id)
                if existing is None:
                    topics[topic_id] = TopicMetadata(
                        id=topic_id, name=category.title, source="toc", article_count=category.article_count
                    )
                else:
                    existing.article_count = (existing.article_count or 0) + category.article_count

        result = list(topics.values())
        self.cache.set(TOPICS_CACHE_KEY, [asdict(t) for t in result], self.ttl)
        return result

    async def get_products_resource_data(self) -> Dict[str, Any]:
        products = await self.get_products_metadata()
        return {
            "description": "Available Jamf products for documentation search",
            "products": [
                {
                    "id": p.id,
                    "name": p.name,
                    "description": p.description,
                    "latestVersion": p.latest_version,
                    "availableVersions": p.available_versions,
                    "bundleId": p.bundle_id,
                }
                for p in products
            ],
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
            "usage": (
                'Use product ID (e.g., "jamf-pro") with jamf_docs_search or jamf_docs_get_toc tools. '
                "Use version parameter to query specific versions."
            ),
        }

    async def get_topics_resource_data(self) -> Dict[str, Any]:
        topics = await self.get_topics_metadata()
        entries = []
        for topic in topics:
            entry: Dict[str, Any] = {"id": topic.id, "name": topic.name, "source": topic.source}
            if topic.article_count is not None:
                entry["articleCount"] = topic.article_count
            entries.append(entry)
        return {
            "description": "Topic categories for filtering Jamf documentation searches",
            "totalTopics": len(topics),
            "topics": entries,
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
            "usage": 'Use topic ID (e.g., "enrollment") with jamf_docs_search tool to filter results',
        }
