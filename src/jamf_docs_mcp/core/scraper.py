"""HTML parsing for learn.jamf.com articles and table-of-contents fragments.

Articles are fetched from the pre-rendering backend as HTML, cleaned, and
converted to Markdown so the token pipeline can split them on headings.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import trafilatura
from bs4 import BeautifulSoup, Tag

from jamf_docs_mcp.core.catalog import JAMF_PRODUCTS, Selectors
from jamf_docs_mcp.core.http import to_frontend_url

logger = logging.getLogger(__name__)

DOCS_BASE_URL = "https://learn.jamf.com"

HTML_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}

MIN_EXTRACTED_CHARS = 40

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_BLANK_RUNS = re.compile(r"\n{3,}")
_BUNDLE_PATTERN = re.compile(r"/bundle/([^/]+?)-documentation(?:-(\d+(?:\.\d+)*))?/")
_LEGACY_VERSION = re.compile(r"^\d+\.\d+(\.\d+)?$")


@dataclass
class RelatedArticle:
    title: str
    url: str


@dataclass
class ParsedArticle:
    """An article as scraped, before any token budgeting."""

    title: str
    content: str
    url: str
    product: Optional[str] = None
    version: Optional[str] = None
    breadcrumb: List[str] = field(default_factory=list)
    related_articles: List[RelatedArticle] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "url": self.url,
            "product": self.product,
            "version": self.version,
            "breadcrumb": list(self.breadcrumb),
            "related_articles": [{"title": r.title, "url": r.url} for r in self.related_articles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParsedArticle":
        return cls(
            title=data.get("title", "Untitled"),
            content=data.get("content", ""),
            url=data.get("url", ""),
            product=data.get("product"),
            version=data.get("version"),
            breadcrumb=list(data.get("breadcrumb") or []),
            related_articles=[
                RelatedArticle(title=r["title"], url=r["url"]) for r in data.get("related_articles") or []
            ],
        )


@dataclass
class TocEntry:
    """A table-of-contents node. ``children`` is empty for leaves."""

    title: str
    url: str
    children: List["TocEntry"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize iteratively; ``children`` is omitted on leaves."""
        root: Dict[str, Any] = {"title": self.title, "url": self.url}
        stack: List[Tuple["TocEntry", Dict[str, Any]]] = [(self, root)]
        while stack:
            entry, out = stack.pop()
            if entry.children:
                out["children"] = []
                for child in entry.children:
                    child_out: Dict[str, Any] = {"title": child.title, "url": child.url}
                    out["children"].append(child_out)
                    stack.append((child, child_out))
        return root

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TocEntry":
        root = cls(title=data["title"], url=data["url"])
        stack: List[Tuple["TocEntry", Dict[str, Any]]] = [(root, data)]
        while stack:
            entry, raw = stack.pop()
            for raw_child in raw.get("children") or []:
                child = cls(title=raw_child["title"], url=raw_child["url"])
                entry.children.append(child)
                stack.append((child, raw_child))
        return root


def strip_html(html: str) -> str:
    """Remove tags (repeatedly, for nested fragments), decode basic entities, collapse whitespace."""
    text = html
    previous = None
    while previous != text:
        previous = text
        text = _TAG_PATTERN.sub("", text)
    for entity, char in HTML_ENTITIES.items():
        text = text.replace(entity, char)
    return _WHITESPACE.sub(" ", text).strip()


def clean_html(soup: BeautifulSoup, base_url: str = DOCS_BASE_URL) -> None:
    """Drop scripts and tracking nodes, and absolutise root-relative links in place."""
    for node in soup.select(Selectors.REMOVE):
        node.decompose()
    for anchor in soup.select('a[href^="/"]'):
        anchor["href"] = f"{base_url}{anchor['href']}"
    for image in soup.select('img[src^="/"]'):
        image["src"] = f"{base_url}{image['src']}"


def _inline_text(node: Tag) -> str:
    return _WHITESPACE.sub(" ", node.get_text(" ", strip=True))


def _soup_to_markdown(fragment: str) -> str:
    """Structural fallback: headings, code blocks, list items and paragraphs."""
    soup = BeautifulSoup(fragment, "html.parser")
    blocks: List[str] = []
    block_tags = ("h1", "h2", "h3", "h4", "h5", "h6", "pre", "li", "p", "tr")
    for node in soup.find_all(block_tags):
        if node.find_parent("pre") is not None:
            continue
        if node.name != "pre" and node.find(block_tags) is not None:
            continue
        if node.name == "pre":
            code = node.find("code")
            language = ""
            if code is not None:
                classes = code.get("class") or []
                language = next((c.replace("language-", "") for c in classes if c.startswith("language-")), "")
            blocks.append(f"```{language}\n{node.get_text().strip()}\n```")
            continue
        text = _inline_text(node)
        if not text:
            continue
        if node.name.startswith("h"):
            blocks.append(f"{'#' * int(node.name[1])} {text}")
        elif node.name == "li":
            blocks.append(f"- {text}")
        elif node.name == "tr":
            cells = [_inline_text(cell) for cell in node.find_all(["td", "th"])]
            blocks.append("| " + " | ".join(cells) + " |")
        else:
            blocks.append(text)

    if not blocks:
        return soup.get_text("\n").strip()
    return "\n\n".join(blocks)


def html_to_markdown(fragment: str) -> str:
    """Convert an article content fragment to Markdown.

    trafilatura does the conversion; very short or empty extractions fall
    back to a BeautifulSoup walk that keeps headings and code blocks.
    """
    if not fragment.strip():
        return ""
    markdown = trafilatura.extract(
        fragment,
        output_format="markdown",
        include_comments=False,
        include_tables=True,
        include_links=True,
        include_formatting=True,
        favor_recall=True,
    )
    if not markdown or len(markdown.strip()) < MIN_EXTRACTED_CHARS:
        markdown = _soup_to_markdown(fragment)
    return _BLANK_RUNS.sub("\n\n", markdown).strip()


def extract_product_info(url: str) -> Tuple[Optional[str], Optional[str]]:
    """Guess ``(product_name, version)`` from a documentation URL.

    Handles learn.jamf.com bundle URLs, legacy docs.jamf.com
    ``/{version}/{product}/`` paths, and bare product mentions.
    """
    bundle_match = _BUNDLE_PATTERN.search(url)
    if bundle_match is not None:
        slug = bundle_match.group(1)
        product = next((p for p in JAMF_PRODUCTS.values() if slug in p.bundle_id), None)
        return (product.name if product else None, bundle_match.group(2) or "current")

    parts = [part for part in urlparse(url).path.split("/") if part]
    if parts and _LEGACY_VERSION.match(parts[0]):
        segment = parts[1] if len(parts) > 1 else ""
        product = next((p for p in JAMF_PRODUCTS.values() if segment and segment in p.url_pattern), None)
        return (product.name if product else None, parts[0])

    product = next((p for p in JAMF_PRODUCTS.values() if p.bundle_id in url or p.id in url), None)
    if product is None:
        return (None, None)
    return (product.name, "current")


def parse_article_html(html: str, url: str, include_related: bool = False) -> ParsedArticle:
    """Parse a rendered article page into a ``ParsedArticle``.

    Args:
        html: Page HTML from the backend host
        url: Public URL of the article, used for display and product detection
        include_related: Whether to collect related-article links
    """
    soup = BeautifulSoup(html, "html.parser")
    clean_html(soup)

    title_node = soup.select_one(Selectors.TITLE)
    title = title_node.get_text(strip=True) if title_node is not None else ""

    content_node = soup.select_one(Selectors.CONTENT)
    content_html = content_node.decode_contents() if content_node is not None else ""

    breadcrumb = [text for text in (a.get_text(strip=True) for a in soup.select(Selectors.BREADCRUMB)) if text]

    related: List[RelatedArticle] = []
    if include_related:
        for anchor in soup.select(Selectors.RELATED):
            link_title = anchor.get_text(strip=True)
            href = anchor.get("href") or ""
            if link_title and href:
                related.append(RelatedArticle(title=link_title, url=to_frontend_url(href)))

    product, version = extract_product_info(url)

    return ParsedArticle(
        title=title or "Untitled",
        content=html_to_markdown(content_html),
        url=url,
        product=product,
        version=version,
        breadcrumb=breadcrumb,
        related_articles=related,
    )


def _direct_children(node: Tag, name: str, css_class: str) -> List[Tag]:
    return [
        child
        for child in node.children
        if isinstance(child, Tag) and child.name == name and css_class in (child.get("class") or [])
    ]


def _toc_link(item: Tag) -> Optional[Tuple[str, str]]:
    for inner in _direct_children(item, "div", "inner"):
        for child in inner.children:
            if isinstance(child, Tag) and child.name == "a":
                title = child.get_text(strip=True)
                href = child.get("href") or ""
                if title and href:
                    return title, to_frontend_url(href)
                return None
    return None


def parse_toc_html(html: str) -> List[TocEntry]:
    """Parse a Zoomin TOC fragment (``ul.list-links > li.toc`` nesting).

    Items lacking a title or link are dropped along with their subtrees.
    """
    soup = BeautifulSoup(html, "html.parser")
    roots: List[TocEntry] = []
    pending: List[Tuple[Tag, List[TocEntry]]] = []

    for top in soup.select("ul.list-links > li.toc"):
        if top.find_parent("li", class_="toc") is None:
            pending.append((top, roots))

    # Each item is appended to its parent's list when dequeued, so sibling
    # order follows document order.
    index = 0
    while index < len(pending):
        item, siblings = pending[index]
        index += 1
        link = _toc_link(item)
        if link is None:
            continue
        entry = TocEntry(title=link[0], url=link[1])
        siblings.append(entry)
        for sublist in _direct_children(item, "ul", "list-links"):
            for child in _direct_children(sublist, "li", "toc"):
                pending.append((child, entry.children))

    return roots


def toc_entry_to_string(entry: TocEntry, depth: int = 0) -> str:
    """Render an entry and its descendants as indented ``- title`` lines."""
    lines: List[str] = []
    stack: List[Tuple[TocEntry, int]] = [(entry, depth)]
    while stack:
        node, level = stack.pop()
        lines.append(f"{'  ' * level}- {node.title}\n")
        for child in reversed(node.children):
            stack.append((child, level + 1))
    return "".join(lines)


def count_toc_entries(entries: List[TocEntry]) -> int:
    """Count entries including all descendants."""
    count = 0
    stack = list(entries)
    while stack:
        node = stack.pop()
        count += 1
        stack.extend(node.children)
    return count
