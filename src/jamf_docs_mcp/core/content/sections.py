"""Heading-based section model for Markdown documents.

Provides:
    - generate_section_id(): Deterministic slug for a heading title
    - extract_sections(): Flat outline of every ATX heading with its cost
    - extract_section(): Pull one section (with nested subsections) out of a
      document, bounded by a token budget

Only ATX headings count (``#`` through ``######`` followed by whitespace).
``#Title`` without the space is ordinary content. Lines before the first
heading belong to no section.
"""

import re
from typing import List, Optional, Tuple

from jamf_docs_mcp.core.content.estimation import estimate_tokens
from jamf_docs_mcp.core.content.models import (
    ExtractSectionResult,
    Section,
    TokenRatios,
)

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")
_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def generate_section_id(title: str) -> str:
    """Slugify a heading title.

    Lowercases, collapses every run of characters outside ``[a-z0-9]`` into a
    single hyphen, and strips hyphens from both ends.

    Example:
        >>> generate_section_id("Step 2: Configure  SSO!")
        'step-2-configure-sso'
    """
    return _SLUG_SEPARATORS.sub("-", title.lower()).strip("-")


def _parse_heading(line: str) -> Optional[Tuple[int, str]]:
    """Return ``(level, title)`` when ``line`` is an ATX heading."""
    match = HEADING_PATTERN.match(line)
    if match is None:
        return None
    return len(match.group(1)), match.group(2).strip()


def extract_sections(document: str, ratios: Optional[TokenRatios] = None) -> List[Section]:
    """Build the outline of a document in order of appearance.

    Each section spans its heading line and every line up to (not including)
    the next heading of any level, each line counted with a trailing newline.
    A document with no headings yields an empty list.

    Args:
        document: Markdown text
        ratios: Token ratios forwarded to the estimator

    Returns:
        Sections in document order; ids may repeat
    """
    sections: List[Section] = []
    current: Optional[Tuple[int, str]] = None
    span: List[str] = []

    def flush() -> None:
        if current is None:
            return
        level, title = current
        sections.append(
            Section(
                id=generate_section_id(title),
                title=title,
                level=level,
                token_count=estimate_tokens("".join(span), ratios),
            )
        )

    for line in document.split("\n"):
        heading = _parse_heading(line)
        if heading is not None:
            flush()
            current = heading
            span = [f"{line}\n"]
        elif current is not None:
            span.append(f"{line}\n")

    flush()
    return sections


def _find_target_heading(lines: List[str], identifier: str) -> Optional[int]:
    """Locate the heading line that ``identifier`` refers to.

    An exact id match anywhere in the document wins over a case-insensitive
    title substring match; ties go to the earliest heading.
    """
    wanted_id = generate_section_id(identifier)
    needle = identifier.lower()
    substring_hit: Optional[int] = None

    for index, line in enumerate(lines):
        heading = _parse_heading(line)
        if heading is None:
            continue
        _, title = heading
        if generate_section_id(title) == wanted_id:
            return index
        if substring_hit is None and needle in title.lower():
            substring_hit = index

    return substring_hit


def extract_section(
    document: str,
    identifier: str,
    max_tokens: int,
    ratios: Optional[TokenRatios] = None,
) -> ExtractSectionResult:
    """Extract the section named by ``identifier``.

    The identifier may be a section id (``"prerequisites"``) or any fragment
    of the heading title. The returned span starts at the matched heading and
    runs until the next heading whose level is the same or shallower, so
    nested subsections come along. The span is then passed through the smart
    truncator.

    Args:
        document: Markdown text
        identifier: Section id or title fragment
        max_tokens: Budget for the returned content
        ratios: Token ratios forwarded to the estimator

    Returns:
        ExtractSectionResult. ``section`` is None and ``content`` is empty
        when nothing matched. On a match, ``section.token_count`` is the cost
        of the returned (possibly truncated) content.
    """
    # Local import: truncation depends on this module for the outline.
    from jamf_docs_mcp.core.content.truncation import truncate_to_token_limit

    lines = document.split("\n")
    target = _find_target_heading(lines, identifier)

    found: Optional[Section] = None
    collected: List[str] = []
    if target is not None:
        target_level, target_title = _parse_heading(lines[target])  # type: ignore[misc]
        found = Section(
            id=generate_section_id(target_title),
            title=target_title,
            level=target_level,
            token_count=0,
        )
        collected.append(lines[target])
        for line in lines[target + 1 :]:
            heading = _parse_heading(line)
            if heading is not None and heading[0] <= target_level:
                break
            collected.append(line)

    truncated = truncate_to_token_limit("\n".join(collected), max_tokens, ratios)
    if found is not None:
        found.token_count = truncated.token_info.token_count

    return ExtractSectionResult(
        content=truncated.content,
        section=found,
        token_info=truncated.token_info,
    )
