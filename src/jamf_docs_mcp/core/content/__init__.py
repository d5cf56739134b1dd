"""Token-budgeted content pipeline for documentation responses.

Turns Markdown documents and item lists into size-bounded payloads for
LLM clients. Everything here is pure and synchronous.

Key Components:
    - estimate_tokens(): Character-ratio token estimate, code priced apart
    - extract_sections() / extract_section(): Heading outline and
      section-scoped retrieval
    - truncate_to_token_limit(): Line-boundary truncation that keeps code
      fences balanced and lists the sections left out
    - extract_summary(): Lead paragraph, outline and read time
    - calculate_pagination(): Clamped page-number windows
    - truncate_items_to_token_limit(): Page of items trimmed to a budget

Usage:
    from jamf_docs_mcp.core.content import (
        extract_section,
        truncate_to_token_limit,
        truncate_items_to_token_limit,
    )

    result = truncate_to_token_limit(markdown, max_tokens=2000)
    if result.token_info.truncated:
        names = [s.title for s in result.remaining_sections or []]

    page = truncate_items_to_token_limit(
        results, 5000, lambda r: f"{r.title}\\n{r.snippet}\\n{r.url}", page=2
    )
"""

from .estimation import create_token_info, estimate_tokens
from .models import (
    DEFAULT_RATIOS,
    ExtractSectionResult,
    FittedItems,
    PaginationInfo,
    Section,
    SummaryResult,
    TokenInfo,
    TokenRatios,
    TruncateResult,
)
from .pagination import calculate_pagination, truncate_items_to_token_limit
from .sections import extract_section, extract_sections, generate_section_id
from .summary import extract_summary, render_outline, render_summary
from .truncation import build_truncation_notice, truncate_to_token_limit

__all__ = [
    # Models
    "DEFAULT_RATIOS",
    "ExtractSectionResult",
    "FittedItems",
    "PaginationInfo",
    "Section",
    "SummaryResult",
    "TokenInfo",
    "TokenRatios",
    "TruncateResult",
    # Estimation
    "create_token_info",
    "estimate_tokens",
    # Sections
    "extract_section",
    "extract_sections",
    "generate_section_id",
    # Truncation
    "build_truncation_notice",
    "truncate_to_token_limit",
    # Summary
    "extract_summary",
    "render_outline",
    "render_summary",
    # Pagination
    "calculate_pagination",
    "truncate_items_to_token_limit",
]
