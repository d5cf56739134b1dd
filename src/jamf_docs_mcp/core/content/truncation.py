"""Structure-aware truncation of Markdown to a token budget.

The truncator cuts on line boundaries, never leaves a fenced code block
open, and appends a notice listing the sections that did not make it so the
caller can ask for them by name.
"""

import logging
import math
from typing import List, Optional

from jamf_docs_mcp.core.content.estimation import estimate_tokens
from jamf_docs_mcp.core.content.models import (
    DEFAULT_RATIOS,
    Section,
    TokenInfo,
    TokenRatios,
    TruncateResult,
)
from jamf_docs_mcp.core.content.sections import extract_sections

logger = logging.getLogger(__name__)

FENCE = "```"
MAX_NOTICE_RESERVE = 500
NOTICE_RESERVE_RATIO = 0.1
MAX_LISTED_SECTIONS = 10

TRUNCATION_MARKER = "\n\n---\n\n*[Content truncated due to token limit]*\n"


def _reserved_tokens(max_tokens: int) -> int:
    return min(MAX_NOTICE_RESERVE, int(max_tokens * NOTICE_RESERVE_RATIO))


def build_truncation_notice(remaining: List[Section]) -> str:
    """Render the footer appended to truncated content.

    Lists at most ten remaining sections, indented by heading level, then a
    count of any overflow and a hint about the ``section`` parameter.
    """
    notice = TRUNCATION_MARKER
    if not remaining:
        return notice

    notice += "\n**Remaining sections:**\n"
    for section in remaining[:MAX_LISTED_SECTIONS]:
        indent = "  " * max(0, section.level - 1)
        notice += f"{indent}- {section.title} (~{section.token_count} tokens)\n"
    if len(remaining) > MAX_LISTED_SECTIONS:
        notice += f"\n*...and {len(remaining) - MAX_LISTED_SECTIONS} more sections*\n"
    notice += "\n*Use the `section` parameter to retrieve specific sections.*"
    return notice


def truncate_to_token_limit(
    document: str,
    max_tokens: int,
    ratios: Optional[TokenRatios] = None,
) -> TruncateResult:
    """Fit ``document`` into ``max_tokens``.

    Documents already within budget come back unchanged. Otherwise a reserve
    of ``min(500, floor(max_tokens * 0.1))`` tokens is set aside for the
    notice, and lines are kept while their running cost (each line priced
    with its newline, at the code ratio inside a fenced block) stays within
    what is left. If the cut falls inside a fenced block, a closing fence is
    appended.

    Args:
        document: Markdown text
        max_tokens: Token budget
        ratios: Token ratios forwarded to the estimator

    Returns:
        TruncateResult whose ``token_info.token_count`` prices the full
        returned string, notice included. ``remaining_sections`` is only set
        when truncation happened.
    """
    current = estimate_tokens(document, ratios)
    if current <= max_tokens:
        return TruncateResult(
            content=document,
            token_info=TokenInfo(token_count=current, truncated=False, max_tokens=max_tokens),
        )

    ratios = ratios or DEFAULT_RATIOS
    all_sections = extract_sections(document, ratios)
    effective_max = max_tokens - _reserved_tokens(max_tokens)

    kept: List[str] = []
    running = 0
    in_code_block = False
    for line in document.split("\n"):
        # Fence lines and lines inside a fence are priced as code.
        if in_code_block or line.startswith(FENCE):
            line_tokens = math.ceil((len(line) + 1) / ratios.code_chars_per_token)
        else:
            line_tokens = estimate_tokens(f"{line}\n", ratios)
        if running + line_tokens > effective_max:
            # Fence state tracks kept lines only; output fences must balance.
            if in_code_block:
                kept.append(FENCE)
            break

        if line.startswith(FENCE):
            in_code_block = not in_code_block
        kept.append(line)
        running += line_tokens

    truncated_text = "\n".join(kept)
    included_ids = {section.id for section in extract_sections(truncated_text, ratios)}
    remaining = [section for section in all_sections if section.id not in included_ids]

    content = truncated_text + build_truncation_notice(remaining)
    logger.debug(
        f"Truncated document from {current} to {running} tokens "
        f"({len(remaining)} sections omitted)"
    )

    return TruncateResult(
        content=content,
        token_info=TokenInfo(
            token_count=estimate_tokens(content, ratios),
            truncated=True,
            max_tokens=max_tokens,
        ),
        remaining_sections=remaining,
    )
