"""Summary extraction: lead paragraph, outline and reading-time estimate."""

import math
import re
from typing import List, Optional

from jamf_docs_mcp.core.content.estimation import estimate_tokens
from jamf_docs_mcp.core.content.models import SummaryResult, TokenInfo, TokenRatios
from jamf_docs_mcp.core.content.sections import extract_sections

FALLBACK_SUMMARY_CHARS = 200
CHARS_PER_WORD = 5
WORDS_PER_MINUTE = 200

_HEADING_LINE = re.compile(r"^#+\s+.+$", re.MULTILINE)
_NEWLINE_RUNS = re.compile(r"\n+")
_NON_PARAGRAPH_PREFIXES = ("-", "*", "|")


def _first_paragraph(document: str) -> str:
    """Return the first run of prose lines joined with single spaces.

    Fenced code, headings, list items and table rows are skipped before the
    paragraph starts and end it once it has started.
    """
    parts: List[str] = []
    in_paragraph = False
    in_code_block = False

    for line in document.split("\n"):
        if line.startswith("```"):
            in_code_block = not in_code_block
            if in_paragraph:
                break
            continue
        if in_code_block:
            continue

        if line.startswith("#"):
            if in_paragraph:
                break
            continue

        stripped = line.strip()
        if not stripped:
            if in_paragraph:
                break
            continue

        if stripped.startswith(_NON_PARAGRAPH_PREFIXES):
            if in_paragraph:
                break
            continue

        in_paragraph = True
        parts.append(line)

    return " ".join(parts).strip()


def _fallback_summary(document: str) -> str:
    plain = _NEWLINE_RUNS.sub(" ", _HEADING_LINE.sub("", document)).strip()
    if len(plain) > FALLBACK_SUMMARY_CHARS:
        return plain[:FALLBACK_SUMMARY_CHARS] + "..."
    return plain


def estimate_read_time(document: str) -> int:
    """Minutes to read ``document`` at 200 words/min, five chars per word."""
    words = math.ceil(len(document) / CHARS_PER_WORD)
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def render_outline(result: SummaryResult) -> str:
    """Render the summary body without the title heading."""
    body = f"## Summary\n\n{result.summary}\n\n"
    body += f"## Article Outline ({len(result.outline)} sections)\n\n"
    for section in result.outline:
        indent = "  " * max(0, section.level - 1)
        body += f"{indent}- {section.title} (~{section.token_count} tokens)\n"
    body += (
        f"\n*Estimated read time: {result.estimated_read_time} min"
        f" | Total: {result.total_tokens:,} tokens*\n"
    )
    return body


def render_summary(result: SummaryResult) -> str:
    """Render the full summary composite, title heading first."""
    return f"# {result.title}\n\n" + render_outline(result)


def extract_summary(
    document: str,
    title: str,
    max_tokens: int,
    ratios: Optional[TokenRatios] = None,
) -> SummaryResult:
    """Condense a document into its lead paragraph and outline.

    When no qualifying paragraph exists, the first 200 characters of the
    heading-free text are used (with ``...`` appended if longer).

    Args:
        document: Markdown text
        title: Document title for the rendered composite
        max_tokens: Budget recorded on the result; the summary is not cut
        ratios: Token ratios forwarded to the estimator

    Returns:
        SummaryResult whose ``token_info`` prices the rendered composite
    """
    summary = _first_paragraph(document) or _fallback_summary(document)

    result = SummaryResult(
        title=title,
        summary=summary,
        outline=extract_sections(document, ratios),
        total_tokens=estimate_tokens(document, ratios),
        estimated_read_time=estimate_read_time(document),
        token_info=TokenInfo(token_count=0, truncated=False, max_tokens=max_tokens),
    )
    result.token_info.token_count = estimate_tokens(render_summary(result), ratios)
    return result
