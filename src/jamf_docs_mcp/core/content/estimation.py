"""Heuristic token estimation for Markdown content.

Provides:
    - estimate_tokens(): Character-ratio estimate that prices fenced code
      separately from prose
    - create_token_info(): Wrap an estimate in a TokenInfo record

The estimate is deterministic and cheap; it is not a tokenizer and is only
used for budgeting decisions.
"""

import math
import re
from typing import Optional

from jamf_docs_mcp.core.content.models import DEFAULT_RATIOS, TokenInfo, TokenRatios

# Non-greedy so adjacent blocks are priced individually.
CODE_BLOCK_PATTERN = re.compile(r"```[\s\S]*?```")


def estimate_tokens(text: Optional[str], ratios: Optional[TokenRatios] = None) -> int:
    """Estimate the token cost of a Markdown string.

    Fenced code spans cost ``ceil(len / code_chars_per_token)`` each; the
    text left after removing them costs ``ceil(len / chars_per_token)``.

    Args:
        text: Content to price. ``None`` and ``""`` cost nothing.
        ratios: Character ratios (defaults to 4 for prose, 3 for code)

    Returns:
        Non-negative estimated token count
    """
    if not text:
        return 0

    ratios = ratios or DEFAULT_RATIOS

    code_tokens = 0
    for match in CODE_BLOCK_PATTERN.finditer(text):
        code_tokens += math.ceil(len(match.group(0)) / ratios.code_chars_per_token)

    prose = CODE_BLOCK_PATTERN.sub("", text)
    prose_tokens = math.ceil(len(prose) / ratios.chars_per_token)

    return code_tokens + prose_tokens


def create_token_info(
    content: Optional[str],
    max_tokens: int,
    truncated: bool = False,
    ratios: Optional[TokenRatios] = None,
) -> TokenInfo:
    """Build a TokenInfo for ``content`` against ``max_tokens``."""
    return TokenInfo(
        token_count=estimate_tokens(content, ratios),
        truncated=truncated,
        max_tokens=max_tokens,
    )
