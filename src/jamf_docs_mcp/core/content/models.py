"""Value types for the token-budgeted content pipeline.

Provides:
    - TokenRatios: Character-per-token ratios used by the estimator
    - TokenInfo: Token accounting attached to every returned payload
    - Section: A heading-delimited region of a Markdown document
    - PaginationInfo: Page window over an ordered item list
    - TruncateResult / ExtractSectionResult / SummaryResult / FittedItems:
      Results of the pipeline operations

All types are plain dataclasses. ``to_dict()`` produces the camelCase shape
sent to MCP clients.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class TokenRatios:
    """Characters-per-token ratios for prose and fenced code.

    Code carries more tokens per character than prose, so it gets a
    smaller ratio.
    """

    chars_per_token: int = 4
    code_chars_per_token: int = 3

    def __post_init__(self) -> None:
        if self.chars_per_token <= 0:
            raise ValueError(f"chars_per_token must be positive, got {self.chars_per_token}")
        if self.code_chars_per_token <= 0:
            raise ValueError(f"code_chars_per_token must be positive, got {self.code_chars_per_token}")


DEFAULT_RATIOS = TokenRatios()


@dataclass
class TokenInfo:
    """Token accounting for a returned piece of content.

    Attributes:
        token_count: Estimated tokens of the content actually returned
        truncated: Whether content was dropped to respect the budget
        max_tokens: The budget the caller asked for
    """

    token_count: int
    truncated: bool
    max_tokens: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tokenCount": self.token_count,
            "truncated": self.truncated,
            "maxTokens": self.max_tokens,
        }


@dataclass
class Section:
    """A heading and the lines up to the next heading."""

    id: str
    title: str
    level: int
    token_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "level": self.level,
            "tokenCount": self.token_count,
        }


@dataclass
class PaginationInfo:
    """A window over an ordered list.

    ``start_index`` and ``end_index`` are slice bounds into the full list.
    """

    page: int
    page_size: int
    total_pages: int
    total_items: int
    has_next: bool
    has_prev: bool
    start_index: int
    end_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "pageSize": self.page_size,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


@dataclass
class TruncateResult:
    content: str
    token_info: TokenInfo
    remaining_sections: Optional[List[Section]] = None


@dataclass
class ExtractSectionResult:
    content: str
    section: Optional[Section]
    token_info: TokenInfo


@dataclass
class SummaryResult:
    """Condensed view of a document: lead paragraph plus outline."""

    title: str
    summary: str
    outline: List[Section]
    total_tokens: int
    estimated_read_time: int
    token_info: TokenInfo


@dataclass
class FittedItems(Generic[T]):
    """A page of items trimmed to a token budget."""

    items: List[T]
    token_info: TokenInfo
    pagination: PaginationInfo
