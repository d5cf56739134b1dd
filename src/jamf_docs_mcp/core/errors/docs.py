"""Documentation backend error classes.

Every failure talking to the docs site, or interpreting what it returned,
surfaces as a ``DocsError`` carrying a ``DocsErrorCode``.
"""

from enum import Enum
from typing import Optional


class DocsErrorCode(str, Enum):
    """Failure categories for documentation retrieval."""

    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    PARSE_ERROR = "PARSE_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_URL = "INVALID_URL"
    INVALID_PRODUCT = "INVALID_PRODUCT"
    CACHE_ERROR = "CACHE_ERROR"
    TIMEOUT = "TIMEOUT"


_RETRYABLE_CODES = frozenset(
    {DocsErrorCode.RATE_LIMITED, DocsErrorCode.NETWORK_ERROR, DocsErrorCode.TIMEOUT}
)


class DocsError(Exception):
    """Base exception for documentation retrieval errors.

    Attributes:
        message: Human-readable error description
        code: Failure category
        url: The URL being fetched, when known
        status_code: Upstream HTTP status, when there was one
    """

    def __init__(
        self,
        message: str,
        code: DocsErrorCode,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.code = code
        self.url = url
        self.status_code = status_code
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        """Whether repeating the request might succeed.

        Rate limits, timeouts and network errors are transient; so are 5xx
        responses. 4xx responses other than 429 are not.
        """
        if self.status_code is not None and self.status_code >= 500:
            return True
        if self.code == DocsErrorCode.NETWORK_ERROR and self.status_code is not None:
            return False
        return self.code in _RETRYABLE_CODES


class DocsNotFoundError(DocsError):
    """Raised when a page, bundle or TOC does not exist (HTTP 404)."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = 404):
        super().__init__(message, DocsErrorCode.NOT_FOUND, url=url, status_code=status_code)


class DocsRateLimitError(DocsError):
    """Raised when the docs backend throttles us (HTTP 429).

    ``retry_after`` is the server-provided wait in seconds, when present.
    """

    def __init__(self, url: Optional[str] = None, retry_after: Optional[float] = None):
        self.retry_after = retry_after
        super().__init__(
            "Rate limited. Please wait and try again.",
            DocsErrorCode.RATE_LIMITED,
            url=url,
            status_code=429,
        )


class DocsTimeoutError(DocsError):
    def __init__(self, url: Optional[str] = None):
        super().__init__("Request timed out", DocsErrorCode.TIMEOUT, url=url)


class DocsNetworkError(DocsError):
    def __init__(self, detail: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(
            f"Network error: {detail}",
            DocsErrorCode.NETWORK_ERROR,
            url=url,
            status_code=status_code,
        )


class DocsParseError(DocsError):
    """Raised when a response body cannot be interpreted."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message, DocsErrorCode.PARSE_ERROR, url=url)


class InvalidProductError(DocsError):
    def __init__(self, product: str, valid: Optional[list] = None):
        self.product = product
        self.valid = list(valid or [])
        message = f'Invalid product ID: "{product}"'
        if self.valid:
            message += f". Valid options: {', '.join(self.valid)}"
        super().__init__(message, DocsErrorCode.INVALID_PRODUCT)


class VersionNotFoundError(DocsError):
    """Raised when a product has no documentation bundle for a version."""

    def __init__(self, product_name: str, version: str, available: Optional[list] = None):
        self.product_name = product_name
        self.version = version
        self.available = list(available or [])
        listed = ", ".join(self.available) if self.available else "current"
        super().__init__(
            f'Version "{version}" not found for {product_name}.\n\nAvailable versions: {listed}',
            DocsErrorCode.NOT_FOUND,
        )
