"""Request context propagation via contextvars.

Carries a correlation id (and optional client id) across async boundaries
so logs, metrics and response envelopes for one tool call can be joined.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_client_id: ContextVar[str] = ContextVar("client_id", default="anonymous")


def generate_correlation_id(prefix: str = "req") -> str:
    """Return a new id such as ``tool_1f0c9a7e2b3d``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def get_correlation_id() -> str:
    """Correlation id of the current request, or ``""`` outside one."""
    return _correlation_id.get()


def get_client_id() -> str:
    return _client_id.get()


@contextmanager
def sync_request_context(
    correlation_id: Optional[str] = None,
    client_id: Optional[str] = None,
) -> Iterator[str]:
    """Bind request identifiers for the duration of the block.

    Works for both sync and async callers since contextvars are copied into
    tasks on creation.

    Args:
        correlation_id: Id to bind (generated when omitted)
        client_id: Optional client identifier

    Yields:
        The bound correlation id
    """
    corr_id = correlation_id or generate_correlation_id()
    corr_token = _correlation_id.set(corr_id)
    client_token = _client_id.set(client_id) if client_id else None
    try:
        yield corr_id
    finally:
        _correlation_id.reset(corr_token)
        if client_token is not None:
            _client_id.reset(client_token)
