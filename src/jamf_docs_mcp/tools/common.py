"""Shared plumbing for tool handlers: envelopes, errors and annotations."""

import json
import logging
from dataclasses import asdict
from typing import Any, Dict, List

from mcp.types import ToolAnnotations
from pydantic import ValidationError

from jamf_docs_mcp.core.content import TokenInfo
from jamf_docs_mcp.core.errors import error_to_response
from jamf_docs_mcp.core.responses import ErrorCode, ToolResponse, error_response, validation_error
from jamf_docs_mcp.tools.schemas import describe_validation_error

logger = logging.getLogger(__name__)

_FIELD_ERROR_CODES = {
    "url": ErrorCode.INVALID_URL,
    "product": ErrorCode.INVALID_PRODUCT,
    "topic": ErrorCode.INVALID_TOPIC,
}

READ_ONLY = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=True,
)

READ_ONLY_LOCAL = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=False,
)


def dump_response(response: ToolResponse) -> str:
    return json.dumps(asdict(response), indent=2)


def dump_payload(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2)


def content_fidelity(token_info: TokenInfo) -> str:
    return "partial" if token_info.truncated else "full"


def invalid_input(exc: ValidationError) -> str:
    """Serialize a pydantic validation failure as a validation error envelope."""
    messages: List[str] = describe_validation_error(exc)
    field = None
    errors = exc.errors()
    if errors and errors[0].get("loc"):
        field = str(errors[0]["loc"][0])
    return dump_response(
        validation_error(
            f"Invalid input: {'; '.join(messages)}",
            field=field,
            details={"errors": messages},
            error_code=_FIELD_ERROR_CODES.get(field or "", ErrorCode.VALIDATION_ERROR),
        )
    )


def failure(exc: Exception, context: str) -> str:
    """Serialize a tool failure.

    Documentation errors map to their error codes; anything else is logged
    with its traceback and reported as an internal error.
    """
    mapped = error_to_response(exc, context)
    if mapped is not None:
        logger.warning("%s: %s", context, exc)
        return dump_payload(mapped)
    logger.exception(context)
    return dump_response(error_response(f"{context}: {exc}"))
