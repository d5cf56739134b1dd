"""JSON output helpers for CLI commands.

Every command prints exactly one response envelope to stdout, the same
shape the MCP tools return.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Mapping, NoReturn, Optional

import click

from jamf_docs_mcp.core.responses import error_response, success_response


def _emit(payload: Mapping[str, Any]) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def emit_success(data: Mapping[str, Any], **meta: Any) -> None:
    _emit(asdict(success_response(data=data, meta=meta or None)))


def emit_error(
    message: str,
    *,
    code: str = "INTERNAL_ERROR",
    error_type: str = "internal",
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
) -> NoReturn:
    """Print an error envelope and exit with status 1."""
    _emit(
        asdict(
            error_response(
                message,
                error_code=code,
                error_type=error_type,
                remediation=remediation,
                details=details,
            )
        )
    )
    sys.exit(1)
