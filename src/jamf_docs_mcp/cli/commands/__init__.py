"""CLI command groups."""

from jamf_docs_mcp.cli.commands.cache import cache
from jamf_docs_mcp.cli.commands.serve import serve_cmd

__all__ = [
    "cache",
    "serve_cmd",
]
