"""jamf-docs-mcp: MCP server for searching and reading Jamf documentation."""

from jamf_docs_mcp.config.server import _PACKAGE_VERSION as __version__  # noqa: F401
