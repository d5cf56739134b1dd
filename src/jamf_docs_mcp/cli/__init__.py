"""Command-line interface for jamf-docs-mcp."""
