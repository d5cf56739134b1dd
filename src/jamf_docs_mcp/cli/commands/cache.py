"""Cache management commands.

Inspect and clean the on-disk response cache without starting the server.
"""

import click

from jamf_docs_mcp.cli.output import emit_error, emit_success
from jamf_docs_mcp.core.cache import DocsCache


def _open_cache(ctx: click.Context) -> DocsCache:
    config = ctx.obj["config"]
    if not config.cache.enabled:
        emit_error(
            "Caching is disabled",
            code="CACHE_ERROR",
            error_type="validation",
            remediation="Unset JAMF_DOCS_MCP_CACHE_ENABLED or set [cache] enabled = true",
        )
    return DocsCache(cache_dir=config.cache.get_cache_dir(), default_ttl=config.cache.ttl_article)


@click.group("cache")
def cache() -> None:
    """Response cache management commands."""
    pass


@cache.command("stats")
@click.pass_context
def stats_cmd(ctx: click.Context) -> None:
    """Show entry counts and size of the cache directory."""
    store = _open_cache(ctx)
    emit_success({"cache_dir": str(store.cache_dir), **store.stats()})


@cache.command("prune")
@click.pass_context
def prune_cmd(ctx: click.Context) -> None:
    """Delete expired cache entries."""
    store = _open_cache(ctx)
    emit_success({"cache_dir": str(store.cache_dir), "pruned": store.prune()})


@cache.command("clear")
@click.confirmation_option(prompt="Delete every cached response?")
@click.pass_context
def clear_cmd(ctx: click.Context) -> None:
    """Delete every cache entry."""
    store = _open_cache(ctx)
    emit_success({"cache_dir": str(store.cache_dir), "removed": store.clear()})
