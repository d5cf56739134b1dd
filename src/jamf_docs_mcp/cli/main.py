"""Entry point for the ``jamf-docs-mcp`` command."""

from pathlib import Path
from typing import Optional

import click

from jamf_docs_mcp.cli.commands import cache, serve_cmd
from jamf_docs_mcp.config import ServerConfig, set_config


@click.group("jamf-docs-mcp", invoke_without_command=True)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a TOML config file.",
)
@click.version_option(package_name="jamf-docs-mcp")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[Path]) -> None:
    """Jamf documentation MCP server."""
    config = ServerConfig.from_env(str(config_file) if config_file else None)
    set_config(config)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve_cmd)


cli.add_command(serve_cmd)
cli.add_command(cache)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
