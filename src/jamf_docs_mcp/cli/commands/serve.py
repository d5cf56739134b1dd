"""Run the MCP server over stdio."""

import click


@click.command("serve")
@click.pass_context
def serve_cmd(ctx: click.Context) -> None:
    """Start the MCP server on stdin/stdout.

    This is the default when no command is given.
    """
    from jamf_docs_mcp.server import create_server

    config = ctx.obj["config"]
    config.setup_logging()
    for warning in config.startup_warnings:
        click.echo(f"warning: {warning}", err=True)
    create_server(config).run(transport="stdio")
