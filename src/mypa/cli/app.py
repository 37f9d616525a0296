"""Main CLI application.

Click commands for mypa: serve, mcp, actions, call, sites, merge-sites.
"""

from __future__ import annotations

import asyncio
import json as json_mod
import logging
import os
import sys
from typing import TYPE_CHECKING, Any

import click

from mypa import __version__
from mypa.config.loader import load_config
from mypa.core.errors import ConfigError

if TYPE_CHECKING:
    from mypa.config.schema import LoggingConfig, MypaConfig
    from mypa.page import Page


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(config_path: str | None) -> MypaConfig:
    """Load config with user-friendly error handling."""
    try:
        return load_config(path=config_path)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy


def configure_logging(config: LoggingConfig) -> None:
    """Set the root log level and add a file handler when configured."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        handlers.append(logging.FileHandler(config.file, encoding="utf-8"))
    logging.basicConfig(
        level=config.level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def _start_page(config: MypaConfig) -> Page:
    from mypa.page import Page, set_page

    page = Page(config)
    page.start()
    set_page(page)
    return page


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mypa")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """mypa - Multi-screen page with a remote tool bridge.

    Drive screens and the sites embedded in them from a controller.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── actions ──────────────────────────────────────────────────────


@cli.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Print raw JSON.")
@click.pass_context
def actions(ctx: click.Context, as_json: bool) -> None:
    """List the page's tools and its initial state."""
    from mypa.cli.display import PageDisplay

    config = _load_config(ctx.obj["config_path"])
    configure_logging(config.logging)
    page = _start_page(config)
    listing = page.list_actions()
    if as_json:
        click.echo(json_mod.dumps(listing, indent=2))
    else:
        PageDisplay().show_actions(listing)


# ── call ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("name")
@click.option(
    "--args",
    "args_json",
    default="{}",
    help='Tool arguments as a JSON object, e.g. \'{"count": 3}\'.',
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print raw JSON.")
@click.pass_context
def call(ctx: click.Context, name: str, args_json: str, as_json: bool) -> None:
    """Run one tool against a fresh local page."""
    from mypa.cli.display import PageDisplay

    try:
        arguments: Any = json_mod.loads(args_json)
    except ValueError as e:
        _error(f"--args is not valid JSON: {e}")
    if not isinstance(arguments, dict):
        _error("--args must be a JSON object")

    config = _load_config(ctx.obj["config_path"])
    configure_logging(config.logging)
    page = _start_page(config)
    result = asyncio.run(page.call_tool(name, arguments))

    if as_json:
        click.echo(json_mod.dumps(result, indent=2))
    else:
        PageDisplay().show_result(result)
    if not result["ok"]:
        sys.exit(1)


# ── sites ────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def sites(ctx: click.Context) -> None:
    """Show the merged, sorted authorized site list."""
    from mypa.cli.display import PageDisplay
    from mypa.sites import load_authorized_sites

    config = _load_config(ctx.obj["config_path"])
    configure_logging(config.logging)
    PageDisplay().show_sites(load_authorized_sites(config.sites))


@cli.command("merge-sites")
@click.option(
    "--file",
    "file_path",
    type=click.Path(),
    default=None,
    help="Sites file to update (defaults to sites.file from config).",
)
@click.option(
    "--sites",
    "raw",
    default=None,
    help="JSON array of URLs to add (defaults to $ADDITIONAL_SITES).",
)
@click.pass_context
def merge_sites(ctx: click.Context, file_path: str | None, raw: str | None) -> None:
    """Merge additional site URLs into the authorized sites file."""
    from mypa.sites import merge_additional_sites

    config = _load_config(ctx.obj["config_path"])
    configure_logging(config.logging)
    target = file_path or config.sites.file
    if raw is None:
        raw = os.environ.get("ADDITIONAL_SITES", "")
    try:
        merged = merge_additional_sites(target, raw)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable
    click.echo(f"{target} updated successfully ({len(merged)} sites).")


# ── serve ────────────────────────────────────────────────────────


@cli.command()
@click.option("--host", default=None, help="Host to bind to (overrides config).")
@click.option(
    "--port", type=int, default=None, help="Port to bind to (overrides config)."
)
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Start the HTTP/WebSocket server."""
    import uvicorn

    from mypa.api.app import create_app

    config = _load_config(ctx.obj["config_path"])
    configure_logging(config.logging)

    effective_host = host or config.server.host
    effective_port = port or config.server.port
    click.echo(f"Server running at http://{effective_host}:{effective_port}")

    app = create_app(config)
    uvicorn.run(app, host=effective_host, port=effective_port)


# ── mcp ─────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def mcp(ctx: click.Context) -> None:
    """Start the MCP server for AI agent integration."""
    from mypa.mcp.server import run_server

    config = _load_config(ctx.obj["config_path"])
    configure_logging(config.logging)
    _start_page(config)
    asyncio.run(run_server())
