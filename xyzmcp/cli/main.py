"""Main CLI entry point for xyzmcp."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

import click
import httpx

from xyzmcp import __version__
from xyzmcp.core.auth import (
    CredentialCorruptError,
    CredentialError,
    CredentialIOError,
    CredentialNotFoundError,
    PersistFailedError,
    TokenManager,
)
from xyzmcp.core.client import AuthAPI, HttpRefreshTransport, XiaoyuzhouClient, create_http_client
from xyzmcp.models.config import DEFAULT_BASE_URL, DEFAULT_DEVICE_ID, ClientConfig
from xyzmcp.utils.logs import configure_logging
from xyzmcp.utils.state import default_token_path, resolve_token_path

logger = logging.getLogger(__name__)

CLI_COMMAND = "xyzmcp"


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name=CLI_COMMAND)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    envvar="XYZMCP_VERBOSE",
    help="Enable debug logging (stderr)",
)
@click.option(
    "--token-path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="XYZMCP_TOKEN_PATH",
    default=None,
    help=f"Credential file location [default: {default_token_path()}]",
)
@click.option(
    "--base-url",
    envvar="XYZMCP_BASE_URL",
    default=DEFAULT_BASE_URL,
    show_default=True,
    help="Upstream API base URL",
)
@click.option(
    "--device-id",
    envvar="XYZMCP_DEVICE_ID",
    default=DEFAULT_DEVICE_ID,
    show_default=True,
    help="Device identifier sent with authenticated requests",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    token_path: Path | None,
    base_url: str,
    device_id: str,
) -> None:
    """Expose the Xiaoyuzhou FM podcast API to MCP agents.

    Run 'xyzmcp init' once to log in; without a subcommand the MCP stdio
    server starts.
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["token_path"] = resolve_token_path(token_path)
    ctx.obj["config"] = ClientConfig(base_url=base_url, device_id=device_id)

    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


def _runtime(ctx: click.Context) -> tuple[httpx.Client, TokenManager]:
    """Build the HTTP client and the process-wide token manager."""
    config: ClientConfig = ctx.obj["config"]
    http = create_http_client(config, transport=ctx.obj.get("http_transport"))
    ctx.call_on_close(http.close)
    manager = TokenManager(HttpRefreshTransport(http, config))
    return http, manager


def _load_or_exit(manager: TokenManager, token_path: Path) -> None:
    try:
        manager.load_from(token_path)
    except CredentialNotFoundError:
        logger.error("Token file not found at %s", token_path)
        click.echo(
            f"Error: Token not found. Please run '{CLI_COMMAND} init' to log in "
            "and create the token.",
            err=True,
        )
        sys.exit(1)
    except CredentialCorruptError as exc:
        logger.error("Failed to load token: %s", exc)
        click.echo(
            f"Error: Failed to load token from {token_path}. It might be corrupted. "
            f"Try running '{CLI_COMMAND} init' again.",
            err=True,
        )
        sys.exit(1)
    except CredentialIOError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@cli.command("init")
@click.pass_context
def init_cmd(ctx: click.Context) -> None:
    """Log in with phone number and SMS code, then save the token."""
    from xyzmcp.cli.login import LoginError, run_login

    token_path: Path = ctx.obj["token_path"]
    http, manager = _runtime(ctx)
    try:
        credential = run_login(manager, AuthAPI(http, ctx.obj["config"]), token_path)
    except KeyboardInterrupt:
        click.echo("\nLogin cancelled.", err=True)
        sys.exit(1)
    except LoginError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except CredentialIOError as exc:
        click.echo(f"Error: Logged in, but failed to save the token: {exc}", err=True)
        click.echo(
            f"Check permissions or disk space and run '{CLI_COMMAND} init' again.",
            err=True,
        )
        sys.exit(1)

    click.echo(f"Login successful as {credential.nickname or credential.uid}.", err=True)
    click.echo(f"Token saved to {token_path}", err=True)


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Start the MCP server on stdio transport."""
    from xyzmcp.mcp.server import run_mcp_server

    token_path: Path = ctx.obj["token_path"]
    http, manager = _runtime(ctx)
    _load_or_exit(manager, token_path)
    logger.debug("Token loaded from %s", token_path)

    client = XiaoyuzhouClient(manager, http, ctx.obj["config"])
    run_mcp_server(client)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the stored credential's identity and freshness."""
    token_path: Path = ctx.obj["token_path"]
    _http, manager = _runtime(ctx)
    _load_or_exit(manager, token_path)

    cred = manager.current()
    click.echo(f"Token file: {token_path}")
    click.echo(f"  UID: {cred.uid or 'unknown'}")
    click.echo(f"  Nickname: {cred.nickname or 'unknown'}")
    age = manager.age()
    if age is None:
        click.echo("  Last refreshed: unknown (freshness not tracked)")
        return
    refreshed = datetime.fromtimestamp(cred.last_refreshed_at).isoformat(timespec="seconds")
    click.echo(f"  Last refreshed: {refreshed} ({int(age // 60)} min ago)")
    click.echo(f"  Refresh due: {'yes' if manager.is_stale() else 'no'}")


@cli.command()
@click.pass_context
def refresh(ctx: click.Context) -> None:
    """Refresh the stored token now and save the new pair."""
    token_path: Path = ctx.obj["token_path"]
    _http, manager = _runtime(ctx)
    _load_or_exit(manager, token_path)

    try:
        manager.refresh()
    except PersistFailedError as exc:
        click.echo(f"Warning: {exc}", err=True)
        sys.exit(1)
    except CredentialError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo(f"Run '{CLI_COMMAND} init' to log in again.", err=True)
        sys.exit(1)
    click.echo(f"Token refreshed and saved to {token_path}", err=True)


if __name__ == "__main__":
    cli()
