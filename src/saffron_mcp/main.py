"""
Entry point for the saffron-mcp server.

Before the MCP server starts on stdio it:
  1. Reuses the cached session of the account if one is fresh and still
     accepted by Saffron, otherwise logs in with the password.
  2. Registers every tool group against the authenticated SessionClient.

Usage:
    saffron-mcp --email you@example.com --password secret
"""

import logging
import signal
import sys
from typing import Optional

import anyio
import click
from dotenv import load_dotenv

from saffron_mcp import __version__
from saffron_mcp.app import operations
from saffron_mcp.app.config import Settings
from saffron_mcp.app.errors import AuthenticationError
from saffron_mcp.app.mcp_app import create_mcp_server
from saffron_mcp.app.session import SessionClient
from saffron_mcp.tools import register_all_tools

logger = logging.getLogger(__name__)


async def authenticate(client: SessionClient, email: str, password: Optional[str]) -> None:
    """
    Make sure the client holds a working session for the account.

    Raises:
        AuthenticationError: If no cached session works and the password
            login is impossible or rejected.
    """
    if client.load_for_account(email):
        try:
            me = await client.query(operations.Me)
            if me.errors:
                raise AuthenticationError(f"Saved session rejected: {me.errors}")
            logger.info("Authenticated with saved tokens")
            logger.debug("Me: %s", me.data)
            return
        except Exception as exc:
            logger.warning("Saved tokens are invalid, will need to login with password: %s", exc)

    if not password:
        raise AuthenticationError(
            "No saved tokens found and no password provided. "
            "Please provide a password with -p or --password"
        )

    result = await client.login(email, password)
    if result.errors:
        raise AuthenticationError(f"Login failed: {result.errors}")

    me = await client.query(operations.Me)
    if me.errors:
        raise AuthenticationError(f"Login did not produce a usable session: {me.errors}")
    logger.info("Logged in as %s", email)
    logger.debug("Me: %s", me.data)


async def serve(email: str, password: Optional[str], settings: Settings) -> None:
    """Authenticate, register the tools, and run the MCP server on stdio."""
    async with SessionClient(settings) as client:
        await authenticate(client, email, password)

        server = create_mcp_server()
        await register_all_tools(server, client)

        logger.info("Saffron MCP server running on stdio")
        await server.run_async(transport="stdio")


@click.command()
@click.option("-u", "--email", required=True, help="Email for authentication.")
@click.option(
    "-p",
    "--password",
    envvar="SAFFRON_PASSWORD",
    default=None,
    help="Password for authentication. Only needed when no saved session is valid.",
)
@click.version_option(__version__, prog_name="saffron")
def cli(email: str, password: Optional[str]) -> None:
    """Saffron MCP server for GraphQL operations."""
    settings = Settings()
    # stdout carries the MCP protocol, so logs go to stderr.
    logging.basicConfig(
        stream=sys.stderr,
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
    )

    try:
        anyio.run(serve, email, password, settings)
    except AuthenticationError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)
    except Exception:
        logger.exception("Fatal error in main()")
        sys.exit(1)


def _shutdown(signum, frame) -> None:
    logger.info("Shutting down Saffron MCP server...")
    sys.exit(0)


def main() -> None:
    load_dotenv()
    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)
    cli()


if __name__ == "__main__":
    main()
