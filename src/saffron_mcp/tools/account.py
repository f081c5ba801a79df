"""
Account tools.

  - me: the logged-in user's profile and subscription status.
"""

from fastmcp import FastMCP
from mcp.types import ToolAnnotations

from saffron_mcp.app import operations
from saffron_mcp.app.adapter import ToolDescriptor, register_graphql_tool
from saffron_mcp.app.session import SessionClient


def register_account_tools(server: FastMCP, client: SessionClient) -> None:
    """
    Register the account tools on the server.

    Args:
        server: FastMCP application to add the tools to.
        client: Authenticated session the tools run their queries through.
    """
    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="me",
            description="Get your user information (name, email, subscription status, etc.)",
            operation=operations.Me,
            annotations=ToolAnnotations(title="Me", readOnlyHint=True),
        ),
    )
