"""
MCP application factory.

Creates the FastMCP application object for one server run. Tool groups in
``saffron_mcp.tools`` register themselves on the instance returned here,
together with the SessionClient they should use.
"""

from fastmcp import FastMCP

from saffron_mcp.app.config import SERVER_INSTRUCTIONS, SERVER_NAME


def create_mcp_server() -> FastMCP:
    """Return a new, empty FastMCP application for the Saffron tools."""
    return FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)
