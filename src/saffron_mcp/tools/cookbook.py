"""
Cookbook tools.

  - cookbooks:               list the user's cookbooks.
  - sections_by_cookbook_id: list the sections of one cookbook.
"""

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from saffron_mcp.app import operations
from saffron_mcp.app.adapter import ToolDescriptor, register_graphql_tool
from saffron_mcp.app.schema import fields
from saffron_mcp.app.session import SessionClient


def register_cookbook_tools(server: FastMCP, client: SessionClient) -> None:
    """
    Register the cookbook tools on the server.

    Args:
        server: FastMCP application to add the tools to.
        client: Authenticated session the tools run their queries through.
    """
    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="cookbooks",
            description="Get your cookbooks",
            operation=operations.Cookbooks,
            annotations=ToolAnnotations(title="Cookbooks", readOnlyHint=True),
        ),
    )

    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="sections_by_cookbook_id",
            description=(
                "Get sections by cookbook ID. CookbookIds are globally unique and can be "
                "found through the cookbooks tool."
            ),
            operation=operations.SectionsByCookbookId,
            input_schema=fields(
                cookbookId=(
                    str,
                    Field(
                        description=(
                            "The ID of the cookbook to get sections for. "
                            "Get this using the cookbooks tool."
                        )
                    ),
                ),
            ),
            annotations=ToolAnnotations(title="Sections by cookbook", readOnlyHint=True),
        ),
    )
