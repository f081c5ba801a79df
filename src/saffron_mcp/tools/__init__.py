"""
Saffron tool groups.

Each module registers one domain's tools on a FastMCP server, bound to the
SessionClient passed in.
"""

import logging

from fastmcp import FastMCP

from saffron_mcp.app.session import SessionClient
from saffron_mcp.tools.account import register_account_tools
from saffron_mcp.tools.cookbook import register_cookbook_tools
from saffron_mcp.tools.meal_planning import register_meal_planning_tools
from saffron_mcp.tools.recipe import register_recipe_tools

logger = logging.getLogger(__name__)


async def register_all_tools(server: FastMCP, client: SessionClient) -> None:
    """Register every tool group. A failing meal planning setup only skips that group."""
    register_account_tools(server, client)
    register_cookbook_tools(server, client)
    register_recipe_tools(server, client)

    try:
        await register_meal_planning_tools(server, client)
    except Exception as exc:
        logger.error("Meal planning tools are unavailable: %s", exc)
