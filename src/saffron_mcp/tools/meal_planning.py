"""
Meal planning tools.

  - menu_planner:       menu items and notes for a date range.
  - add_recipe_to_menu: put a recipe on the menu for a day and section.

Menu items refer to their section (breakfast, dinner, ...) by ID. The
section list is fetched once when the tools are registered so that tools
can show and accept section names instead.
"""

import json
import logging
from datetime import date
from typing import Any, Dict, List

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from saffron_mcp.app import operations
from saffron_mcp.app.adapter import ToolDescriptor, register_graphql_tool
from saffron_mcp.app.errors import SaffronError
from saffron_mcp.app.schema import ChoiceSchema, fields
from saffron_mcp.app.session import SessionClient

logger = logging.getLogger(__name__)


async def fetch_menu_sections(client: SessionClient) -> List[Dict[str, Any]]:
    """Return the user's menu sections as ``{"id", "name"}`` dicts."""
    result = await client.query(operations.MenuSections)
    if result.errors:
        raise SaffronError(f"Could not load menu sections: {json.dumps(result.errors)}")
    return result.data["menuSections"]


def section_ids_by_name(sections: List[Dict[str, Any]]) -> Dict[str, str]:
    """
    Map section display names to IDs.

    When two sections share a name the first one wins; the others cannot be
    chosen by name.
    """
    ids: Dict[str, str] = {}
    for section in sections:
        if ids.setdefault(section["name"], section["id"]) != section["id"]:
            logger.warning(
                "Menu section name %r is used more than once; keeping ID %s",
                section["name"],
                ids[section["name"]],
            )
    return ids


class SectionNames:
    """Maps menu section IDs to display names in API output."""

    def __init__(self, sections: List[Dict[str, Any]]):
        self.by_id = {section["id"]: section["name"] for section in sections}

    def name_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of a menu item with menuSectionId replaced by menuSection."""
        section_id = item["menuSectionId"]
        if section_id not in self.by_id:
            raise LookupError(f"Unknown menu section ID {section_id!r}")
        named = {key: value for key, value in item.items() if key != "menuSectionId"}
        named["menuSection"] = self.by_id[section_id]
        return named

    def name_planner(self, output: Dict[str, Any]) -> Dict[str, Any]:
        return {
            **output,
            "menuPlanner": [self.name_item(item) for item in output["menuPlanner"]],
        }

    def name_created_item(self, output: Dict[str, Any]) -> Dict[str, Any]:
        return {**output, "createMenuItem": self.name_item(output["createMenuItem"])}


async def register_meal_planning_tools(server: FastMCP, client: SessionClient) -> None:
    """
    Fetch the menu sections, then register the meal planning tools.

    Raises:
        Exception: Whatever the section query raised; no tool is registered then.
    """
    sections = await fetch_menu_sections(client)
    names = SectionNames(sections)
    logger.info("Loaded %d menu sections", len(names.by_id))

    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="menu_planner",
            description="Get all menu items and menu notes for a given date range",
            operation=operations.MenuPlanner,
            input_schema=fields(
                startDate=(date, Field(description="First day of the range (YYYY-MM-DD)")),
                endDate=(date, Field(description="Last day of the range (YYYY-MM-DD)")),
            ),
            transform_output=names.name_planner,
            annotations=ToolAnnotations(title="Menu planner", readOnlyHint=True),
        ),
    )

    section_choice = ChoiceSchema(
        "sectionName",
        "menuSectionId",
        section_ids_by_name(sections),
        description="The menu section to add the recipe to",
    )
    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="add_recipe_to_menu",
            description="Add a recipe to the menu on a given day, in one of your menu sections",
            operation=operations.CreateMenuItem,
            input_schema=fields(
                date=(date, Field(description="The day to plan the recipe for (YYYY-MM-DD)")),
                recipeId=(str, Field(description="The ID of the recipe to add")),
            )
            & section_choice,
            transform_output=names.name_created_item,
        ),
    )
