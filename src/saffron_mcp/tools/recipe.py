"""
Recipe tools.

  - recipes_by_cookbook_and_section_id: short summaries of a section's recipes.
  - get_recipe_by_id:                   one full recipe.
  - import_recipe_from_website:         extract a recipe from a web page.
  - import_recipe_from_text:            extract a recipe from free text.
  - create_recipe / update_recipe:      write a recipe.

Saffron stores instructions as a serialized Slate document and
ingredients as a JSON string. Tools accept and return instructions as a
list of ``{"type", "text"}`` steps and ingredients as a list of objects;
the conversion happens here.
"""

import json
from typing import Annotated, Any, Dict, List, Optional

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import BaseModel, Field, PlainSerializer

from saffron_mcp.app import operations
from saffron_mcp.app.adapter import ToolDescriptor, register_graphql_tool
from saffron_mcp.app.instructions import InstructionList, decode_instructions
from saffron_mcp.app.schema import fields
from saffron_mcp.app.session import SessionClient


class RegularIngredient(BaseModel):
    amount: Optional[str] = None
    unit: Optional[str] = None
    name: str
    keyword: Optional[str] = None


def encode_ingredients(ingredients: List[RegularIngredient]) -> str:
    """Serialize ingredients the way the Saffron editor stores them."""
    return json.dumps(
        [
            {**ingredient.model_dump(exclude_none=True), "__typename": "RegularIngredient"}
            for ingredient in ingredients
        ],
        ensure_ascii=False,
        separators=(",", ":"),
    )


IngredientList = Annotated[
    List[RegularIngredient],
    PlainSerializer(encode_ingredients, return_type=str),
    Field(description="The ingredients of the recipe"),
]


class RecipeInput(BaseModel):
    name: str = Field(description="The name of the recipe")
    description: Optional[str] = None
    sourceUrl: Optional[str] = Field(default=None, description="Where the recipe came from")
    servings: Optional[str] = None
    prepTime: Optional[str] = None
    cookTime: Optional[str] = None
    totalTime: Optional[str] = None
    notes: Optional[str] = None
    instructions: InstructionList
    ingredients: IngredientList
    sectionId: str = Field(
        description="The section ID of the recipe. Get this using the sections_by_cookbook_id tool."
    )


def format_recipe(recipe: Dict[str, Any]) -> Dict[str, Any]:
    """Replace a recipe's serialized instructions with the list of steps."""
    return {
        **recipe,
        "instructions": [
            step.model_dump() for step in decode_instructions(recipe["instructions"])
        ],
    }


def _format_optional_recipe(recipe: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return recipe and format_recipe(recipe)


def format_get_recipe(output: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the instructions of the fetched recipe; a missing recipe stays None."""
    return {**output, "getRecipeById": _format_optional_recipe(output["getRecipeById"])}


def format_website_import(output: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the instructions of a recipe extracted from a web page."""
    return {**output, "importRecipeFromWebsite": format_recipe(output["importRecipeFromWebsite"])}


def format_text_import(output: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the instructions of a recipe extracted from text."""
    return {**output, "importRecipeFromText": format_recipe(output["importRecipeFromText"])}


def _format_write(field: str, output: Dict[str, Any]) -> Dict[str, Any]:
    payload = output[field]
    return {
        **output,
        field: {**payload, "recipe": _format_optional_recipe(payload.get("recipe"))},
    }


def format_create_recipe(output: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the instructions of the created recipe, if the write returned one."""
    return _format_write("createRecipe", output)


def format_update_recipe(output: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the instructions of the updated recipe, if the write returned one."""
    return _format_write("updateRecipe", output)


def register_recipe_tools(server: FastMCP, client: SessionClient) -> None:
    """
    Register the recipe read, import and write tools on the server.

    Args:
        server: FastMCP application to add the tools to.
        client: Authenticated session the tools run their operations through.
    """
    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="recipes_by_cookbook_and_section_id",
            description=(
                "Get short summary of recipes by cookbook and section ID. SectionIds are "
                "globally unique and can be found through the sections_by_cookbook_id tool."
            ),
            operation=operations.RecipesByCookbookAndSectionId,
            input_schema=fields(
                sectionId=(
                    str,
                    Field(
                        description=(
                            "The ID of the section to get recipes for. "
                            "Get this using the sections_by_cookbook_id tool."
                        )
                    ),
                ),
            ),
            annotations=ToolAnnotations(title="Recipes by section", readOnlyHint=True),
        ),
    )

    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="get_recipe_by_id",
            description="Get the full recipe by its ID",
            operation=operations.GetRecipeById,
            input_schema=fields(id=(str, ...)),
            transform_output=format_get_recipe,
            annotations=ToolAnnotations(title="Get recipe", readOnlyHint=True),
        ),
    )

    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="import_recipe_from_website",
            description=(
                "Import a recipe from a website. Returns the extracted recipe data that can "
                "then be used to create a new recipe through the create_recipe tool."
            ),
            operation=operations.ImportRecipeFromWebsite,
            input_schema=fields(url=(str, ...)),
            transform_output=format_website_import,
        ),
    )

    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="import_recipe_from_text",
            description=(
                "Import a recipe from text. Returns the extracted recipe data that can then "
                "be used to create a new recipe through the create_recipe tool."
            ),
            operation=operations.ImportRecipeFromText,
            input_schema=fields(text=(str, ...)),
            transform_output=format_text_import,
        ),
    )

    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="create_recipe",
            description="Create a new recipe",
            operation=operations.CreateRecipe,
            input_schema=fields(recipe=(RecipeInput, ...)),
            transform_output=format_create_recipe,
        ),
    )

    register_graphql_tool(
        server,
        client,
        ToolDescriptor(
            name="update_recipe",
            description="Update an existing recipe",
            operation=operations.UpdateRecipe,
            input_schema=fields(id=(str, ...), recipe=(RecipeInput, ...)),
            transform_output=format_update_recipe,
        ),
    )
