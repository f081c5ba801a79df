"""
GraphQL documents for the Saffron API.

Written against the schema used by the Saffron web client. Recipe
``instructions`` come back as a serialized Slate document and
``ingredients`` as a JSON string; the tools layer decodes them.
"""

from saffron_mcp.app.documents import Operation

_RECIPE_FIELDS = """
fragment RecipeFields on Recipe {
  id
  name
  description
  sourceUrl
  servings
  prepTime
  cookTime
  totalTime
  notes
  ingredients
  instructions
  sectionId
  cookbookId
  updatedAt
}
"""

_IMPORTED_RECIPE_FIELDS = """
fragment ImportedRecipeFields on ImportedRecipe {
  name
  description
  sourceUrl
  servings
  prepTime
  cookTime
  totalTime
  notes
  ingredients
  instructions
}
"""

# ── Account ────────────────────────────────────────────────────────────────────

Login = Operation.parse(
    """
    mutation Login($input: LoginInput!) {
      login(input: $input) {
        success
        user {
          id
          email
        }
      }
    }
    """
)

Me = Operation.parse(
    """
    query Me {
      me {
        id
        email
        firstName
        lastName
        subscriptionStatus
        createdAt
      }
    }
    """
)

# ── Cookbooks ──────────────────────────────────────────────────────────────────

Cookbooks = Operation.parse(
    """
    query Cookbooks {
      cookbooks {
        id
        name
        recipeCount
      }
    }
    """
)

SectionsByCookbookId = Operation.parse(
    """
    query SectionsByCookbookId($cookbookId: ID!) {
      sectionsByCookbookId(cookbookId: $cookbookId) {
        id
        name
        cookbookId
      }
    }
    """
)

# ── Recipes ────────────────────────────────────────────────────────────────────

RecipesByCookbookAndSectionId = Operation.parse(
    """
    query RecipesByCookbookAndSectionId($sectionId: ID!) {
      recipesByCookbookAndSectionId(sectionId: $sectionId) {
        id
        name
        description
        totalTime
      }
    }
    """
)

GetRecipeById = Operation.parse(
    """
    query GetRecipeById($id: ID!) {
      getRecipeById(id: $id) {
        ...RecipeFields
      }
    }
    """
    + _RECIPE_FIELDS
)

ImportRecipeFromWebsite = Operation.parse(
    """
    mutation ImportRecipeFromWebsite($url: String!) {
      importRecipeFromWebsite(url: $url) {
        ...ImportedRecipeFields
      }
    }
    """
    + _IMPORTED_RECIPE_FIELDS
)

ImportRecipeFromText = Operation.parse(
    """
    mutation ImportRecipeFromText($text: String!) {
      importRecipeFromText(text: $text) {
        ...ImportedRecipeFields
      }
    }
    """
    + _IMPORTED_RECIPE_FIELDS
)

CreateRecipe = Operation.parse(
    """
    mutation CreateRecipe($recipe: RecipeInput!) {
      createRecipe(recipe: $recipe) {
        success
        recipe {
          ...RecipeFields
        }
      }
    }
    """
    + _RECIPE_FIELDS
)

UpdateRecipe = Operation.parse(
    """
    mutation UpdateRecipe($id: ID!, $recipe: RecipeInput!) {
      updateRecipe(id: $id, recipe: $recipe) {
        success
        recipe {
          ...RecipeFields
        }
      }
    }
    """
    + _RECIPE_FIELDS
)

# ── Meal planning ──────────────────────────────────────────────────────────────

MenuSections = Operation.parse(
    """
    query MenuSections {
      menuSections {
        id
        name
      }
    }
    """
)

MenuPlanner = Operation.parse(
    """
    query MenuPlanner($startDate: String!, $endDate: String!) {
      menuPlanner(startDate: $startDate, endDate: $endDate) {
        id
        date
        menuSectionId
        note
        recipe {
          id
          name
        }
      }
    }
    """
)

CreateMenuItem = Operation.parse(
    """
    mutation CreateMenuItem($date: String!, $recipeId: ID!, $menuSectionId: ID!) {
      createMenuItem(date: $date, recipeId: $recipeId, menuSectionId: $menuSectionId) {
        id
        date
        menuSectionId
        recipe {
          id
          name
        }
      }
    }
    """
)
