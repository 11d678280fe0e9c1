from recipe_api.framework.logging import Span, log_event
from recipe_api.framework.tracing import traced
from recipe_api.recipes.store import RecipeStore
from recipe_api.shared.schemas import recipe as rs


@traced
async def list_recipes(store: RecipeStore) -> list[rs.RecipeOut]:
    """
    Lists every recipe, newest first.
    """
    with Span("db_list_recipes"):
        return store.list_recipes()


@traced
async def get_recipe(recipe_id: str, store: RecipeStore) -> rs.RecipeOut:
    """
    Retrieves a single recipe by its ID.
    """
    with Span("db_query_recipe"):
        return store.get_recipe(recipe_id)


@traced
async def create_recipe(data: rs.RecipeCreate, store: RecipeStore) -> rs.RecipeOut:
    """
    Creates a new recipe in the database.
    """
    with Span("db_create_recipe"):
        recipe = store.create_recipe(data)

    log_event("recipe_created", recipe_id=recipe.id)
    return recipe


@traced
async def update_recipe(
    recipe_id: str, data: rs.RecipeUpdate, store: RecipeStore
) -> rs.RecipeOut:
    """
    Updates an existing recipe in the database.
    """
    # the columns the update overwrites
    changes = store.prepare_changes(data)

    with Span("db_update_recipe"):
        recipe = store.update_recipe(recipe_id, data)

    log_event("recipe_updated", recipe_id=recipe_id, fields=sorted(changes))
    return recipe


@traced
async def delete_recipe(recipe_id: str, store: RecipeStore) -> None:
    """
    Deletes a recipe by its ID.
    """
    with Span("db_delete_recipe"):
        store.delete_recipe(recipe_id)

    log_event("recipe_deleted", recipe_id=recipe_id)
