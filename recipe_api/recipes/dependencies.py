from fastapi import Request

from recipe_api.recipes.store import RecipeStore


def get_store(request: Request) -> RecipeStore:
    """
    Get the recipe store the application was built with.
    """
    return request.app.state.store
