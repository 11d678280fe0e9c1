from typing import Optional

from pydantic import BaseModel, Field, StrictStr

REQUIRED_FIELDS = ("title", "description", "ingredients", "steps")

CARBONARA = {
    "title": "Spaghetti Carbonara",
    "description": "A classic Italian pasta dish",
    "ingredients": "Spaghetti, Eggs, Pecorino Romano, Guanciale, Black Pepper",
    "steps": "Boil pasta, fry guanciale, mix eggs and cheese, combine all.",
    "image_url": "https://example.com/spaghetti.jpg",
}


class RecipeCreate(BaseModel):
    """
    Model for creating a new recipe.

    Presence of the required fields is checked by the recipe store so that a
    missing field and an empty one are reported the same way.
    """

    title: Optional[StrictStr] = Field(None, description="The title of the recipe")
    description: Optional[StrictStr] = Field(
        None, description="The description of the recipe"
    )
    ingredients: Optional[StrictStr] = Field(
        None, description="The ingredients needed"
    )
    steps: Optional[StrictStr] = Field(
        None, description="The steps to prepare the recipe"
    )
    image_url: Optional[StrictStr] = Field(
        None, description="URL of the recipe image"
    )

    model_config = {
        "json_schema_extra": {
            "required": list(REQUIRED_FIELDS),
            "examples": [CARBONARA],
        },
    }


class RecipeUpdate(BaseModel):
    """
    Model for updating an existing recipe.
    Fields left out (or empty) keep their stored value.
    """

    title: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    ingredients: Optional[StrictStr] = None
    steps: Optional[StrictStr] = None
    image_url: Optional[StrictStr] = None

    model_config = {
        "json_schema_extra": {"examples": [{"title": "Spaghetti alla Carbonara"}]},
    }


class RecipeOut(BaseModel):
    """
    Model for outputting a recipe.
    """

    id: str = Field(..., description="The auto-generated id of the recipe")
    title: str
    description: str
    ingredients: str
    steps: str
    image_url: str

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "examples": [{"id": "3f0c8f5e-8d0b-4b8e-9c1e-0a6f1f2b7c11", **CARBONARA}]
        },
    }
