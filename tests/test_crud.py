import asyncio
import json
import logging

from recipe_api.framework.logging import logger
from recipe_api.recipes import crud
from recipe_api.shared.schemas.recipe import RecipeCreate, RecipeUpdate


def logged(caplog, event):
    payloads = [
        json.loads(r.getMessage()) for r in caplog.records if r.name == logger.name
    ]
    return [p for p in payloads if p["event"] == event]


def test_update_logs_only_overwritten_fields(store, carbonara, caplog):
    created = asyncio.run(crud.create_recipe(RecipeCreate(**carbonara), store))
    change = RecipeUpdate(title="Carbonara", description="   ", image_url="")

    with caplog.at_level(logging.INFO, logger=logger.name):
        updated = asyncio.run(crud.update_recipe(created.id, change, store))

    assert updated.title == "Carbonara"
    assert updated.description == carbonara["description"]
    (event,) = logged(caplog, "recipe_updated")
    assert event["recipe_id"] == created.id
    assert event["fields"] == ["title"]


def test_create_and_delete_are_logged(store, carbonara, caplog):
    with caplog.at_level(logging.INFO, logger=logger.name):
        created = asyncio.run(crud.create_recipe(RecipeCreate(**carbonara), store))
        asyncio.run(crud.delete_recipe(created.id, store))

    assert [e["recipe_id"] for e in logged(caplog, "recipe_created")] == [created.id]
    assert [e["recipe_id"] for e in logged(caplog, "recipe_deleted")] == [created.id]
