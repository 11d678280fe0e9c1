"""
Recipe storage.

`RecipeStore` is the data-access contract every backend honours:

* validation happens before any storage call and raises
  `RecipeValidationError`;
* a missing id on get / update / delete raises `RecipeNotFound`, including
  when the row disappears between the existence check and the write;
* any driver failure is logged and re-raised as `StorageError`.

Listings are newest first (`created_at`, then `id`, both descending).

Two backends are available, selected by `store.backend` in the config:
`orm` goes through SQLAlchemy sessions, `core` issues Core statements on the
table and reads "not found" from the affected row count.
"""

import abc
from contextlib import contextmanager

import pydantic
from sqlalchemy import delete, desc, insert, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from recipe_api.config import StoreSettings
from recipe_api.framework.errors import (
    RecipeNotFound,
    RecipeValidationError,
    StorageError,
    describe_validation_errors,
)
from recipe_api.framework.logging import log_error
from recipe_api.recipes.db import create_session_factory
from recipe_api.recipes.models import Recipe, new_recipe_id, recipes_table
from recipe_api.shared.schemas.recipe import (
    REQUIRED_FIELDS,
    RecipeCreate,
    RecipeOut,
    RecipeUpdate,
)

FIELDS = REQUIRED_FIELDS + ("image_url",)


@contextmanager
def storage_errors(operation: str):
    """
    Translates driver failures into StorageError, logging the detail.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        log_error("storage_error", operation=operation, error=str(exc))
        raise StorageError(operation) from exc


def _coerce(model, data):
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        raise RecipeValidationError(
            message=describe_validation_errors(exc.errors())
        ) from exc


class RecipeStore(abc.ABC):
    def __init__(self, engine: Engine, trim_whitespace: bool = True):
        self.engine = engine
        self.trim_whitespace = trim_whitespace

    def _clean(self, value):
        if value is None:
            return None
        return value.strip() if self.trim_whitespace else value

    def prepare_new(self, data) -> dict:
        """
        Validates a creation payload and returns the full row to insert,
        generated id included.
        """
        data = _coerce(RecipeCreate, data)
        values = {name: self._clean(getattr(data, name)) for name in FIELDS}

        missing = [name for name in REQUIRED_FIELDS if not values[name]]
        if missing:
            raise RecipeValidationError(missing)

        values["image_url"] = values["image_url"] or ""
        values["id"] = new_recipe_id()
        return values

    def prepare_changes(self, data) -> dict:
        """
        Returns only the columns an update overwrites: absent or empty
        fields keep their stored value.
        """
        data = _coerce(RecipeUpdate, data)
        changes = {}
        for name in FIELDS:
            value = self._clean(getattr(data, name))
            if value:
                changes[name] = value
        return changes

    @abc.abstractmethod
    def list_recipes(self) -> list[RecipeOut]: ...

    @abc.abstractmethod
    def get_recipe(self, recipe_id: str) -> RecipeOut: ...

    @abc.abstractmethod
    def create_recipe(self, data) -> RecipeOut: ...

    @abc.abstractmethod
    def update_recipe(self, recipe_id: str, data) -> RecipeOut: ...

    @abc.abstractmethod
    def delete_recipe(self, recipe_id: str) -> None: ...

    def ping(self) -> None:
        with storage_errors("ping"), self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))


class OrmRecipeStore(RecipeStore):
    """
    Session-per-operation store on the mapped `Recipe` model.
    """

    def __init__(self, engine: Engine, trim_whitespace: bool = True):
        super().__init__(engine, trim_whitespace)
        self._sessions = create_session_factory(engine)

    @staticmethod
    def _find(db, recipe_id: str):
        return db.query(Recipe).filter(Recipe.id == recipe_id).first()

    def list_recipes(self):
        with storage_errors("list_recipes"), self._sessions() as db:
            rows = (
                db.query(Recipe)
                .order_by(desc(Recipe.created_at), desc(Recipe.id))
                .all()
            )
            return [RecipeOut.model_validate(r) for r in rows]

    def get_recipe(self, recipe_id):
        with storage_errors("get_recipe"), self._sessions() as db:
            recipe = self._find(db, recipe_id)
            if not recipe:
                raise RecipeNotFound(recipe_id)
            return RecipeOut.model_validate(recipe)

    def create_recipe(self, data):
        values = self.prepare_new(data)

        with storage_errors("create_recipe"), self._sessions() as db:
            recipe = Recipe(**values)
            db.add(recipe)
            db.commit()
            db.refresh(recipe)
            return RecipeOut.model_validate(recipe)

    def update_recipe(self, recipe_id, data):
        changes = self.prepare_changes(data)

        with storage_errors("update_recipe"), self._sessions() as db:
            recipe = self._find(db, recipe_id)
            if not recipe:
                raise RecipeNotFound(recipe_id)

            for name, value in changes.items():
                setattr(recipe, name, value)

            try:
                db.commit()
            except StaleDataError:
                # deleted by someone else after the lookup
                db.rollback()
                raise RecipeNotFound(recipe_id)

            recipe = self._find(db, recipe_id)
            if not recipe:
                raise RecipeNotFound(recipe_id)
            return RecipeOut.model_validate(recipe)

    def delete_recipe(self, recipe_id):
        with storage_errors("delete_recipe"), self._sessions() as db:
            deleted = (
                db.query(Recipe)
                .filter(Recipe.id == recipe_id)
                .delete(synchronize_session=False)
            )
            if not deleted:
                db.rollback()
                raise RecipeNotFound(recipe_id)
            db.commit()


class CoreRecipeStore(RecipeStore):
    """
    Statement-level store on the `recipes` table.
    """

    @staticmethod
    def _fetch(conn, recipe_id: str):
        stmt = select(recipes_table).where(recipes_table.c.id == recipe_id)
        row = conn.execute(stmt).mappings().first()
        if row is None:
            raise RecipeNotFound(recipe_id)
        return RecipeOut.model_validate(dict(row))

    def list_recipes(self):
        stmt = select(recipes_table).order_by(
            recipes_table.c.created_at.desc(), recipes_table.c.id.desc()
        )
        with storage_errors("list_recipes"), self.engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [RecipeOut.model_validate(dict(r)) for r in rows]

    def get_recipe(self, recipe_id):
        with storage_errors("get_recipe"), self.engine.connect() as conn:
            return self._fetch(conn, recipe_id)

    def create_recipe(self, data):
        values = self.prepare_new(data)

        with storage_errors("create_recipe"), self.engine.begin() as conn:
            conn.execute(insert(recipes_table).values(**values))
            return self._fetch(conn, values["id"])

    def update_recipe(self, recipe_id, data):
        changes = self.prepare_changes(data)

        with storage_errors("update_recipe"), self.engine.begin() as conn:
            if changes:
                stmt = (
                    update(recipes_table)
                    .where(recipes_table.c.id == recipe_id)
                    .values(**changes)
                )
                if conn.execute(stmt).rowcount == 0:
                    raise RecipeNotFound(recipe_id)
            return self._fetch(conn, recipe_id)

    def delete_recipe(self, recipe_id):
        stmt = delete(recipes_table).where(recipes_table.c.id == recipe_id)
        with storage_errors("delete_recipe"), self.engine.begin() as conn:
            if conn.execute(stmt).rowcount == 0:
                raise RecipeNotFound(recipe_id)


BACKENDS = {
    "orm": OrmRecipeStore,
    "core": CoreRecipeStore,
}


def build_store(settings: StoreSettings, engine: Engine) -> RecipeStore:
    """
    Instantiates the configured backend around an engine owned by the caller.
    """
    try:
        store_cls = BACKENDS[settings.backend]
    except KeyError:
        raise ValueError(
            f"Unknown store backend '{settings.backend}'. "
            f"Use one of: {', '.join(BACKENDS)}"
        )
    return store_cls(engine, trim_whitespace=settings.trim_whitespace)
