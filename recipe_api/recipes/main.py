from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from recipe_api.config import get_config_for_service
from recipe_api.framework.app import create_microservice
from recipe_api.framework.logging import log_event
from recipe_api.recipes.db import create_db_engine
from recipe_api.recipes.dependencies import get_store
from recipe_api.recipes.store import build_store

SERVICE_NAME = "recipes"


def create_app(engine: Engine | None = None) -> FastAPI:
    """
    Build the recipes application around one engine for the process lifetime.
    An engine passed in stays owned by the caller and is not disposed.
    """
    service = get_config_for_service(SERVICE_NAME)
    owns_engine = engine is None
    if owns_engine:
        engine = create_db_engine(service.db)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_event("startup", service_name=SERVICE_NAME, backend=service.store.backend)
        yield
        if owns_engine:
            engine.dispose()
        log_event("shutdown", service_name=SERVICE_NAME)

    app = create_microservice(SERVICE_NAME, get_store, lifespan=lifespan)
    app.state.store = build_store(service.store, engine)
    return app


app = create_app()
