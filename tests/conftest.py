import pytest
from fastapi.testclient import TestClient

from recipe_api.config import StoreSettings
from recipe_api.recipes.db import create_db_engine
from recipe_api.recipes.main import create_app
from recipe_api.recipes.provision import init_db
from recipe_api.recipes.store import build_store

CARBONARA = {
    "title": "Spaghetti Carbonara",
    "description": "A classic Italian pasta dish",
    "ingredients": "Spaghetti, Eggs, Pecorino Romano, Guanciale, Black Pepper",
    "steps": "Boil pasta, fry guanciale, mix eggs and cheese, combine all.",
    "image_url": "https://example.com/spaghetti.jpg",
}


@pytest.fixture
def engine():
    # in-memory database shared through StaticPool
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def bare_engine():
    """An engine whose database was never provisioned."""
    engine = create_db_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture(params=["orm", "core"])
def store(request, engine):
    return build_store(StoreSettings(backend=request.param), engine)


@pytest.fixture
def client(engine):
    app = create_app(engine)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def carbonara():
    return dict(CARBONARA)
