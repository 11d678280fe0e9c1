from sqlalchemy import create_engine, inspect

from recipe_api.recipes.provision import main


def test_init_db_command_creates_table(tmp_path):
    url = f"sqlite:///{tmp_path / 'recipes.db'}"

    main(["--database-url", url])

    engine = create_engine(url)
    try:
        columns = {c["name"] for c in inspect(engine).get_columns("recipes")}
    finally:
        engine.dispose()
    assert {"id", "title", "description", "ingredients", "steps", "image_url"} <= columns


def test_init_db_command_is_repeatable(tmp_path):
    url = f"sqlite:///{tmp_path / 'recipes.db'}"

    main(["--database-url", url])
    main(["--database-url", url])
