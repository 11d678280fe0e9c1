"""
One-time schema provisioning for the recipes table.

Run ``recipe-api-init-db`` (or ``python -m recipe_api.recipes.provision``)
against the configured DATABASE_URL before the first deploy. The service
itself never creates tables.
"""

import argparse

from sqlalchemy.engine import Engine

from recipe_api.config import get_config_for_service, normalize_database_url
from recipe_api.framework.logging import Span, log_event
from recipe_api.recipes.db import Base, create_db_engine

# registers the mapped tables on Base.metadata
from recipe_api.recipes import models  # noqa: F401


def init_db(engine: Engine) -> None:
    with Span("db_create_schema"):
        Base.metadata.create_all(bind=engine)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create the recipes table.")
    parser.add_argument(
        "--database-url",
        help="connection string, defaults to the configured one (DATABASE_URL)",
    )
    args = parser.parse_args(argv)

    if args.database_url:
        url = normalize_database_url(args.database_url)
    else:
        url = get_config_for_service("recipes").db
    engine = create_db_engine(url)
    try:
        init_db(engine)
    finally:
        engine.dispose()

    log_event("schema_provisioned", database=engine.url.render_as_string())


if __name__ == "__main__":
    main()
