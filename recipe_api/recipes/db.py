from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_db_engine(url: str) -> Engine:
    """
    Build the engine the process owns for its whole lifetime.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    # sqlite connections are handed across the server's threads
    connect_args = {"check_same_thread": False}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every checkout sees an empty database
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


def create_session_factory(engine: Engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
