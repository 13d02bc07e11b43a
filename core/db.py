from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from core.config import get_settings

settings = get_settings()


def build_engine(database_url: str, echo: bool = False):
    """Create an engine, with the SQLite tweaks needed by a threaded server"""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # A bare in-memory database only lives as long as its connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)


def create_db_and_tables(bind=None):
    # Importing the models registers every table on the metadata
    import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


# Database dependency
def get_session():
    with Session(engine) as session:
        yield session
