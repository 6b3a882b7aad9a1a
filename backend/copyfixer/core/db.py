from collections.abc import Generator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from copyfixer.core.config import settings


def _engine_connect_args(database_url: str) -> dict:
    timeout = settings.DATABASE_TIMEOUT_SECONDS
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": timeout}
    if database_url.startswith("postgresql"):
        return {"connect_timeout": int(timeout)}
    return {}


def build_engine(database_url: str) -> Engine:
    kwargs: dict = {"connect_args": _engine_connect_args(database_url), "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        kwargs["pool_timeout"] = settings.DATABASE_TIMEOUT_SECONDS
    return create_engine(database_url, **kwargs)


engine: Engine = build_engine(settings.DATABASE_URL)


def init_db(bind: Engine | None = None) -> None:
    # Importing models registers the tables on SQLModel.metadata.
    from copyfixer import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
