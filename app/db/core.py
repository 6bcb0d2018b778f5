from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.core.config import settings


def _build_engine(url: str):
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    # SQLite is used for local runs and tests; the in-memory variant must
    # share a single connection or every session would see an empty DB.
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = _build_engine(settings.database_url)


def get_session():
    with Session(engine) as session:
        yield session
