"""Database engine, session factory and declarative base."""
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from prepdesk.config import DATABASE_URL


def create_db_engine(url: str) -> Engine:
    """Create an engine; SQLite connections may be shared across threads."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


def make_session_factory(bind: Engine) -> sessionmaker:
    """Session factory used by request handlers and gateways."""
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


engine = create_db_engine(DATABASE_URL)
SessionLocal = make_session_factory(engine)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine | None = None) -> None:
    """Create all tables on the given engine (default: the app engine)."""
    # Importing the models registers their tables on Base.metadata
    import prepdesk.models.db  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
