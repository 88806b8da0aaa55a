from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_database_url(url: str) -> str:
    """Normalize PostgreSQL URL to use psycopg3 driver.

    SQLite URLs (used in tests) are returned untouched.
    """
    if url.startswith("postgresql://") and "+psycopg" not in url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


class Database:
    """Explicitly constructed store handle.

    Created when the API starts and disposed when it stops; request handlers
    obtain sessions through the ``get_db`` dependency instead of a module-level
    engine.
    """

    def __init__(self, url: str, **engine_kwargs):
        self.url = normalize_database_url(url)
        if self.url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        self.engine = create_engine(self.url, **engine_kwargs)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()
