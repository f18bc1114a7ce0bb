# Database wiring: one engine, a session factory and the declarative Base
# every model inherits from. Tests build their own sessionmaker on SQLite files.

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from dealersite.core.config import settings


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    connect_args=_connect_args(settings.DATABASE_URL),
    future=True,
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

Base = declarative_base()
