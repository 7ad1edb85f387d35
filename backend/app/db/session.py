from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


def get_async_database_uri(uri: str) -> str:
    """sqlite:/// URLs are served through the aiosqlite driver"""
    if uri.startswith("sqlite:///"):
        return uri.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return uri


# SQL echo only when SQL_DEBUG is set
engine = create_async_engine(
    get_async_database_uri(settings.SQLITE_DATABASE_URI),
    echo=settings.SQL_DEBUG,
    future=True,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
