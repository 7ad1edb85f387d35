import asyncio

from app.db.session import engine
from app.db.base import Base

# Importing the models registers their tables on Base.metadata
from app.models import Category, ProductCategory, Menu, MenuItem  # noqa: F401


async def ensure_tables_exist() -> None:
    """
    Make sure the tables exist (called on application startup)
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(ensure_tables_exist())
