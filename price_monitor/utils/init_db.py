"""One-time database initialization script."""

import asyncio
from pathlib import Path
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from price_monitor.models.base import Base
from price_monitor.utils import logger
from price_monitor.utils.config import DATABASE_URL


def ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-based SQLite database (e.g. ./data/prices.db)."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def create_schema(engine: AsyncEngine) -> None:
    """Create the products and prices tables if they don't exist."""
    async with engine.begin() as conn:
        # Does not migrate existing tables; use a migration tool for schema changes
        await conn.run_sync(Base.metadata.create_all)


async def init_db(database_url: Optional[str] = None) -> None:
    """
    Initialize database tables.

    Raises:
        ValueError: If DATABASE_URL is not set
    """
    database_url = database_url or DATABASE_URL
    if not database_url:
        raise ValueError("DATABASE_URL must be set")

    ensure_sqlite_directory(database_url)
    engine = create_async_engine(str(database_url))
    try:
        await create_schema(engine)
    finally:
        await engine.dispose()
    logger.info("✅ Database tables initialized (if they did not already exist).")


if __name__ == "__main__":
    asyncio.run(init_db())
