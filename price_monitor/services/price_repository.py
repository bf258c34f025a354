"""Persistence of scraped products and their price history."""

from datetime import datetime, timezone
import os
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import JSON, bindparam, event, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from price_monitor.models.base import PriceRow, ProductRow
from price_monitor.models.product import PriceRecord, ProductSummary
from price_monitor.utils import PersistenceError, logger
from price_monitor.utils.config import DATABASE_URL as DEFAULT_CONFIG_DATABASE_URL
from price_monitor.utils.init_db import create_schema, ensure_sqlite_directory

# Works on SQLite (>= 3.24) and PostgreSQL. last_scraped_at is refreshed on every scrape.
_UPSERT_PRODUCT = text("""
    INSERT INTO products (name, url, features, last_scraped_at)
    VALUES (:name, :url, :features, CURRENT_TIMESTAMP)
    ON CONFLICT(url) DO UPDATE SET
        name = excluded.name,
        features = excluded.features,
        last_scraped_at = CURRENT_TIMESTAMP
""").bindparams(bindparam("features", type_=JSON))

_SELECT_PRODUCT_ID = text("SELECT id FROM products WHERE url = :url")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class PriceRepository:
    """Reads and writes the products and prices tables."""

    def __init__(self, database_url: Optional[str] = None):
        """Initialize database connection."""
        db_url = database_url or os.getenv("DATABASE_URL") or DEFAULT_CONFIG_DATABASE_URL

        if not db_url:
            raise ValueError("DATABASE_URL is not set in environment or config.")

        if not (db_url.startswith("sqlite") or db_url.startswith("postgresql") or db_url.startswith("mysql")):
            raise ValueError(f"Invalid DATABASE_URL configured: {db_url}")

        self.database_url = db_url
        if db_url.startswith("sqlite"):
            ensure_sqlite_directory(db_url)
        self.engine = create_async_engine(str(db_url))
        if db_url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.async_session = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    async def init_schema(self) -> None:
        """Create tables if they don't exist."""
        await create_schema(self.engine)
        logger.info("✅ Database schema ready (%s)", self.engine.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()

    async def save_scrape(
        self,
        name: Optional[str],
        url: str,
        features: Optional[Dict[str, Any]],
        price_cash: Optional[float],
        price_installment: Optional[float],
        conditions: Optional[Dict[str, Any]],
    ) -> Tuple[int, datetime]:
        """
        Upsert the product by URL and append a price row, in one transaction.

        Args:
            name: Product name (required by the schema)
            url: Product page URL, the product's natural key
            features: Extracted technical features
            price_cash: Cash price (required by the schema)
            price_installment: Installment price
            conditions: Normalized payment conditions

        Returns:
            Tuple[int, datetime]: Product id and the timestamp stored on the price row

        Raises:
            PersistenceError: If either write fails; nothing is committed in that case
        """
        scraped_at = datetime.now(timezone.utc)
        async with self.async_session() as session:
            async with session.begin():
                try:
                    await session.execute(_UPSERT_PRODUCT, {"name": name, "url": url, "features": features})
                    # Same lookup for the insert and the update path
                    product_id = (await session.execute(_SELECT_PRODUCT_ID, {"url": url})).scalar_one_or_none()
                except SQLAlchemyError as e:
                    logger.error("❌ Error inserting/updating product %s: %s", url, e)
                    raise PersistenceError("Error saving product to DB.") from e

                if product_id is None:
                    logger.error("❌ Product %s not found after upsert", url)
                    raise PersistenceError("Error resolving product ID to save price.")

                try:
                    await session.execute(
                        insert(PriceRow).values(
                            product_id=product_id,
                            price_cash=price_cash,
                            price_installment=price_installment,
                            conditions=conditions,
                            scraped_at=scraped_at,
                        )
                    )
                except SQLAlchemyError as e:
                    logger.error("❌ Error inserting price for product %s: %s", product_id, e)
                    raise PersistenceError("Error saving price to DB.") from e

        logger.info("✅ Saved product %s (id=%s) with cash price %s", url, product_id, price_cash)
        return product_id, scraped_at

    async def get_product(self, product_id: int) -> Optional[ProductSummary]:
        """Fetch one product by id, or None."""
        async with self.async_session() as session:
            row = await session.get(ProductRow, product_id)
            return ProductSummary.model_validate(row) if row else None

    async def list_products(self) -> List[ProductSummary]:
        """All stored products, most recently scraped first."""
        async with self.async_session() as session:
            result = await session.execute(select(ProductRow).order_by(ProductRow.last_scraped_at.desc(), ProductRow.id.desc()))
            return [ProductSummary.model_validate(row) for row in result.scalars().all()]

    async def get_price_history(self, product_id: int) -> List[PriceRecord]:
        """Price rows of a product, newest first."""
        async with self.async_session() as session:
            result = await session.execute(
                select(PriceRow).where(PriceRow.product_id == product_id).order_by(PriceRow.scraped_at.desc(), PriceRow.id.desc())
            )
            return [PriceRecord.model_validate(row) for row in result.scalars().all()]
