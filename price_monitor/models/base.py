"""SQLAlchemy tables for products and their price history."""

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ProductRow(Base):
    """Database model for the products table. One row per product URL."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    url = Column(String, nullable=False, unique=True)
    last_scraped_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())
    features = Column(JSON)


class PriceRow(Base):
    """Database model for the prices table. One row per scrape of a product."""

    __tablename__ = "prices"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), index=True)
    price_cash = Column(Float, nullable=False)
    price_installment = Column(Float)
    conditions = Column(JSON)
    scraped_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())
