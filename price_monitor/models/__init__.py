"""Data models: pydantic API/transfer models and SQLAlchemy tables."""
