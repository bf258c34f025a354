"""Persistence tests against a real SQLite file."""

from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from price_monitor.models.base import PriceRow, ProductRow
from price_monitor.services.price_repository import PriceRepository
from price_monitor.utils import PersistenceError

URL = "https://www.terabyteshop.com.br/produto/25000/placa-de-video-xfx-rx-7600"


@pytest_asyncio.fixture
async def repository(tmp_path):
    """A repository with a fresh schema in a temporary database file."""
    repo = PriceRepository(database_url=f"sqlite+aiosqlite:///{tmp_path / 'data' / 'prices.db'}")
    await repo.init_schema()
    yield repo
    await repo.dispose()


async def _count(repository, model) -> int:
    async with repository.async_session() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


def test_rejects_unsupported_database_url():
    with pytest.raises(ValueError, match="Invalid DATABASE_URL"):
        PriceRepository(database_url="redis://localhost:6379/0")


@pytest.mark.asyncio
async def test_save_scrape_inserts_product_and_price(repository):
    product_id, scraped_at = await repository.save_scrape(
        name="XFX RX 7600",
        url=URL,
        features={"marca": "XFX"},
        price_cash=1299.9,
        price_installment=127.44,
        conditions={"parcelas_sem_juros": 12},
    )

    product = await repository.get_product(product_id)
    assert product.name == "XFX RX 7600"
    assert product.url == URL
    assert product.features == {"marca": "XFX"}
    assert product.last_scraped_at is not None

    history = await repository.get_price_history(product_id)
    assert len(history) == 1
    assert history[0].price_cash == pytest.approx(1299.9)
    assert history[0].price_installment == pytest.approx(127.44)
    assert history[0].conditions == {"parcelas_sem_juros": 12}
    assert scraped_at.tzinfo is not None
    assert history[0].scraped_at == scraped_at
    assert history[0].scraped_at.utcoffset() == timedelta(0)
    assert product.last_scraped_at.utcoffset() == timedelta(0)


@pytest.mark.asyncio
async def test_second_scrape_updates_product_and_appends_price(repository):
    first_id, _ = await repository.save_scrape("Old name", URL, {"marca": "XFX"}, 1399.9, None, None)
    second_id, _ = await repository.save_scrape("New name", URL, {"marca": "XFX", "memory_size_gb": 8}, 1299.9, 127.44, None)

    assert first_id == second_id
    assert await _count(repository, ProductRow) == 1
    assert await _count(repository, PriceRow) == 2

    product = await repository.get_product(first_id)
    assert product.name == "New name"
    assert product.features == {"marca": "XFX", "memory_size_gb": 8}

    history = await repository.get_price_history(first_id)
    assert [p.price_cash for p in history] == pytest.approx([1299.9, 1399.9])  # newest first


@pytest.mark.asyncio
async def test_missing_cash_price_rolls_back_whole_scrape(repository):
    with pytest.raises(PersistenceError, match="Error saving price to DB."):
        await repository.save_scrape("XFX RX 7600", URL, None, None, 127.44, None)

    assert await _count(repository, ProductRow) == 0
    assert await _count(repository, PriceRow) == 0


@pytest.mark.asyncio
async def test_missing_product_name_fails(repository):
    with pytest.raises(PersistenceError, match="Error saving product to DB."):
        await repository.save_scrape(None, URL, None, 1299.9, None, None)

    assert await _count(repository, PriceRow) == 0


@pytest.mark.asyncio
async def test_llm_fallback_dicts_are_stored(repository):
    product_id, _ = await repository.save_scrape(
        "XFX RX 7600", URL, {"error": "LLM analysis of technical features failed."}, 1299.9, None, {"error": "x"}
    )

    product = await repository.get_product(product_id)
    assert product.features == {"error": "LLM analysis of technical features failed."}


@pytest.mark.asyncio
async def test_list_products_and_unknown_product(repository):
    await repository.save_scrape("A", URL, None, 10.0, None, None)
    await repository.save_scrape("B", URL + "-b", None, 20.0, None, None)

    products = await repository.list_products()

    assert {p.name for p in products} == {"A", "B"}
    assert await repository.get_product(9999) is None
    assert await repository.get_price_history(9999) == []
