from typing import Generator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from db.models import Base
from services.price_cache import PriceCache
from services.swap_executor import SwapExecutor
from tests.helpers.price_feed import FakeClock, StubQuoteFeed, make_quote

engine: Engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
session_factory = sessionmaker(engine)


@pytest.fixture(scope="function")
def test_session() -> Generator[Session, None, None]:
    with session_factory() as session:
        yield session


@pytest.fixture(scope="function", autouse=True)
def reset_db() -> Generator[None, None, None]:
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="function")
def quote_feed() -> StubQuoteFeed:
    return StubQuoteFeed(
        [
            make_quote("ETH", "1990", minutes=-5),
            make_quote("ETH", "2000"),
            make_quote("USDC", "1"),
            make_quote("BTC", "40000"),
        ]
    )


@pytest.fixture(scope="function")
def price_cache(quote_feed: StubQuoteFeed, clock: FakeClock) -> PriceCache:
    return PriceCache(quote_feed, clock=clock)


@pytest.fixture(scope="function")
def swap_executor() -> SwapExecutor:
    return SwapExecutor(delay_seconds=0.6, sleep=lambda _: None)


@pytest.fixture(scope="function")
def db_sessionmaker() -> sessionmaker[Session]:
    return session_factory
