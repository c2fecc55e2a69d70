from typing import Annotated, Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from db.repositories import ProductRepository
from services.price_cache import PriceCache, PriceLookup
from services.swap_executor import SwapExecutor


def get_session(request: Request) -> Generator[Session, None, None]:
    with request.app.state.sessionmaker() as session:
        yield session


def get_product_repository(session: Annotated[Session, Depends(get_session)]) -> ProductRepository:
    return ProductRepository(session)


def get_price_cache(request: Request) -> PriceCache:
    return request.app.state.price_cache


def get_prices(cache: Annotated[PriceCache, Depends(get_price_cache)]) -> PriceLookup:
    return cache.lookup()


def get_swap_executor(request: Request) -> SwapExecutor:
    return request.app.state.swap_executor
