import logging
from contextlib import asynccontextmanager
from time import perf_counter
from typing import AsyncGenerator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from sqlalchemy.orm import Session, sessionmaker

from api import products, swap
from api.errors import register_error_handlers
from config import config
from db.db import create_db_engine
from services.price_cache import PriceCache, build_default_cache
from services.swap_executor import SwapExecutor

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(
    *,
    session_factory: "sessionmaker[Session] | None" = None,
    price_cache: PriceCache | None = None,
    swap_executor: SwapExecutor | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
        engine = None
        if getattr(fastapi_app.state, "sessionmaker", None) is None:
            engine = create_db_engine(config().db_file)
            fastapi_app.state.sessionmaker = sessionmaker(engine)
        yield
        if engine is not None:
            engine.dispose()

    app = FastAPI(title="Swap Desk", version=VERSION, lifespan=lifespan)
    app.state.sessionmaker = session_factory
    app.state.price_cache = price_cache or build_default_cache()
    app.state.swap_executor = swap_executor or SwapExecutor(delay_seconds=config().swap_delay_seconds)

    @app.middleware("http")
    async def log_process_time(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        start_time = perf_counter()
        response = await call_next(request)
        process_time = perf_counter() - start_time
        logger.info("Request time: %s %s: %.4fs", request.method, request.url, process_time)
        return response

    @app.get("/")
    def banner() -> dict[str, object]:
        return {
            "message": "Swap desk API: token swap quotes and product CRUD",
            "version": VERSION,
            "endpoints": {
                "products": "/api/products",
                "prices": "/api/prices",
                "tokens": "/api/tokens",
                "quote": "/api/swap/quote",
                "confirm": "/api/swap/confirm",
            },
        }

    register_error_handlers(app)
    app.include_router(products.router)
    app.include_router(swap.router)
    return app


app = create_app()
