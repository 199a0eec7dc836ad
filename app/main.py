from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from feed.realtime import build_default_feed
from logging_config import configure_logging
from services.aggregator import build_default_aggregator
from settings import get_settings


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    aggregator = build_default_aggregator()
    feed = build_default_feed()
    aggregator.listen(
        feed,
        sensor_path=settings.sensor_path,
        motion_path=settings.motion_path,
        ledger_path=settings.ledger_path,
    )
    try:
        yield
    finally:
        aggregator.shutdown()
        build_default_aggregator.cache_clear()
        build_default_feed.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Warehouse Telemetry",
        description="Aggregates realtime warehouse telemetry and ledger snapshots.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
