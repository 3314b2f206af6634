"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_routes
from .core import Datastore, Settings, get_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_datastore(settings: Settings) -> Optional[Datastore]:
    if not settings.database_url:
        logger.warning("DATABASE_URL not set; webhook events will not be persisted")
        return None
    datastore = Datastore.from_url(settings.database_url)
    if settings.db_create_tables:
        datastore.create_tables()
    return datastore


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    app.state.http_client = httpx.AsyncClient()
    app.state.datastore = build_datastore(settings)
    try:
        yield
    finally:
        await app.state.http_client.aclose()
        if app.state.datastore is not None:
            app.state.datastore.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="WHOOP Relay API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("whoop_relay.app:app", host="127.0.0.1", port=3000, reload=True)
