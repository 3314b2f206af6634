"""Aggregate API routers."""

from fastapi import APIRouter

from .diagnostics import router as diagnostics_router
from .oauth import router as oauth_router
from .system import router as system_router
from .webhooks import router as webhooks_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    oauth_router,
    webhooks_router,
    diagnostics_router,
)

__all__ = ["ALL_ROUTERS"]
