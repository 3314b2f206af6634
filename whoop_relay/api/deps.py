"""FastAPI dependencies for process-wide clients.

Both clients are created in the app lifespan and parked on ``app.state``;
tests swap them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Optional

import httpx
from fastapi import Request

from ..core import Datastore


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_datastore(request: Request) -> Optional[Datastore]:
    """The configured datastore, or ``None`` when ``DATABASE_URL`` is unset."""

    return getattr(request.app.state, "datastore", None)


__all__ = ["get_datastore", "get_http_client"]
