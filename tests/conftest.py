"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from whoop_relay import whoop
from whoop_relay.api.deps import get_datastore, get_http_client
from whoop_relay.app import create_app
from whoop_relay.core import Datastore, DatastoreError, Settings, get_settings


Handler = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """Routes outbound requests by URL and remembers every call."""

    def __init__(self) -> None:
        self.calls: List[httpx.Request] = []
        self.routes: Dict[str, Handler] = {
            whoop.ECHO_URL: lambda request: httpx.Response(200, json={"url": str(request.url)}),
            f"{whoop.API_BASE}{whoop.PROFILE_PATH}": lambda request: httpx.Response(401),
            whoop.TOKEN_URL: lambda request: httpx.Response(
                200,
                json={
                    "access_token": "T",
                    "token_type": "bearer",
                    "expires_in": 3600,
                    "refresh_token": "R",
                },
            ),
        }

    def set(self, url: str, handler: Handler) -> None:
        self.routes[url] = handler

    def fail(self, url: str, exc_type: type = httpx.ConnectError) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_type("connection refused", request=request)

        self.routes[url] = _raise

    def calls_to(self, url: str) -> List[httpx.Request]:
        return [call for call in self.calls if str(call.url).split("?")[0] == url]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self.routes.get(str(request.url).split("?")[0])
        if handler is None:
            return httpx.Response(404)
        return handler(request)


class FakeDatastore:
    """Records inserts; fails the ones whose workout id is in ``fail_ids``."""

    def __init__(self, fail_ids: Optional[set] = None, fail_select: bool = False) -> None:
        self.inserts: List[Dict[str, Any]] = []
        self.fail_ids = fail_ids or set()
        self.fail_select = fail_select

    def insert(self, table, record):
        self.inserts.append(dict(record))
        if record["workout_id"] in self.fail_ids:
            raise DatastoreError("duplicate key value violates unique constraint")
        return table.model_validate(record)

    def select(self, table, limit=None):
        if self.fail_select:
            raise DatastoreError("relation \"workouts\" does not exist")
        return []


@pytest.fixture
def settings() -> Settings:
    return Settings(
        whoop_client_id="client-1234567890",
        whoop_client_secret="shh-secret",
        app_url="https://app.example.com",
        database_url="sqlite://",
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def datastore() -> FakeDatastore:
    return FakeDatastore()


@pytest.fixture
def app(settings, upstream, datastore):
    app = create_app(settings)
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = lambda: http_client
    app.dependency_overrides[get_datastore] = lambda: datastore
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def sqlite_datastore():
    store = Datastore.from_url("sqlite://")
    store.create_tables()
    yield store
    store.close()
