"""
Tests for settings, the datastore client and the last-resort error handler.
"""

import pytest
from fastapi.testclient import TestClient

from whoop_relay.core import ConfigurationError, Datastore, DatastoreError, Settings
from whoop_relay.models import WorkoutRecord


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "WHOOP_CLIENT_ID",
        "WHOOP_CLIENT_SECRET",
        "APP_URL",
        "DATABASE_URL",
        "APP_ENV",
        "LOG_LEVEL",
        "ALLOWED_ORIGINS",
        "DB_CREATE_TABLES",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.from_env()

        assert settings.app_env == "development"
        assert settings.log_level == "INFO"
        assert settings.database_url is None
        assert settings.db_create_tables is True
        assert settings.redirect_uri is None

    def test_reads_environment(self, clean_env):
        clean_env.setenv("WHOOP_CLIENT_ID", "cid")
        clean_env.setenv("WHOOP_CLIENT_SECRET", "secret")
        clean_env.setenv("APP_URL", "https://app.example.com/")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("DB_CREATE_TABLES", "no")

        settings = Settings.from_env()

        assert settings.app_url == "https://app.example.com"
        assert settings.redirect_uri == "https://app.example.com/api/oauthcallback"
        assert settings.has_whoop_credentials
        assert settings.log_level == "DEBUG"
        assert settings.db_create_tables is False

    def test_blank_values_count_as_missing(self, clean_env):
        clean_env.setenv("WHOOP_CLIENT_ID", "   ")

        assert Settings.from_env().whoop_client_id is None

    def test_postgres_scheme_is_rewritten(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgres://u:p@db.example.com:5432/postgres")

        assert Settings.from_env().database_url == "postgresql://u:p@db.example.com:5432/postgres"

    def test_require_oauth_lists_missing(self):
        with pytest.raises(ConfigurationError) as excinfo:
            Settings(whoop_client_id="cid").require_oauth()

        assert excinfo.value.missing == ["WHOOP_CLIENT_SECRET", "APP_URL"]

    def test_allowed_origins(self, clean_env):
        clean_env.setenv("APP_URL", "https://app.example.com")
        clean_env.setenv("ALLOWED_ORIGINS", "https://a.example, https://app.example.com")

        origins = Settings.from_env().allowed_origins

        assert origins[:2] == ["https://app.example.com", "https://a.example"]
        assert origins.count("https://app.example.com") == 1


class TestDatastore:
    def test_insert_populates_generated_fields(self, sqlite_datastore):
        row = sqlite_datastore.insert(
            WorkoutRecord,
            {"user_id": "u1", "workout_id": "w1", "strain": 9.5, "event_type": "workout.created"},
        )

        assert row.id is not None
        assert row.created_at is not None

    def test_select_limit(self, sqlite_datastore):
        for i in range(3):
            sqlite_datastore.insert(
                WorkoutRecord,
                {"user_id": "u1", "workout_id": f"w{i}", "event_type": "workout.created"},
            )

        assert len(sqlite_datastore.select(WorkoutRecord, limit=1)) == 1
        assert len(sqlite_datastore.select(WorkoutRecord)) == 3
        assert sqlite_datastore.select(WorkoutRecord)[0].strain == 0.0

    def test_failed_insert_raises_datastore_error(self, sqlite_datastore):
        with pytest.raises(DatastoreError):
            sqlite_datastore.insert(
                WorkoutRecord,
                {"user_id": None, "workout_id": "w1", "event_type": "workout.created"},
            )

    def test_missing_table_raises_datastore_error(self):
        store = Datastore.from_url("sqlite://")
        try:
            with pytest.raises(DatastoreError):
                store.select(WorkoutRecord, limit=1)
        finally:
            store.close()


def test_unhandled_exception_becomes_generic_500(app):
    @app.get("/boom")
    def boom():
        raise RuntimeError("unexpected")

    response = TestClient(app, raise_server_exceptions=False).get("/boom")

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Internal server error"
    assert body["message"] == "unexpected"
    assert body["timestamp"].endswith("Z")


def test_lifespan_builds_and_disposes_clients(settings):
    from whoop_relay.app import create_app

    app = create_app(settings)
    with TestClient(app) as client:
        assert isinstance(app.state.datastore, Datastore)
        assert client.get("/healthz").json() == {"ok": True}
    assert app.state.http_client.is_closed
