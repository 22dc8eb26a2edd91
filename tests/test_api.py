"""
Tests for the FastAPI host: movie routes, error envelope and static files.
"""

from __future__ import annotations

from pathlib import Path
from typing import AsyncIterator, Optional
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from movie_catalog.api.main import create_app
from movie_catalog.core.deps import get_movie_repository
from movie_catalog.core.errors import ConfigurationError, StorageFailure
from movie_catalog.core.settings import AppSettings
from movie_catalog.db.config import Settings
from movie_catalog.db.seed import SAMPLE_MOVIES
from movie_catalog.db.session import SessionFactory


def _app(session_factory: SessionFactory, static_dir: Path) -> FastAPI:
    return create_app(app_settings=AppSettings(STATIC_DIR=static_dir), session_factory=session_factory)


@pytest_asyncio.fixture
async def app(session_factory: SessionFactory, tmp_path: Path) -> FastAPI:
    return _app(session_factory, tmp_path / "no-static")


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _create(client: httpx.AsyncClient, name: str, director: Optional[str] = None) -> dict:
    resp = await client.post("/api/v1/movies", json={"name": name, "director": director})
    assert resp.status_code == 201
    return resp.json()


class TestMovieRoutes:

    @pytest.mark.asyncio
    async def test_health(self, client: httpx.AsyncClient) -> None:
        resp = await client.get("/api/v1/health")

        assert resp.status_code == 200
        assert resp.json() == {"message": "Healthy"}

    @pytest.mark.asyncio
    async def test_list_is_empty(self, client: httpx.AsyncClient) -> None:
        resp = await client.get("/api/v1/movies")

        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_add_then_get(self, client: httpx.AsyncClient) -> None:
        created = await _create(client, "test_movie_1", "Shelby Mansker")

        assert created["id"]
        resp = await client.get(f"/api/v1/movies/{created['id']}")
        assert resp.status_code == 200
        assert resp.json() == created

        listed = (await client.get("/api/v1/movies")).json()
        assert len(listed) == 1
        assert listed[0]["name"] == "test_movie_1"

    @pytest.mark.asyncio
    async def test_edit(self, client: httpx.AsyncClient) -> None:
        created = await _create(client, "Life Sucks", "Shelby Mansker")

        resp = await client.put(
            f"/api/v1/movies/{created['id']}",
            json={"name": "Life is Awesome", "director": "Shelby Mansker"},
        )

        assert resp.status_code == 200
        assert resp.json() == {"id": created["id"], "name": "Life is Awesome", "director": "Shelby Mansker"}
        listed = (await client.get("/api/v1/movies")).json()
        assert [m["name"] for m in listed] == ["Life is Awesome"]

    @pytest.mark.asyncio
    async def test_edit_unknown_movie_is_404(self, client: httpx.AsyncClient) -> None:
        resp = await client.put(f"/api/v1/movies/{uuid4()}", json={"name": "Ghost"})

        assert resp.status_code == 404
        body = resp.json()
        assert body["status"] == 404
        assert body["error"]["type"] == "not_found"
        assert body["method"] == "PUT"

    @pytest.mark.asyncio
    async def test_delete(self, client: httpx.AsyncClient) -> None:
        created = await _create(client, "Doomed")
        await _create(client, "Survivor")

        resp = await client.delete(f"/api/v1/movies/{created['id']}")

        assert resp.status_code == 204
        assert (await client.get(f"/api/v1/movies/{created['id']}")).status_code == 404
        assert len((await client.get("/api/v1/movies")).json()) == 1

    @pytest.mark.asyncio
    async def test_delete_unknown_movie_is_404(self, client: httpx.AsyncClient) -> None:
        resp = await client.delete(f"/api/v1/movies/{uuid4()}")

        assert resp.status_code == 404
        assert resp.json()["error"]["type"] == "not_found"

    @pytest.mark.asyncio
    async def test_get_unknown_movie_is_404(self, client: httpx.AsyncClient) -> None:
        missing = uuid4()
        resp = await client.get(f"/api/v1/movies/{missing}")

        assert resp.status_code == 404
        assert resp.json()["error"] == {
            "type": "not_found",
            "message": f"Movie '{missing}' not found",
            "details": {"entity": "Movie", "key": str(missing)},
        }

    @pytest.mark.asyncio
    async def test_invalid_payload_is_422(self, client: httpx.AsyncClient) -> None:
        resp = await client.post("/api/v1/movies", json={"director": "Nobody"})

        assert resp.status_code == 422
        assert resp.json()["error"]["type"] == "validation_error"

    @pytest.mark.asyncio
    async def test_storage_failure_is_503(self, app: FastAPI, client: httpx.AsyncClient) -> None:
        class _BrokenRepository:
            async def list_movies(self):
                raise StorageFailure("connection lost")

        app.dependency_overrides[get_movie_repository] = lambda: _BrokenRepository()

        resp = await client.get("/api/v1/movies")

        assert resp.status_code == 503
        assert resp.json()["error"]["type"] == "storage_error"
        assert "connection lost" not in resp.text

    @pytest.mark.asyncio
    async def test_unhandled_error_is_500_with_correlation_header(self, app: FastAPI) -> None:
        class _FaultyRepository:
            async def list_movies(self):
                raise RuntimeError("boom")

        app.dependency_overrides[get_movie_repository] = lambda: _FaultyRepository()
        # ServerErrorMiddleware re-raises after sending the 500 response.
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)

        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            resp = await c.get("/api/v1/movies", headers={"X-Correlation-ID": "cid-1"})

        assert resp.status_code == 500
        assert resp.headers["X-Correlation-ID"] == "cid-1"
        body = resp.json()
        assert body["correlation_id"] == "cid-1"
        assert body["error"]["type"] == "internal_error"
        assert "boom" not in resp.text

    @pytest.mark.asyncio
    async def test_correlation_id_is_echoed(self, client: httpx.AsyncClient) -> None:
        resp = await client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})

        assert resp.headers["X-Correlation-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_correlation_id_is_generated(self, client: httpx.AsyncClient) -> None:
        resp = await client.get(f"/api/v1/movies/{uuid4()}")

        assert resp.headers["X-Correlation-ID"]
        assert resp.json()["correlation_id"] == resp.headers["X-Correlation-ID"]


class TestStaticFiles:

    @pytest.mark.asyncio
    async def test_serves_default_document(self, session_factory: SessionFactory, tmp_path: Path) -> None:
        static_dir = tmp_path / "wwwroot"
        static_dir.mkdir()
        (static_dir / "index.html").write_text("<h1>Movie night</h1>", encoding="utf-8")
        (static_dir / "site.css").write_text("body { margin: 0 }", encoding="utf-8")
        app = _app(session_factory, static_dir)

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            index = await c.get("/")
            css = await c.get("/site.css")
            api = await c.get("/api/v1/health")

        assert index.status_code == 200
        assert "Movie night" in index.text
        assert css.status_code == 200
        assert api.json()["message"] == "Healthy"


class TestCreateApp:

    def test_missing_connection_string_is_fatal(self, clean_env: Path) -> None:
        with pytest.raises(ConfigurationError):
            create_app(app_settings=AppSettings(STATIC_DIR=clean_env / "none"))

    @pytest.mark.asyncio
    async def test_builds_factory_from_settings(self, tmp_path: Path) -> None:
        app = create_app(
            settings=Settings(CONNECTION_STRING="sqlite:///:memory:"),
            app_settings=AppSettings(STATIC_DIR=tmp_path / "none"),
        )

        factory = app.state.session_factory
        assert factory.engine.url.drivername == "sqlite+aiosqlite"
        await factory.dispose()


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_creates_schema_and_seeds(self, tmp_path: Path) -> None:
        factory = SessionFactory(Settings(CONNECTION_STRING="sqlite:///:memory:"))
        app = create_app(
            app_settings=AppSettings(
                STATIC_DIR=tmp_path / "none",
                CREATE_SCHEMA_ON_STARTUP=True,
                AUTO_SEED=True,
            ),
            session_factory=factory,
        )

        async with app.router.lifespan_context(app):
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
                listed = (await c.get("/api/v1/movies")).json()

        assert {m["name"] for m in listed} == {name for name, _ in SAMPLE_MOVIES}

    @pytest.mark.asyncio
    async def test_startup_runs_migrations(self, tmp_path: Path) -> None:
        settings = Settings(CONNECTION_STRING=f"sqlite:///{tmp_path / 'catalog.db'}")
        app = create_app(
            settings=settings,
            app_settings=AppSettings(STATIC_DIR=tmp_path / "none", RUN_MIGRATIONS_ON_STARTUP=True),
        )

        async with app.router.lifespan_context(app):
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
                created = await c.post("/api/v1/movies", json={"name": "Migrated"})

        assert created.status_code == 201
