"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from fpb_search.catalog.router import get_store
from fpb_search.catalog.store import LOAD_ERROR_MESSAGE, CatalogStore
from fpb_search.main import create_app


@pytest.fixture
def store(raw_catalog):
    store = CatalogStore()
    store.load_raw(raw_catalog)
    return store


def _client(store):
    app = create_app(load_catalog=False)
    app.dependency_overrides[get_store] = lambda: store
    return TestClient(app)


@pytest.fixture
def client(store):
    return _client(store)


class TestSearchEndpoint:
    def test_search(self, client):
        response = client.get("/api/catalog/search", params={"searchTerm": "Kotlin"})
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        listing, hit = body["items"]
        assert listing["kind"] == "listing"
        assert listing["url"].endswith("/free-programming-books-langs.html#android")
        assert hit["kind"] == "entry"
        assert hit["title"] == "Kotlin Basics"
        assert hit["score"] == 0.0
        assert hit["matches"][0]["key"] == "title"

    def test_dotted_language_parameter(self, client):
        response = client.get(
            "/api/catalog/search", params={"searchTerm": "python", "lang.code": "es"}
        )
        titles = [i["title"] for i in response.json()["items"] if i["kind"] == "entry"]
        assert titles == ["Python para todos"]

    def test_empty_search(self, client):
        response = client.get("/api/catalog/search")
        assert response.status_code == 200
        assert response.json() == {"count": 0, "items": []}

    def test_section_only(self, client):
        response = client.get("/api/catalog/search", params={"section": "Android"})
        items = response.json()["items"]
        assert [i["title"] for i in items if i["kind"] == "entry"] == ["Kotlin Basics"]


class TestCatalogEndpoints:
    def test_status(self, client):
        assert client.get("/api/catalog/status").json() == {
            "state": "ready",
            "detail": "",
            "entries": 6,
            "sections": 4,
        }

    def test_sections(self, client):
        assert client.get("/api/catalog/sections").json() == [
            "Android",
            "C",
            "Python",
            "Algorithms & Data Structures",
        ]

    def test_languages(self, client):
        codes = [l["code"] for l in client.get("/api/catalog/languages").json()]
        assert codes == ["en", "en", "es"]

    def test_health(self, client):
        assert client.get("/").json()["status"] == "ok"


class TestLoadStates:
    def test_load_error(self, tmp_path):
        store = CatalogStore()
        assert store.load(path=tmp_path / "missing.json") is None
        client = _client(store)

        status = client.get("/api/catalog/status").json()
        assert status["state"] == "error"
        assert status["detail"] == LOAD_ERROR_MESSAGE

        response = client.get("/api/catalog/search", params={"searchTerm": "go"})
        assert response.status_code == 503
        assert response.json()["detail"] == LOAD_ERROR_MESSAGE

    def test_still_loading(self):
        client = _client(CatalogStore())
        assert client.get("/api/catalog/sections").status_code == 503

    def test_empty_catalog(self):
        store = CatalogStore()
        store.load_raw({"documents": []})
        client = _client(store)
        assert client.get("/api/catalog/status").json()["state"] == "empty"
        response = client.get("/api/catalog/search", params={"searchTerm": "go"})
        assert response.json() == {"count": 0, "items": []}


class TestStartup:
    def test_logging_configured_on_startup_only(self, monkeypatch):
        from fpb_search import main

        calls = []
        monkeypatch.setattr(main.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        app = create_app(load_catalog=False)
        assert calls == []
        with TestClient(app):
            pass
        assert len(calls) == 1

    def test_catalog_loaded_in_threadpool_before_serving(self, monkeypatch, raw_catalog):
        from fpb_search import main

        offloaded = []
        real_run_in_threadpool = main.run_in_threadpool

        async def spy(func, *args, **kwargs):
            offloaded.append(func)
            return await real_run_in_threadpool(func, *args, **kwargs)

        def fake_load():
            main.STORE.load_raw(raw_catalog)

        monkeypatch.setattr(main, "run_in_threadpool", spy)
        monkeypatch.setattr(main.STORE, "load", fake_load)
        monkeypatch.setattr(main.logging, "basicConfig", lambda **kwargs: None)
        try:
            with TestClient(create_app()) as client:
                assert offloaded == [fake_load]
                assert client.get("/").json() == {"status": "ok", "catalog": "ready"}
        finally:
            main.STORE.snapshot = None
            main.STORE.state, main.STORE.detail = "loading", ""
