"""
Books API - HTTP Endpoint Tests
=================================

What:  End-to-end tests of the /books endpoints through the ASGI app.
How:   HTTPX AsyncClient + per-test SQLite database (see test_client fixture).

Covered:
    ✅ Full create → get → update → delete lifecycle with exact bodies
    ✅ Not-found on get/update/delete (500 by default, 404 when configured)
    ✅ Body handling: ignored client id, empty fields, invalid JSON (400)
    ✅ Content negotiation (415), routing (404, 405), bad or out-of-range ids (400)
    ✅ Unexpected errors: generic 500 body, request id still echoed
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.dependencies import get_book_repository

DOM_CASMURRO = {"title": "Dom Casmurro", "author": "Machado de Assis"}


async def _create(client, payload):
    response = await client.post("/books", json=payload)
    assert response.status_code == 201
    return response.json()


class TestBookLifecycle:

    @pytest.mark.asyncio
    async def test_create_get_update_delete(self, test_client):
        response = await test_client.post("/books", json=DOM_CASMURRO)
        assert response.status_code == 201
        assert response.json() == {"id": 1, "title": "Dom Casmurro", "author": "Machado de Assis"}

        response = await test_client.get("/books/1")
        assert response.status_code == 200
        assert response.json() == {"id": 1, "title": "Dom Casmurro", "author": "Machado de Assis"}

        updated = {"title": "Dom Casmurro - Edição Especial", "author": "Machado de Assis"}
        response = await test_client.put("/books/1", json=updated)
        assert response.status_code == 200
        assert response.json() == {"id": 1, **updated}

        response = await test_client.delete("/books/1")
        assert response.status_code == 204
        assert response.content == b""

        response = await test_client.get("/books/1")
        assert response.status_code == 500
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_update_is_visible_on_get(self, test_client):
        created = await _create(test_client, {"title": "Grande Sertão: Veredas", "author": "Guimarães Rosa"})
        book_id = created["id"]

        await test_client.put(
            f"/books/{book_id}",
            json={"title": "Grande Sertão: Veredas - Edição Comentada", "author": "Guimarães Rosa"},
        )
        response = await test_client.get(f"/books/{book_id}")

        assert response.json() == {
            "id": book_id,
            "title": "Grande Sertão: Veredas - Edição Comentada",
            "author": "Guimarães Rosa",
        }

    @pytest.mark.asyncio
    async def test_repeated_update_is_idempotent(self, test_client):
        created = await _create(test_client, DOM_CASMURRO)
        body = {"title": "Same", "author": "Value"}

        first = await test_client.put(f"/books/{created['id']}", json=body)
        second = await test_client.put(f"/books/{created['id']}", json=body)
        listing = await test_client.get("/books")

        assert first.json() == second.json()
        assert listing.json() == [{"id": created["id"], **body}]


class TestListBooks:

    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_array(self, test_client):
        response = await test_client.get("/books")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_lists_every_created_book(self, test_client, sample_books):
        for title, author in sample_books:
            await _create(test_client, {"title": title, "author": author})

        response = await test_client.get("/books")

        body = response.json()
        assert len(body) == 3
        assert [(b["title"], b["author"]) for b in body] == sample_books
        assert all(isinstance(b["id"], int) and b["id"] > 0 for b in body)


class TestCreateBook:

    @pytest.mark.asyncio
    async def test_client_supplied_id_is_ignored(self, test_client):
        response = await test_client.post("/books", json={"id": 99, **DOM_CASMURRO})

        assert response.status_code == 201
        assert response.json()["id"] == 1
        assert (await test_client.get("/books/99")).status_code == 500

    @pytest.mark.asyncio
    async def test_empty_fields_are_accepted(self, test_client):
        response = await test_client.post("/books", json={"title": "", "author": ""})

        assert response.status_code == 201
        assert response.json()["title"] == ""
        assert response.json()["author"] == ""

    @pytest.mark.asyncio
    async def test_invalid_json_returns_400(self, test_client):
        response = await test_client.post(
            "/books",
            content=b"{ invalid json }",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "bad_request"
        assert (await test_client.get("/books")).json() == []

    @pytest.mark.asyncio
    async def test_missing_field_returns_400(self, test_client):
        response = await test_client.post("/books", json={"title": "Only a title"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_json_content_type_with_charset_is_accepted(self, test_client):
        response = await test_client.post(
            "/books",
            content=b'{"title": "T", "author": "A"}',
            headers={"Content-Type": "application/json; charset=utf-8"},
        )

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_missing_content_type_returns_415(self, test_client):
        response = await test_client.post("/books", content=b'{"title": "T", "author": "A"}')

        assert response.status_code == 415
        assert response.json()["error"] == "unsupported_media_type"
        assert (await test_client.get("/books")).json() == []

    @pytest.mark.asyncio
    async def test_wrong_content_type_returns_415(self, test_client):
        response = await test_client.post(
            "/books",
            content=b'{"title": "T", "author": "A"}',
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 415


class TestNotFound:

    @pytest.mark.asyncio
    async def test_get_missing_returns_500(self, test_client):
        response = await test_client.get("/books/999")

        assert response.status_code == 500
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_update_missing_returns_500_and_creates_nothing(self, test_client):
        response = await test_client.put(
            "/books/999", json={"title": "Livro Inexistente", "author": "Autor Desconhecido"}
        )

        assert response.status_code == 500
        assert (await test_client.get("/books")).json() == []

    @pytest.mark.asyncio
    async def test_delete_missing_returns_500(self, test_client):
        response = await test_client.delete("/books/999")

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_not_found_status_is_configurable(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "not_found_status_code", 404)

        response = await test_client.get("/books/999")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestRouting:

    @pytest.mark.asyncio
    async def test_unknown_path_returns_404(self, test_client):
        response = await test_client.get("/authors")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_unsupported_method_returns_405(self, test_client):
        response = await test_client.patch("/books/1", json=DOM_CASMURRO)

        assert response.status_code == 405
        assert response.json()["error"] == "method_not_allowed"
        assert "allow" in response.headers

    @pytest.mark.asyncio
    async def test_non_integer_id_returns_400(self, test_client):
        response = await test_client.get("/books/abc")

        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["get", "delete"])
    async def test_out_of_range_id_returns_400(self, test_client, method):
        response = await getattr(test_client, method)("/books/99999999999999999999")

        assert response.status_code == 400
        assert response.json()["error"] == "bad_request"
        assert response.json()["message"] == "Malformed request"

    @pytest.mark.asyncio
    async def test_out_of_range_id_on_update_returns_400(self, test_client):
        response = await test_client.put("/books/-9223372036854775809", json=DOM_CASMURRO)

        assert response.status_code == 400
        assert (await test_client.get("/books")).json() == []

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/books", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/books")

        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get("/books/999", headers={"X-Request-ID": "trace-1"})

        assert response.json()["request_id"] == "trace-1"


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_connected_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"


class TestUnexpectedErrors:

    @pytest_asyncio.fixture
    async def failing_client(self, mock_book_repository) -> AsyncGenerator[AsyncClient, None]:
        """Client whose repository raises on every read; app exceptions become 500s."""
        from app.main import app

        mock_book_repository.find_all.side_effect = RuntimeError("connection reset")
        mock_book_repository.find_by_id.side_effect = RuntimeError("connection reset")
        app.dependency_overrides[get_book_repository] = lambda: mock_book_repository
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
        app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_generic_500(self, failing_client):
        response = await failing_client.get("/books")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert "connection reset" not in body["message"]

    @pytest.mark.asyncio
    async def test_unexpected_error_carries_request_id_header(self, failing_client):
        response = await failing_client.get("/books/1", headers={"X-Request-ID": "rid-1"})

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "rid-1"
        assert response.json()["request_id"] == "rid-1"
