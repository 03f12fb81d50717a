"""
Tests for the request logging middleware.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from api.main import create_app
from catalog.database import BookRepository
from utilities.config import ServerConfig


def access_lines(logs):
    return [entry for entry in logs if entry["event"] == "Request handled"]


@pytest.fixture
def app(repository):
    return create_app(ServerConfig(debug=False), repository=repository)


def test_successful_request_is_logged(app):
    client = TestClient(app)

    with capture_logs() as logs:
        response = client.get("/api/books")

    assert response.status_code == 200
    [line] = access_lines(logs)
    assert line["method"] == "GET"
    assert line["path"] == "/api/books"
    assert line["status"] == 200
    assert line["duration_ms"] >= 0


def test_handled_error_is_logged_with_its_status(app):
    client = TestClient(app)

    with capture_logs() as logs:
        response = client.put("/api/books/missing", json={"id": "missing", "title": "T", "author": "A"})

    assert response.status_code == 500
    assert access_lines(logs)[0]["status"] == 500


def test_unhandled_exception_is_still_logged():
    repository = AsyncMock(spec=BookRepository)
    repository.find_all.side_effect = RuntimeError("boom")
    client = TestClient(
        create_app(ServerConfig(debug=False), repository=repository),
        raise_server_exceptions=False
    )

    with capture_logs() as logs:
        response = client.get("/books")

    assert response.status_code == 500
    [line] = access_lines(logs)
    assert line["path"] == "/books"
    assert line["status"] == 500
