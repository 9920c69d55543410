"""
Tests for Catalog Search

The Open Library client is pointed at an httpx.MockTransport, so no test
touches the network. Tests cover both the HTTP endpoints and the client's
mapping and failure rules.
"""

import asyncio
from collections.abc import Callable, Generator

import httpx
import pytest
from fastapi import status
from fastapi.testclient import TestClient

from bookshelf.dependencies import get_catalog_client
from bookshelf.exceptions import NotFoundError, UpstreamError, ValidationError
from bookshelf.main import app
from bookshelf.services.open_library import OpenLibraryClient
from tests.conftest import API

BASE_URL = "https://openlibrary.test"
COVERS_URL = "https://covers.openlibrary.test"

DUNE_DOC = {
    "key": "/works/OL893415W",
    "title": "Dune",
    "author_name": ["Frank Herbert"],
    "first_publish_year": 1965,
    "isbn": ["9780441172719", "0441172717"],
    "subject": ["Science fiction", "Deserts", "Ecology", "Politics", "Religion", "Spice"],
    "cover_i": 11481354,
}


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> OpenLibraryClient:
    return OpenLibraryClient(
        base_url=BASE_URL,
        covers_url=COVERS_URL,
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


class FakeCatalog:
    """Records requests and answers with a configurable response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.response = httpx.Response(200, json={"docs": [DUNE_DOC]})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


@pytest.fixture
def catalog() -> Generator[FakeCatalog, None, None]:
    """Route the app's catalog dependency to a mock transport."""
    fake = FakeCatalog()
    app.dependency_overrides[get_catalog_client] = lambda: make_client(fake)
    yield fake
    app.dependency_overrides.pop(get_catalog_client, None)


class TestSearchEndpoint:
    """Tests for GET /api/search."""

    def test_search_maps_results(self, auth_client: TestClient, catalog: FakeCatalog):
        response = auth_client.get(f"{API}/search", params={"q": "dune"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [
            {
                "key": "/works/OL893415W",
                "title": "Dune",
                "authors": ["Frank Herbert"],
                "publicationYear": 1965,
                "isbn": "9780441172719",
                "genres": ["Science fiction", "Deserts", "Ecology", "Politics", "Religion"],
                "coverUrl": f"{COVERS_URL}/b/id/11481354-M.jpg",
            }
        ]

    def test_search_sends_query_and_limit(self, auth_client: TestClient, catalog: FakeCatalog):
        auth_client.get(f"{API}/search", params={"q": "dune"})

        request = catalog.requests[0]
        assert request.url.path == "/search.json"
        assert request.url.params["q"] == "dune"
        assert request.url.params["limit"] == "20"

    def test_search_empty_results(self, auth_client: TestClient, catalog: FakeCatalog):
        catalog.response = httpx.Response(200, json={"docs": []})

        response = auth_client.get(f"{API}/search", params={"q": "zzzz"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    @pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
    def test_search_requires_query(
        self, auth_client: TestClient, catalog: FakeCatalog, params: dict
    ):
        response = auth_client.get(f"{API}/search", params=params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "q"
        assert catalog.requests == []

    def test_search_upstream_error(self, auth_client: TestClient, catalog: FakeCatalog):
        catalog.response = httpx.Response(503, text="maintenance")

        response = auth_client.get(f"{API}/search", params={"q": "dune"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"detail": "Search failed"}


class TestIsbnEndpoint:
    """Tests for GET /api/search/isbn/{isbn}."""

    def test_isbn_lookup(self, auth_client: TestClient, catalog: FakeCatalog):
        response = auth_client.get(f"{API}/search/isbn/9780441172719")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["title"] == "Dune"
        assert response.json()["publicationYear"] == 1965

    def test_isbn_hyphens_and_spaces_stripped(
        self, auth_client: TestClient, catalog: FakeCatalog
    ):
        auth_client.get(f"{API}/search/isbn/978-0-441 17271-9")

        assert catalog.requests[0].url.params["isbn"] == "9780441172719"

    def test_unknown_isbn_is_404(self, auth_client: TestClient, catalog: FakeCatalog):
        catalog.response = httpx.Response(200, json={"docs": []})

        response = auth_client.get(f"{API}/search/isbn/0000000000000")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"detail": "Book not found"}

    def test_isbn_of_only_hyphens(self, auth_client: TestClient, catalog: FakeCatalog):
        response = auth_client.get(f"{API}/search/isbn/---")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "isbn"
        assert catalog.requests == []


class TestOpenLibraryClient:
    """Mapping and failure rules of the catalog adapter."""

    def test_missing_fields_map_to_defaults(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"docs": [{"key": "/works/X", "title": "Bare"}]})
        )

        [result] = asyncio.run(client.search_by_text("bare"))

        assert result.authors == []
        assert result.genres == []
        assert result.publication_year is None
        assert result.isbn is None
        assert result.cover_url is None

    def test_network_error_is_upstream_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError):
            asyncio.run(make_client(handler).search_by_text("dune"))

    def test_invalid_json_is_upstream_error(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(UpstreamError):
            asyncio.run(client.search_by_text("dune"))

    def test_unexpected_payload_is_upstream_error(self):
        client = make_client(lambda request: httpx.Response(200, json=["not", "a", "dict"]))

        with pytest.raises(UpstreamError):
            asyncio.run(client.search_by_text("dune"))

    def test_isbn_not_found(self):
        client = make_client(lambda request: httpx.Response(200, json={"docs": []}))

        with pytest.raises(NotFoundError):
            asyncio.run(client.search_by_isbn("9780000000000"))

    def test_blank_query_rejected(self):
        client = make_client(lambda request: httpx.Response(200, json={"docs": []}))

        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(client.search_by_text("  "))

        assert exc_info.value.field == "q"
