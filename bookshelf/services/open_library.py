"""
Open Library Catalog Adapter

Queries the Open Library search API and maps works to SearchResult.

Failure semantics:
- a non-2xx response, a network error or an unreadable body is a hard
  failure (UpstreamError), never an empty result
- an ISBN lookup with no matching work is NotFoundError

Usage:
    client = OpenLibraryClient.from_settings()
    results = await client.search_by_text("dune")
    book = await client.search_by_isbn("978-0-441-17271-9")
"""

import logging
import re
from typing import Any

import httpx

from bookshelf.config import get_settings
from bookshelf.exceptions import NotFoundError, UpstreamError, ValidationError
from bookshelf.schemas.search import SearchResult

logger = logging.getLogger(__name__)

SEARCH_FIELDS = "key,title,author_name,first_publish_year,isbn,subject,cover_i"
DEFAULT_LIMIT = 20
MAX_GENRES = 5


class OpenLibraryClient:
    """
    Thin async client for https://openlibrary.org/search.json.

    A new httpx.AsyncClient is opened per call. Tests pass an
    httpx.MockTransport through `transport`.
    """

    def __init__(
        self,
        base_url: str,
        covers_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.covers_url = covers_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls) -> "OpenLibraryClient":
        settings = get_settings()
        return cls(
            base_url=settings.open_library_base_url,
            covers_url=settings.open_library_covers_url,
            timeout=settings.open_library_timeout,
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------
    async def search_by_text(self, query: str, limit: int = DEFAULT_LIMIT) -> list[SearchResult]:
        """
        Free-text catalog search.

        Args:
            query: Search text (title, author, ...)
            limit: Maximum number of works to return

        Returns:
            Mapped results, possibly empty

        Raises:
            ValidationError: If the query is blank
            UpstreamError: If the catalog request fails
        """
        if not query or not query.strip():
            raise ValidationError("Search query is required", field="q")

        data = await self._search({"q": query.strip(), "limit": limit})
        return [self._map_work(work) for work in data.get("docs", [])]

    async def search_by_isbn(self, isbn: str) -> SearchResult:
        """
        Look up a single work by ISBN.

        Hyphens and whitespace are stripped before querying.

        Raises:
            ValidationError: If nothing is left after stripping
            NotFoundError: If the catalog has no matching work
            UpstreamError: If the catalog request fails
        """
        clean_isbn = re.sub(r"[-\s]", "", isbn or "")
        if not clean_isbn:
            raise ValidationError("ISBN is required", field="isbn")

        data = await self._search({"isbn": clean_isbn, "limit": 1})
        docs = data.get("docs", [])
        if not docs:
            raise NotFoundError("Book not found")

        return self._map_work(docs[0])

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    async def _search(self, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/search.json"
        params = {**params, "fields": SEARCH_FIELDS}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Open Library request failed: {e!r}")
            raise UpstreamError("Search failed") from e

        if not response.is_success:
            logger.error(f"Open Library API error: {response.status_code}")
            raise UpstreamError("Search failed")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Open Library returned invalid JSON: {e}")
            raise UpstreamError("Search failed") from e

        if not isinstance(data, dict):
            logger.error("Open Library returned an unexpected payload")
            raise UpstreamError("Search failed")

        return data

    def _map_work(self, work: dict[str, Any]) -> SearchResult:
        cover_id = work.get("cover_i")
        cover_url = f"{self.covers_url}/b/id/{cover_id}-M.jpg" if cover_id else None
        isbns = work.get("isbn") or []

        return SearchResult(
            key=work.get("key", ""),
            title=work.get("title", ""),
            authors=work.get("author_name") or [],
            publication_year=work.get("first_publish_year"),
            isbn=isbns[0] if isbns else None,
            genres=(work.get("subject") or [])[:MAX_GENRES],
            cover_url=cover_url,
        )
