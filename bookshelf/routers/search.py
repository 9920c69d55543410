"""
Catalog Search Router

Looks books up in the Open Library catalog so the client can prefill the
add-book form. Nothing here touches the database.

Results are serialized with camelCase keys (publicationYear, coverUrl).
A failing catalog is reported as 500 "Search failed", never as an empty
result.
"""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from bookshelf.dependencies import CatalogClient, CurrentUser
from bookshelf.schemas import SearchResult

# =============================================================================
# Router Configuration
# =============================================================================
router = APIRouter(
    prefix="/search",
    tags=["Search"],
    responses={
        401: {"description": "Authentication required"},
        500: {"description": "Search failed"},
    },
)


@router.get(
    "",
    response_model=list[SearchResult],
    summary="Search the catalog",
    description="Free-text search by title, author or keyword (up to 20 results).",
)
async def search_catalog(
    current_user: CurrentUser,
    catalog: CatalogClient,
    q: Annotated[
        str | None,
        Query(max_length=200, description="Search text", examples=["dune"]),
    ] = None,
) -> list[SearchResult]:
    return await catalog.search_by_text(q or "")


@router.get(
    "/isbn/{isbn}",
    response_model=SearchResult,
    summary="Look up an ISBN",
    description="Hyphens and spaces are ignored. Unknown ISBNs return 404.",
    responses={404: {"description": "Book not found"}},
)
async def search_isbn(
    isbn: Annotated[str, Path(max_length=32, description="ISBN-10 or ISBN-13")],
    current_user: CurrentUser,
    catalog: CatalogClient,
) -> SearchResult:
    return await catalog.search_by_isbn(isbn)
