"""
Books Router

CRUD endpoints for the caller's shelf. Every route requires the session
cookie; the authenticated user id scopes every query the service runs.

A book owned by another user answers exactly like a missing one (404).
"""

from fastapi import APIRouter, Query, status

from bookshelf.dependencies import BookServiceDep, CurrentUser
from bookshelf.schemas import BookCreate, BookResponse, BookUpdate, MessageResponse

# =============================================================================
# Router Configuration
# =============================================================================
router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        401: {"description": "Authentication required"},
        404: {"description": "Book not found"},
    },
)


# =============================================================================
# CRUD Endpoints
# =============================================================================
@router.get(
    "",
    response_model=list[BookResponse],
    summary="List books",
    description="""
    List the caller's books, newest first.

    **Filters** (combinable):
    - `status`: unread, in_progress or completed
    - `tag`: id of one of the caller's tags
    - `q`: case-insensitive match on title or authors
    """,
)
def list_books(
    current_user: CurrentUser,
    books: BookServiceDep,
    status_filter: str | None = Query(
        default=None,
        alias="status",
        description="Reading status",
        examples=["in_progress"],
    ),
    tag: int | None = Query(
        default=None,
        description="Tag id",
        examples=[1],
    ),
    q: str | None = Query(
        default=None,
        max_length=200,
        description="Search title and authors",
        examples=["dune"],
    ),
) -> list[BookResponse]:
    return books.list_books(current_user.id, status=status_filter, tag_id=tag, q=q)


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book",
)
def get_book(book_id: int, current_user: CurrentUser, books: BookServiceDep) -> BookResponse:
    return books.get(current_user.id, book_id)


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a book",
    description="""
    Add a book to the caller's shelf.

    `tags` holds ids of the caller's tags; ids of tags the caller does not
    own are ignored.
    """,
)
def create_book(
    book_data: BookCreate,
    current_user: CurrentUser,
    books: BookServiceDep,
) -> BookResponse:
    return books.create(current_user.id, book_data)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="""
    Partial update: only the fields present in the body change.

    When `tags` is present it replaces the book's tags.
    """,
)
def update_book(
    book_id: int,
    book_data: BookUpdate,
    current_user: CurrentUser,
    books: BookServiceDep,
) -> BookResponse:
    return books.update(current_user.id, book_id, book_data)


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    summary="Delete a book",
)
def delete_book(book_id: int, current_user: CurrentUser, books: BookServiceDep) -> MessageResponse:
    books.delete(current_user.id, book_id)
    return MessageResponse(message="Book deleted")
