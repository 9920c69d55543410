"""
Book Pydantic Schemas

Handles:
- BookCreate: full input for adding a book to the shelf
- BookUpdate: partial input; only the fields present are changed
- BookResponse: a book with its resolved tags

authors/genres are lists of strings in every schema; their JSON storage is
a persistence detail that never reaches the API.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bookshelf.models.book import ReadingStatus
from bookshelf.schemas.tag import TagSummary


def _dedupe_tag_ids(tag_ids: list[int] | None) -> list[int] | None:
    """Drop repeated tag ids, keeping the first occurrence."""
    if tag_ids is None:
        return None
    return list(dict.fromkeys(tag_ids))


class BookBase(BaseModel):
    """
    Base schema with shared book fields.

    Contains validation for:
    - Title (required, trimmed, non-empty)
    - Status (unread, in_progress, completed)
    - Rating (integer 1-5)
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["Dune"],
    )

    authors: list[str] = Field(
        default_factory=list,
        description="Ordered list of author names",
        examples=[["Frank Herbert"]],
    )

    open_library_key: str | None = Field(
        default=None,
        max_length=100,
        description="Open Library work key",
        examples=["/works/OL893415W"],
    )

    publication_year: int | None = Field(
        default=None,
        strict=True,
        description="Year of first publication",
        examples=[1965],
    )

    isbn_13: str | None = Field(
        default=None,
        max_length=20,
        description="ISBN-13",
        examples=["9780441172719"],
    )

    genres: list[str] = Field(
        default_factory=list,
        description="Ordered list of genres",
        examples=[["Science fiction"]],
    )

    cover_url: str | None = Field(
        default=None,
        description="Cover image URL",
    )

    status: ReadingStatus = Field(
        default=ReadingStatus.UNREAD,
        description="Reading status",
    )

    rating: int | None = Field(
        default=None,
        strict=True,
        ge=1,
        le=5,
        description="Personal rating from 1 to 5",
        examples=[5],
    )

    notes: str | None = Field(
        default=None,
        description="Personal notes",
    )

    @field_validator("title", mode="before")
    @classmethod
    def title_must_not_be_empty(cls, v):
        """Trim the title before the length limits are checked."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Title cannot be empty or whitespace")
        return v


class BookCreate(BookBase):
    """
    Schema for adding a book.

    Example request body:
    {
        "title": "Dune",
        "authors": ["Frank Herbert"],
        "genres": ["Science fiction"],
        "status": "in_progress",
        "tags": [1, 3]
    }

    Tag ids that do not belong to the caller are dropped, not linked.
    """

    tags: list[int] = Field(
        default_factory=list,
        description="Ids of the caller's tags to attach",
        examples=[[1, 3]],
    )

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[int]) -> list[int]:
        return _dedupe_tag_ids(v)


class BookUpdate(BaseModel):
    """
    Schema for updating a book.

    All fields are optional. Use model_dump(exclude_unset=True) to get the
    fields the client actually sent; everything else keeps its stored value.

    - title and status cannot be set to null
    - other scalar fields accept null to clear them
    - authors/genres set to null become empty lists
    - tags, when present, replaces the book's tags wholesale
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    authors: list[str] | None = None
    open_library_key: str | None = Field(default=None, max_length=100)
    publication_year: int | None = Field(default=None, strict=True)
    isbn_13: str | None = Field(default=None, max_length=20)
    genres: list[str] | None = None
    cover_url: str | None = None
    status: ReadingStatus | None = None
    rating: int | None = Field(default=None, strict=True, ge=1, le=5)
    notes: str | None = None
    tags: list[int] | None = Field(
        default=None,
        description="Tag ids (replaces existing links)",
    )

    @field_validator("title", mode="before")
    @classmethod
    def title_must_not_be_empty(cls, v):
        """Trim the title if provided."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Title cannot be empty or whitespace")
        return v

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[int] | None) -> list[int] | None:
        return _dedupe_tag_ids(v)

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "BookUpdate":
        for field in ("title", "status"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class BookResponse(BaseModel):
    """
    Schema for book responses.

    Includes the owner id, timestamps and the book's tags (id, name, colour)
    ordered by name.
    """

    id: int = Field(..., description="Unique identifier")
    user_id: int = Field(..., description="Owning user")
    open_library_key: str | None = None
    title: str
    authors: list[str] = Field(default_factory=list)
    publication_year: int | None = None
    isbn_13: str | None = None
    genres: list[str] = Field(default_factory=list)
    cover_url: str | None = None
    status: ReadingStatus
    rating: int | None = None
    notes: str | None = None
    added_at: datetime = Field(..., description="When the book was added")
    tags: list[TagSummary] = Field(default_factory=list)

    @field_validator("authors", "genres", mode="before")
    @classmethod
    def null_list_as_empty(cls, v):
        return [] if v is None else v

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "user_id": 1,
                "open_library_key": "/works/OL893415W",
                "title": "Dune",
                "authors": ["Frank Herbert"],
                "publication_year": 1965,
                "isbn_13": "9780441172719",
                "genres": ["Science fiction"],
                "cover_url": "https://covers.openlibrary.org/b/id/11481354-M.jpg",
                "status": "in_progress",
                "rating": 5,
                "notes": "Re-read",
                "added_at": "2024-01-15T10:30:00Z",
                "tags": [{"id": 1, "name": "favorites", "color": "#ff0000"}],
            }
        },
    )
