"""
Catalog Search Schemas

SearchResult is the internal shape of an Open Library work. Fields are
snake_case in Python and camelCase on the wire (publicationYear, coverUrl),
matching what the web client consumes.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SearchResult(BaseModel):
    """A catalog work mapped for the client."""

    key: str = Field(..., description="Open Library work key", examples=["/works/OL893415W"])
    title: str
    authors: list[str] = Field(default_factory=list)
    publication_year: int | None = None
    isbn: str | None = None
    genres: list[str] = Field(default_factory=list, description="Up to five subjects")
    cover_url: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
