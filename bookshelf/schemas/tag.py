"""
Tag Pydantic Schemas

- TagCreate: name (1-50 chars, trimmed) and optional #RRGGBB colour
- TagUpdate: optional name/colour, neither may be null
- TagResponse: full tag as listed under /tags
- TagSummary: id/name/colour as embedded in book responses
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TAG_NAME_MAX_LENGTH = 50
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


def _clean_name(v):
    # Runs before the length constraints so they apply to the trimmed name
    if not isinstance(v, str):
        return v
    v = v.strip()
    if not v:
        raise ValueError("Tag name cannot be empty or whitespace")
    return v


class TagCreate(BaseModel):
    """
    Schema for creating a tag.

    Example request body:
    {"name": "favorites", "color": "#ff0000"}
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=TAG_NAME_MAX_LENGTH,
        description="Tag name, unique per user",
        examples=["favorites"],
    )

    color: str | None = Field(
        default=None,
        pattern=COLOR_PATTERN,
        description="Hex colour #RRGGBB (defaults to #6366f1)",
        examples=["#ff0000"],
    )

    @field_validator("name", mode="before")
    @classmethod
    def name_must_not_be_empty(cls, v):
        return _clean_name(v)


class TagUpdate(BaseModel):
    """Schema for renaming or recolouring a tag. Omitted fields are kept."""

    name: str | None = Field(default=None, min_length=1, max_length=TAG_NAME_MAX_LENGTH)
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)

    @field_validator("name", mode="before")
    @classmethod
    def name_must_not_be_empty(cls, v):
        return _clean_name(v)

    @model_validator(mode="after")
    def fields_not_null(self) -> "TagUpdate":
        for field in ("name", "color"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class TagSummary(BaseModel):
    """Tag as embedded in a book."""

    id: int
    name: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class TagResponse(TagSummary):
    """Schema for tag responses."""

    user_id: int

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {"id": 1, "user_id": 1, "name": "favorites", "color": "#ff0000"}
        },
    )
