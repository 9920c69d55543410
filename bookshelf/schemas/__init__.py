"""
Pydantic Schemas Package

Request/response validation, kept separate from the SQLAlchemy models so
the API controls exactly what is exposed (no password hashes, no JSON
strings) and create/update/response rules can differ.

Schema Naming Convention:
- XxxCreate: Fields accepted when creating a record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
"""

from bookshelf.schemas.book import (
    BookBase,
    BookCreate,
    BookResponse,
    BookUpdate,
)
from bookshelf.schemas.search import SearchResult
from bookshelf.schemas.tag import (
    TagCreate,
    TagResponse,
    TagSummary,
    TagUpdate,
)
from bookshelf.schemas.user import (
    AuthUserResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenUser,
    UserResponse,
)

__all__ = [
    # Book schemas
    "BookBase",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    # Tag schemas
    "TagCreate",
    "TagUpdate",
    "TagResponse",
    "TagSummary",
    # Search schemas
    "SearchResult",
    # User/auth schemas
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "AuthUserResponse",
    "MessageResponse",
    "TokenUser",
]
