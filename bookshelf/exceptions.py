"""
Application Exceptions

Domain errors raised by the services and translated to HTTP responses by
the handlers registered in main.py. Routers never build error bodies.

| Exception        | HTTP | Meaning                                         |
|------------------|------|-------------------------------------------------|
| ValidationError  | 400  | Input fails a declared constraint               |
| AuthError        | 401  | Missing/invalid/expired token, bad credentials  |
| NotFoundError    | 404  | Resource absent OR owned by someone else        |
| ConflictError    | 400  | Duplicate email or tag name                     |
| UpstreamError    | 500  | External catalog failure                        |

NotFoundError deliberately covers "not yours": callers cannot tell another
user's row from a missing one.
"""

from fastapi import status


class BookshelfError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "An internal error occurred."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(BookshelfError):
    """Client input failed a declared constraint."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"

    def __init__(self, detail: str | None = None, field: str | None = None) -> None:
        self.field = field
        super().__init__(detail)


class AuthError(BookshelfError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class NotFoundError(BookshelfError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(BookshelfError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Resource already exists"


class UpstreamError(BookshelfError):
    """An external dependency (the catalog) failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Search failed"
