"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Provided here:
- DbSession: one SQLAlchemy session per request
- CurrentUser: the auth gate; resolves the session cookie to {id, email}
- BookServiceDep / TagServiceDep: resource services bound to the session
- CatalogClient: the Open Library adapter (overridden in tests)

Auth gate states:
    no cookie                 -> 401 "Authentication required"
    cookie, invalid/expired   -> 401 "Invalid or expired token"
    cookie, valid             -> TokenUser(id, email)
"""

from typing import Annotated

from fastapi import Cookie, Depends
from sqlalchemy.orm import Session

from bookshelf.config import get_settings
from bookshelf.database import get_db
from bookshelf.exceptions import AuthError
from bookshelf.schemas import TokenUser
from bookshelf.services.books import BookService
from bookshelf.services.open_library import OpenLibraryClient
from bookshelf.services.security import verify_access_token
from bookshelf.services.tags import TagService

settings = get_settings()

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def list_books(db: Session = Depends(get_db)):
#
# You can write:
#   def list_books(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Cookie Authentication
# =============================================================================
def get_current_user(
    token: Annotated[str | None, Cookie(alias=settings.auth_cookie_name)] = None,
) -> TokenUser:
    """
    Resolve the session cookie to the authenticated identity.

    The identity comes from the verified token claims alone; there is no
    database round-trip and no revocation check.

    Args:
        token: Session token from the auth cookie

    Returns:
        TokenUser with the caller's id and email

    Raises:
        AuthError: 401 if the cookie is missing, invalid or expired
    """
    if not token:
        raise AuthError("Authentication required")

    user = verify_access_token(token)
    if user is None:
        raise AuthError("Invalid or expired token")

    return user


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]


# =============================================================================
# Service Providers
# =============================================================================
def get_book_service(db: DbSession) -> BookService:
    return BookService(db)


def get_tag_service(db: DbSession) -> TagService:
    return TagService(db)


def get_catalog_client() -> OpenLibraryClient:
    """Catalog adapter configured from settings."""
    return OpenLibraryClient.from_settings()


BookServiceDep = Annotated[BookService, Depends(get_book_service)]
TagServiceDep = Annotated[TagService, Depends(get_tag_service)]
CatalogClient = Annotated[OpenLibraryClient, Depends(get_catalog_client)]
