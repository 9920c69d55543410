"""
Authentication Router

Handles user authentication endpoints:
- Registration (email/password → session cookie)
- Login (email/password → session cookie)
- Logout (clears the cookie)
- Get current user (from the session token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- The session token lives in an HttpOnly, SameSite=Strict cookie
- Register and login are rate limited per client
- A duplicate email gets the same generic "Registration failed" as any
  other registration failure, so the endpoint cannot be used to probe
  which addresses have accounts
"""

import logging

from fastapi import APIRouter, Request, Response, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from bookshelf.config import get_settings
from bookshelf.database import query_one
from bookshelf.dependencies import CurrentUser, DbSession
from bookshelf.exceptions import AuthError, ConflictError, UpstreamError
from bookshelf.models import User
from bookshelf.schemas import (
    AuthUserResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserResponse,
)
from bookshelf.services.rate_limiter import limiter
from bookshelf.services.security import (
    clear_auth_cookie,
    create_access_token,
    hash_password,
    set_auth_cookie,
    verify_password,
)

logger = logging.getLogger(__name__)
settings = get_settings()

REGISTRATION_FAILED = "Registration failed"

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
        429: {"description": "Too many attempts"},
    },
)


def _start_session(response: Response, user: User) -> AuthUserResponse:
    """Issue a token for the user, set the cookie and build the body."""
    token = create_access_token(user.id, user.email)
    set_auth_cookie(response, token)
    return AuthUserResponse(user=UserResponse.model_validate(user))


# -------------------------------------------------------------------------
# Registration Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/register",
    response_model=AuthUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create an account and start a session.

    **Password Requirements:**
    - 8 to 72 characters (at most 72 bytes)

    The session token is returned in the `auth_token` cookie.
    """,
)
@limiter.limit(settings.rate_limit_auth)
def register(
    request: Request,
    response: Response,
    user_data: RegisterRequest,
    db: DbSession,
) -> AuthUserResponse:
    """
    Register a new user with email and password.

    1. Validates email and password format (handled by Pydantic)
    2. Checks for a duplicate email (case-insensitive)
    3. Hashes password with bcrypt
    4. Creates user record and sets the session cookie
    """
    existing = query_one(db, select(User.id).where(User.email == user_data.email))
    if existing is not None:
        logger.warning(f"Registration rejected for {user_data.email}")
        raise ConflictError(REGISTRATION_FAILED)

    user = User(
        email=user_data.email,
        password_hash=hash_password(user_data.password),
    )

    try:
        db.add(user)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Registration race for {user_data.email}: {e.orig}")
        raise ConflictError(REGISTRATION_FAILED) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Registration failed for {user_data.email}: {e}")
        raise UpstreamError(REGISTRATION_FAILED) from e

    db.refresh(user)
    logger.info(f"New user registered: {user.email}")

    return _start_session(response, user)


# -------------------------------------------------------------------------
# Login Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/login",
    response_model=AuthUserResponse,
    summary="Login with email and password",
    description="Authenticate and receive the session cookie.",
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: DbSession,
) -> AuthUserResponse:
    """
    Authenticate user and set the session cookie.

    Unknown email and wrong password produce the same 401.
    """
    user = query_one(db, select(User).where(User.email == credentials.email))

    if user is None or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Login failed for {credentials.email}")
        raise AuthError("Invalid credentials")

    logger.info(f"User logged in: {user.email}")

    return _start_session(response, user)


# -------------------------------------------------------------------------
# Logout Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    description="Clear the session cookie. The token itself stays valid until it expires.",
)
def logout(response: Response) -> MessageResponse:
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out")


# -------------------------------------------------------------------------
# Current User Endpoint
# -------------------------------------------------------------------------
@router.get(
    "/me",
    response_model=AuthUserResponse,
    summary="Get current user",
    description="Return the identity carried by the session token.",
)
def get_me(current_user: CurrentUser) -> AuthUserResponse:
    return AuthUserResponse(user=UserResponse(id=current_user.id, email=current_user.email))
