"""
Security Service (Credential Service)

Handles password hashing and session token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib), cost from settings (12 by default)
2. Session tokens are HS256 JWTs carrying {id, email}, valid for 7 days
3. Token verification pins the algorithm (no "alg" confusion)
4. Tokens travel in an HTTP-only, SameSite=Strict cookie

There is no revocation list: a leaked token stays valid until it expires
unless SECRET_KEY is rotated.

Usage:
    from bookshelf.services.security import hash_password, verify_password

    hashed = hash_password("correct horse")
    is_valid = verify_password("correct horse", hashed)
"""

import logging
import secrets
from datetime import UTC, datetime, timedelta

from fastapi import Response
from jose import JWTError, jwt
from passlib.context import CryptContext

from bookshelf.config import get_settings
from bookshelf.schemas.user import TokenUser

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# bcrypt__rounds is the cost factor; "auto" deprecation upgrades old hashes
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash of the password

    Example:
        >>> hashed = hash_password("correct horse")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Uses constant-time comparison to prevent timing attacks.

    Args:
        plain_password: The password to verify
        hashed_password: The stored bcrypt hash

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# Session Token Configuration
# -------------------------------------------------------------------------
ALGORITHM = "HS256"

# Used only outside production when SECRET_KEY is unset (see config.py)
_EPHEMERAL_SECRET = secrets.token_hex(32)


def get_signing_key() -> str:
    """Return the configured secret, or this process's throwaway secret."""
    return settings.secret_key or _EPHEMERAL_SECRET


def create_access_token(
    user_id: int,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token for a user.

    Args:
        user_id: Id of the authenticated user
        email: Email of the authenticated user
        expires_delta: Optional custom lifetime (defaults to settings)

    Returns:
        Encoded JWT token string

    Example:
        >>> token = create_access_token(1, "reader@example.com")
        >>> token.count(".") == 2  # JWT format: header.payload.signature
        True
    """
    if expires_delta is None:
        expires_delta = timedelta(days=settings.access_token_expire_days)

    to_encode = {
        "id": user_id,
        "email": email,
        "exp": datetime.now(UTC) + expires_delta,
    }

    return jwt.encode(to_encode, get_signing_key(), algorithm=ALGORITHM)


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a JWT token.

    Checks the signature and expiry; only HS256 is accepted.

    Args:
        token: The JWT token string

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(token, get_signing_key(), algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def verify_access_token(token: str) -> TokenUser | None:
    """
    Resolve a session token to the identity it carries.

    Args:
        token: The JWT token string

    Returns:
        TokenUser if the token is valid and well-formed, None otherwise
    """
    payload = decode_token(token)
    if payload is None:
        return None

    user_id = payload.get("id")
    email = payload.get("email")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(email, str):
        logger.warning("Token payload missing id or email")
        return None

    return TokenUser(id=user_id, email=email)


# -------------------------------------------------------------------------
# Auth Cookie
# -------------------------------------------------------------------------
def set_auth_cookie(response: Response, token: str) -> None:
    """
    Attach the session token cookie to a response.

    HttpOnly, SameSite=Strict, 7-day Max-Age, Secure in production.
    """
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.access_token_max_age,
        path="/",
        httponly=True,  # Not accessible via JavaScript
        secure=settings.is_production,  # HTTPS only in production
        samesite="strict",
    )


def clear_auth_cookie(response: Response) -> None:
    """Expire the session token cookie."""
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
