"""
User / Auth Pydantic Schemas

Schemas:
- RegisterRequest: Registration data (email, password)
- LoginRequest: Login data (email, password)
- UserResponse: Public user data (never exposes the password hash)
- AuthUserResponse: {"user": {...}} envelope returned by the auth routes
- MessageResponse: {"message": "..."} for logout and deletes
- TokenUser: Identity carried inside a session token
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# bcrypt only reads the first 72 bytes of a password
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72


class CredentialsBase(BaseModel):
    """Shared email field, normalised to lower case."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["reader@example.com"],
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are compared case-insensitively, so store them lower-cased."""
        return v.strip().lower()


class RegisterRequest(CredentialsBase):
    """
    Schema for user registration.

    Password must be 8-72 characters and at most 72 bytes once UTF-8 encoded.
    """

    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
        description="Password (8-72 characters)",
        examples=["correct horse battery"],
    )

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_LENGTH:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_LENGTH} bytes")
        return v


class LoginRequest(CredentialsBase):
    """Schema for login with email and password."""

    password: str = Field(
        ...,
        min_length=1,
        description="Account password",
    )


class UserResponse(BaseModel):
    """
    Schema for user responses.

    SECURITY: Never includes the password hash.
    """

    id: int = Field(..., description="Unique user identifier", examples=[1])
    email: str = Field(..., description="User's email address")

    model_config = ConfigDict(from_attributes=True)


class AuthUserResponse(BaseModel):
    """Envelope returned by register, login and /auth/me."""

    user: UserResponse

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"user": {"id": 1, "email": "reader@example.com"}}
        },
    )


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str = Field(..., examples=["Book deleted"])


class TokenUser(BaseModel):
    """
    Identity extracted from a verified session token.

    Attached to the request by the auth gate and passed to the services as
    the owner of every read and write.
    """

    id: int
    email: str
