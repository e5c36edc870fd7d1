import re
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from docshare.models import UserResponse
from .env_loader import EnvironmentName

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
PASSWORD_SPECIAL_CHARACTERS = "@$!%*?&"


def check_password_strength(password: str) -> str:
    """Require an upper-case letter, a lower-case letter, a digit and a special character."""
    if not re.fullmatch(r"[A-Za-z0-9@$!%*?&]+", password):
        raise ValueError(
            f"Password may only contain letters, digits and {PASSWORD_SPECIAL_CHARACTERS}"
        )
    if not (
        any(c.islower() for c in password)
        and any(c.isupper() for c in password)
        and any(c.isdigit() for c in password)
        and any(c in PASSWORD_SPECIAL_CHARACTERS for c in password)
    ):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, "
            "one digit and one special character"
        )
    return password


class RegisterRequest(BaseModel):
    """Request model for self-registration.

    `roles` is accepted for compatibility with older clients but ignored: new
    accounts always get USER.
    """

    username: str = Field(min_length=3, max_length=50)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6, max_length=100)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    roles: list[str] = Field(default_factory=list, max_length=10)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)


class CreateUserRequest(BaseModel):
    """Request model for admin user creation. Roles are honored here."""

    username: str = Field(min_length=3, max_length=50)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6, max_length=100)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    roles: list[str] = Field(default_factory=list, max_length=10)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)


class UpdateUserRequest(BaseModel):
    """Request model for admin user updates. Omitted fields are left unchanged."""

    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    password: Optional[str] = Field(default=None, min_length=6, max_length=100)
    first_name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    roles: Optional[list[str]] = Field(default=None, max_length=10)
    active: Optional[bool] = None


class LoginRequest(BaseModel):
    username_or_email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    token: str
    type: Literal["Bearer"] = "Bearer"
    user: UserResponse


class UpdateDocumentRequest(BaseModel):
    """Request model for updating document metadata via PUT.

    Fields left as None keep their stored value.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    team_shared: Optional[bool] = None
    shared_with_users: Optional[list[str]] = None


class ShareDocumentRequest(BaseModel):
    """Request model for changing who a document is shared with."""

    team_shared: Optional[bool] = None
    shared_with_users: Optional[list[str]] = None


class VerifyResponse(BaseModel):
    """Response model for the token verification endpoint."""

    user_id: str
    username: str
    roles: list[str]


class EnvironmentResponse(BaseModel):
    """Response model for the environment endpoint."""

    environment: EnvironmentName
