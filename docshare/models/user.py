"""User model for application-level user management."""

from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .identity import Identity, Role


class User(BaseModel):
    """A registered account.

    `password_hash` never leaves the service; routers respond with `UserResponse`.
    """

    id: str
    username: str
    email: str
    password_hash: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    roles: frozenset[Role] = frozenset({"USER"})
    active: bool = True
    created_at: datetime
    updated_at: datetime

    @property
    def is_admin(self) -> bool:
        """Check if user holds the ADMIN role."""
        return "ADMIN" in self.roles

    def identity(self) -> Identity:
        """The identity a token issued for this user will carry."""
        return Identity(user_id=self.id, username=self.username, roles=self.roles)


class UserResponse(BaseModel):
    """Public view of a user."""

    id: str
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    roles: list[Role]
    active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            roles=sorted(user.roles),
            active=user.active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
