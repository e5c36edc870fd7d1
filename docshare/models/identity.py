"""Caller identity decoded from a verified bearer token."""

from __future__ import annotations
from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["USER", "ADMIN"]

VALID_ROLES: frozenset[str] = frozenset({"USER", "ADMIN"})


class Identity(BaseModel):
    """Who is calling, as stated by the token.

    This is never re-derived from the database: the token is the identity, so a
    user deactivated after the token was issued keeps this identity until expiry.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    username: str
    roles: frozenset[Role]

    @property
    def is_admin(self) -> bool:
        return "ADMIN" in self.roles
