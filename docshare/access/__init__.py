"""Access-control core: role gate, document policy and visibility views."""

from .roles import (
    OPERATION_ROLES,
    authorize,
    assignable_roles,
    has_role,
    registration_roles,
    require_role,
)
from .policy import can_access, can_delete, can_modify, can_team_delete

__all__ = [
    "OPERATION_ROLES",
    "authorize",
    "assignable_roles",
    "has_role",
    "registration_roles",
    "require_role",
    "can_access",
    "can_delete",
    "can_modify",
    "can_team_delete",
]
