"""Role authorization gate.

Every operation the API exposes is listed in `OPERATION_ROLES` with the role it
needs. Routers call `authorize` with the operation name instead of relying on
route prefixes, so the table is the single place to read who may do what.
"""

import logging
from typing import Iterable, Optional

from docshare.errors import ForbiddenError, ValidationFailedError
from docshare.models.identity import Identity, Role, VALID_ROLES

logger = logging.getLogger(__name__)

# Roles each role grants. ADMIN includes everything USER can do.
ROLE_GRANTS: dict[str, frozenset[str]] = {
    "USER": frozenset({"USER"}),
    "ADMIN": frozenset({"USER", "ADMIN"}),
}

OPERATION_ROLES: dict[str, Role] = {
    "auth.verify": "USER",
    "documents.upload": "USER",
    "documents.list_mine": "USER",
    "documents.list_team": "USER",
    "documents.list_shared": "USER",
    "documents.search": "USER",
    "documents.read": "USER",
    "documents.download": "USER",
    "documents.update": "USER",
    "documents.share": "USER",
    "documents.delete": "USER",
    "documents.admin_list_all": "ADMIN",
    "documents.admin_list_team": "ADMIN",
    "documents.admin_team_delete": "ADMIN",
    "users.list": "ADMIN",
    "users.list_active": "ADMIN",
    "users.read": "ADMIN",
    "users.create": "ADMIN",
    "users.update": "ADMIN",
    "users.delete": "ADMIN",
}


def effective_roles(identity: Identity) -> frozenset[str]:
    """All roles the identity may act as, after expanding grants."""
    granted: set[str] = set()
    for role in identity.roles:
        granted |= ROLE_GRANTS.get(role, frozenset())
    return frozenset(granted)


def has_role(identity: Optional[Identity], role: str) -> bool:
    """Check a role, failing closed for anonymous callers and unknown roles."""
    if identity is None:
        return False
    return role in effective_roles(identity)


def require_role(identity: Optional[Identity], role: str) -> None:
    """Raise ForbiddenError unless the identity holds `role`."""
    if not has_role(identity, role):
        username = identity.username if identity else "<anonymous>"
        logger.warning(f"Role check failed: user={username} required={role}")
        raise ForbiddenError(f"{role.title()} access required")


def authorize(identity: Optional[Identity], operation: str) -> None:
    """Gate a named operation through the authorization table.

    Operations missing from the table are denied.
    """
    required = OPERATION_ROLES.get(operation)
    if required is None:
        logger.error(f"No authorization rule for operation {operation!r}")
        raise ForbiddenError("Operation not permitted")
    require_role(identity, required)


def registration_roles(requested: Optional[Iterable[str]] = None) -> frozenset[Role]:
    """Roles for a self-registered account.

    Always exactly {USER}; anything the request asked for is ignored.
    """
    if requested:
        logger.info(f"Ignoring roles {sorted(requested)} on public registration")
    return frozenset({"USER"})


def assignable_roles(requested: Optional[Iterable[str]]) -> frozenset[Role]:
    """Validate roles set through the admin-only create/update path.

    Names are matched case-insensitively and stored upper-case. An empty or
    missing set defaults to {USER}.
    """
    if not requested:
        return frozenset({"USER"})
    roles: set[str] = set()
    for role in requested:
        normalized = (role or "").strip().upper()
        if normalized not in VALID_ROLES:
            raise ValidationFailedError(f"Invalid role: {role!r}")
        roles.add(normalized)
    return frozenset(roles)  # type: ignore[arg-type]
