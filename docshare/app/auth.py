"""Bearer-token authentication and role-based authorization."""

from .tokens import (
    get_current_identity,
    issue_token,
    require_operation,
    require_user,
    verify_token,
)

# Export for use in routers
__all__ = [
    "get_current_identity",
    "issue_token",
    "require_operation",
    "require_user",
    "verify_token",
]
