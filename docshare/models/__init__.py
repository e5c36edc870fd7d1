from .identity import Identity, Role, VALID_ROLES
from .user import User, UserResponse
from .document import (
    Document,
    DocumentResponse,
    DocumentPage,
    clean_shared_users,
    format_file_size,
)

__all__ = [
    "Identity",
    "Role",
    "VALID_ROLES",
    "User",
    "UserResponse",
    "Document",
    "DocumentResponse",
    "DocumentPage",
    "clean_shared_users",
    "format_file_size",
]
