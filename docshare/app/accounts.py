"""Account registration, login, and admin user management."""

import logging
from typing import Any

from docshare.access.roles import assignable_roles, registration_roles
from docshare.db.users import (
    create_user,
    email_exists,
    get_user_by_id,
    get_user_by_username_or_email,
    update_user,
    username_exists,
)
from docshare.errors import ConflictError, InvalidCredentialsError, NotFoundError
from docshare.models.user import User
from .models import CreateUserRequest, RegisterRequest, UpdateUserRequest
from .passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


def _ensure_unique(username: str, email: str) -> None:
    if username_exists(username):
        raise ConflictError("Username already exists")
    if email_exists(email):
        raise ConflictError("Email already exists")


def register(request: RegisterRequest) -> User:
    """Create a self-registered account. Any requested roles are dropped."""
    _ensure_unique(request.username, request.email)
    return create_user(
        username=request.username,
        email=request.email,
        password_hash=hash_password(request.password),
        roles=registration_roles(request.roles),
        first_name=request.first_name,
        last_name=request.last_name,
    )


def authenticate(username_or_email: str, password: str) -> User:
    """Check login credentials.

    Raises:
        InvalidCredentialsError: For an unknown user, a wrong password, or a
            deactivated account. The caller cannot tell these apart.
    """
    user = get_user_by_username_or_email(username_or_email)
    if user is None:
        logger.warning("Login failed: no matching user")
        raise InvalidCredentialsError("Invalid credentials")
    if not verify_password(password, user.password_hash):
        logger.warning(f"Login failed: wrong password for user id={user.id}")
        raise InvalidCredentialsError("Invalid credentials")
    if not user.active:
        logger.warning(f"Login failed: user id={user.id} is deactivated")
        raise InvalidCredentialsError("Invalid credentials")
    return user


def create_account(request: CreateUserRequest) -> User:
    """Admin path: create a user with explicitly chosen roles."""
    roles = assignable_roles(request.roles)
    _ensure_unique(request.username, request.email)
    user = create_user(
        username=request.username,
        email=request.email,
        password_hash=hash_password(request.password),
        roles=roles,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    logger.info(f"Admin created user id={user.id} roles={sorted(roles)}")
    return user


def update_account(user_id: str, request: UpdateUserRequest) -> User:
    """Admin path: patch a user. Uniqueness is re-checked only for changed fields."""
    user = get_user_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")

    changes: dict[str, Any] = {}
    if request.username is not None and request.username != user.username:
        if username_exists(request.username):
            raise ConflictError("Username already exists")
        changes["username"] = request.username
    if request.email is not None and request.email != user.email:
        if email_exists(request.email):
            raise ConflictError("Email already exists")
        changes["email"] = request.email
    if request.password is not None:
        changes["password_hash"] = hash_password(request.password)
    if request.first_name is not None:
        changes["first_name"] = request.first_name
    if request.last_name is not None:
        changes["last_name"] = request.last_name
    if request.roles is not None:
        changes["roles"] = assignable_roles(request.roles)
    if request.active is not None:
        changes["active"] = request.active

    if not changes:
        return user
    updated = update_user(user_id, changes)
    if updated is None:
        raise NotFoundError("User not found")
    return updated
