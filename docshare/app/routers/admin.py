"""Admin user management routes."""

import logging

from fastapi import APIRouter, Depends, status

from docshare.db.users import delete_user, get_all_users, get_user_by_id
from docshare.errors import NotFoundError
from docshare.models import Identity, UserResponse
from docshare.app.accounts import create_account, update_account
from docshare.app.auth import require_operation
from docshare.app.models import CreateUserRequest, UpdateUserRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[UserResponse])
def list_users(
    _identity: Identity = Depends(require_operation("users.list")),
) -> list[UserResponse]:
    return [UserResponse.from_user(user) for user in get_all_users()]


@router.get("/users/active", response_model=list[UserResponse])
def list_active_users(
    _identity: Identity = Depends(require_operation("users.list_active")),
) -> list[UserResponse]:
    return [UserResponse.from_user(user) for user in get_all_users(active_only=True)]


@router.get("/users/{user_id}", response_model=UserResponse)
def read_user(
    user_id: str,
    _identity: Identity = Depends(require_operation("users.read")),
) -> UserResponse:
    user = get_user_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User with ID '{user_id}' not found")
    return UserResponse.from_user(user)


@router.post(
    "/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
def create_user(
    request: CreateUserRequest,
    _identity: Identity = Depends(require_operation("users.create")),
) -> UserResponse:
    """Create a user with explicit roles (default USER)."""
    return UserResponse.from_user(create_account(request))


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    request: UpdateUserRequest,
    _identity: Identity = Depends(require_operation("users.update")),
) -> UserResponse:
    """Patch a user; omitted fields are left unchanged."""
    return UserResponse.from_user(update_account(user_id, request))


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(
    user_id: str,
    identity: Identity = Depends(require_operation("users.delete")),
) -> None:
    if not delete_user(user_id):
        raise NotFoundError(f"User with ID '{user_id}' not found")
    logger.info(f"User id={user_id} deleted by {identity.username}")
