"""Registration, login, and token verification routes."""

import logging

from fastapi import APIRouter, Depends, status

from docshare.models import Identity, UserResponse
from docshare.app.accounts import authenticate, register
from docshare.app.auth import issue_token, require_user
from docshare.app.models import LoginRequest, LoginResponse, RegisterRequest, VerifyResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
def register_user(request: RegisterRequest) -> UserResponse:
    """Create an account with the USER role.

    Roles in the request body are ignored; only admins can grant ADMIN.
    """
    user = register(request)
    logger.info(f"Registered user id={user.id}")
    return UserResponse.from_user(user)


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest) -> LoginResponse:
    """Exchange a username (or email) and password for a bearer token."""
    user = authenticate(request.username_or_email, request.password)
    token = issue_token(
        user.identity(),
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
    )
    return LoginResponse(token=token, user=UserResponse.from_user(user))


@router.get("/verify", response_model=VerifyResponse)
def verify(identity: Identity = Depends(require_user)) -> VerifyResponse:
    """Return the identity carried by a valid token."""
    return VerifyResponse(
        user_id=identity.user_id,
        username=identity.username,
        roles=sorted(identity.roles),
    )
