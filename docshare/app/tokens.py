"""Signed identity tokens (HS512 JWTs) and the FastAPI dependencies that read them."""

import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from docshare.access.roles import authorize
from docshare.errors import InvalidTokenError
from docshare.models.identity import Identity, VALID_ROLES

logger = logging.getLogger(__name__)
bearer_scheme = HTTPBearer(auto_error=False)

JWT_ALGORITHM = "HS512"
# Every token failure looks the same to the caller; the reason is only logged.
AUTHENTICATION_REQUIRED = "Authentication required"
DEFAULT_TOKEN_TTL_SECONDS = 86400  # 24 hours


def get_jwt_secret() -> str:
    """Get the symmetric signing secret from environment.

    This is a required environment variable validated at startup.
    """
    return os.environ["JWT_SECRET"]


def get_token_ttl() -> timedelta:
    """Get the token lifetime from environment, defaulting to 24 hours."""
    seconds = int(os.getenv("JWT_EXPIRATION_SECONDS", DEFAULT_TOKEN_TTL_SECONDS))
    return timedelta(seconds=seconds)


def normalize_roles(raw: Any) -> frozenset[str]:
    """Turn a roles claim into a role set.

    Depending on who serialized the token the claim may be a list, a set or a
    comma-separated string. Duplicates collapse; unknown or missing roles raise
    ValueError.
    """
    if isinstance(raw, str):
        values: Iterable[Any] = raw.split(",")
    elif isinstance(raw, (list, tuple, set, frozenset)):
        values = raw
    else:
        raise ValueError(f"Unsupported roles claim type: {type(raw).__name__}")

    roles = frozenset(str(value).strip() for value in values if str(value).strip())
    if not roles:
        raise ValueError("Roles claim is empty")
    unknown = roles - VALID_ROLES
    if unknown:
        raise ValueError(f"Unknown roles in claim: {sorted(unknown)}")
    return roles


def issue_token(
    identity: Identity,
    *,
    email: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Issue a signed token for an identity.

    The token expires `get_token_ttl()` after `now` (default: the current time).
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": identity.username,
        "userId": identity.user_id,
        "username": identity.username,
        "email": email,
        "roles": sorted(identity.roles),
        "firstName": first_name,
        "lastName": last_name,
        "iat": issued_at,
        "exp": issued_at + get_token_ttl(),
    }
    return jwt.encode(payload, get_jwt_secret(), algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Identity:
    """Verify a token and return the identity it carries.

    Raises:
        InvalidTokenError: Bad signature, malformed token, missing or invalid
            claims, or the token is at or past its expiry time.
    """
    try:
        claims = jwt.decode(
            token,
            get_jwt_secret(),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("token expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"token rejected: {e}") from e

    user_id = claims.get("userId")
    username = claims.get("username") or claims.get("sub")
    if not user_id or not username:
        raise InvalidTokenError("token missing identity claims")

    try:
        roles = normalize_roles(claims.get("roles"))
    except ValueError as e:
        raise InvalidTokenError(f"invalid roles claim: {e}") from e

    return Identity(user_id=str(user_id), username=username, roles=roles)  # type: ignore[arg-type]


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """FastAPI dependency to verify the bearer token.

    Returns the caller's identity, raises 401 if the token is missing or invalid.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTHENTICATION_REQUIRED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return verify_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e.reason}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTHENTICATION_REQUIRED,
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_operation(operation: str) -> Callable:
    """FastAPI dependency factory gating a route on the authorization table.

    Returns the caller's identity if the operation is allowed; a ForbiddenError
    (403) otherwise.
    """

    async def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        authorize(identity, operation)
        return identity

    return dependency


async def require_user(identity: Identity = Depends(get_current_identity)) -> Identity:
    """FastAPI dependency requiring at least the USER role."""
    authorize(identity, "auth.verify")
    return identity
