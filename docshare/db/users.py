"""Database operations for user management."""

import logging
from typing import Any, Iterable, Optional
from uuid import UUID

from psycopg import errors, sql

from docshare.errors import ConflictError
from docshare.models.user import User
from .connection import get_db_cursor

logger = logging.getLogger(__name__)

USER_COLUMNS = sql.SQL(
    "id, username, email, password_hash, first_name, last_name, roles, active, created_at, updated_at"
)

# Columns an update may touch; anything else passed to update_user is rejected.
UPDATABLE_COLUMNS = frozenset(
    {"username", "email", "password_hash", "first_name", "last_name", "roles", "active"}
)


def _as_uuid(value: str) -> Optional[UUID]:
    """Parse a user id, returning None for strings that cannot be a UUID."""
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


def get_user_by_id(user_id: str) -> Optional[User]:
    """Get a user by primary key."""
    uid = _as_uuid(user_id)
    if uid is None:
        return None
    with get_db_cursor() as cursor:
        cursor.execute(
            sql.SQL("SELECT {columns} FROM users WHERE id = %s").format(
                columns=USER_COLUMNS
            ),
            (uid,),
        )
        row = cursor.fetchone()
        return _row_to_user(row) if row else None


def get_user_by_username_or_email(username_or_email: str) -> Optional[User]:
    """Get a user whose username or email equals the given value."""
    with get_db_cursor() as cursor:
        cursor.execute(
            sql.SQL(
                "SELECT {columns} FROM users WHERE username = %s OR email = %s LIMIT 1"
            ).format(columns=USER_COLUMNS),
            (username_or_email, username_or_email),
        )
        row = cursor.fetchone()
        return _row_to_user(row) if row else None


def username_exists(username: str) -> bool:
    with get_db_cursor() as cursor:
        cursor.execute("SELECT 1 FROM users WHERE username = %s", (username,))
        return cursor.fetchone() is not None


def email_exists(email: str) -> bool:
    with get_db_cursor() as cursor:
        cursor.execute("SELECT 1 FROM users WHERE email = %s", (email,))
        return cursor.fetchone() is not None


def get_all_users(active_only: bool = False) -> list[User]:
    """Get all users, newest first.

    Args:
        active_only: If True, skip deactivated accounts.
    """
    where_clause = sql.SQL("WHERE active") if active_only else sql.SQL("")
    with get_db_cursor() as cursor:
        cursor.execute(
            sql.SQL(
                "SELECT {columns} FROM users {where_clause} ORDER BY created_at DESC"
            ).format(columns=USER_COLUMNS, where_clause=where_clause)
        )
        rows = cursor.fetchall()
        return [_row_to_user(row) for row in rows]


def create_user(
    username: str,
    email: str,
    password_hash: str,
    roles: Iterable[str],
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    active: bool = True,
) -> User:
    """Insert a new user.

    Raises:
        ConflictError: If the username or email is already taken.
    """
    role_list = sorted(roles)
    logger.info(f"Creating user username={username} roles={role_list}")
    try:
        with get_db_cursor() as cursor:
            cursor.execute(
                sql.SQL("""
                    INSERT INTO users (username, email, password_hash, first_name, last_name, roles, active)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    RETURNING {columns}
                """).format(columns=USER_COLUMNS),
                (
                    username,
                    email,
                    password_hash,
                    first_name,
                    last_name,
                    role_list,
                    active,
                ),
            )
            row = cursor.fetchone()
    except errors.UniqueViolation as e:
        logger.warning(f"Duplicate user on create: username={username}")
        raise ConflictError("Username or email already exists") from e
    user = _row_to_user(row)
    logger.info(f"Created user id={user.id}")
    return user


def update_user(user_id: str, changes: dict[str, Any]) -> Optional[User]:
    """Apply a partial update to a user.

    Only the keys present in `changes` are written; `updated_at` is always bumped.

    Returns:
        The updated user, or None if no user has that id.
    """
    unknown = set(changes) - UPDATABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update user columns: {sorted(unknown)}")
    uid = _as_uuid(user_id)
    if uid is None:
        return None

    values = {
        key: sorted(value) if key == "roles" else value for key, value in changes.items()
    }
    assignments = [
        sql.SQL("{} = %s").format(sql.Identifier(key)) for key in values
    ] + [sql.SQL("updated_at = NOW()")]
    query = sql.SQL("UPDATE users SET {assignments} WHERE id = %s RETURNING {columns}").format(
        assignments=sql.SQL(", ").join(assignments),
        columns=USER_COLUMNS,
    )
    try:
        with get_db_cursor() as cursor:
            cursor.execute(query, (*values.values(), uid))
            row = cursor.fetchone()
    except errors.UniqueViolation as e:
        logger.warning(f"Duplicate user on update: id={user_id}")
        raise ConflictError("Username or email already exists") from e
    return _row_to_user(row) if row else None


def delete_user(user_id: str) -> bool:
    """Delete a user. Returns False if no user has that id."""
    uid = _as_uuid(user_id)
    if uid is None:
        return False
    with get_db_cursor() as cursor:
        cursor.execute("DELETE FROM users WHERE id = %s", (uid,))
        deleted = cursor.rowcount > 0
    if deleted:
        logger.info(f"Deleted user id={user_id}")
    return deleted


def _row_to_user(row) -> User:
    """Convert a database row to a User object."""
    (
        id,
        username,
        email,
        password_hash,
        first_name,
        last_name,
        roles,
        active,
        created_at,
        updated_at,
    ) = row
    return User(
        id=str(id),
        username=username,
        email=email,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
        roles=frozenset(roles or ["USER"]),
        active=active,
        created_at=created_at,
        updated_at=updated_at,
    )
