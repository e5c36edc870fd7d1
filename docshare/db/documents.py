"""Database operations for document records."""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional
from uuid import UUID

from psycopg import errors, sql

from docshare.errors import ConflictError
from docshare.models.document import Document
from .connection import get_db_cursor

logger = logging.getLogger(__name__)

DOCUMENT_COLUMNS = sql.SQL(
    "id, name, description, file_name, file_type, file_size, content_type, owner_id, "
    "owner_name, blob_key, shareable_link, team_shared, shared_with_users, "
    "created_at, updated_at, last_accessed_at"
)

# Fields a document update may change. Owner, link and blob are fixed at upload.
UPDATABLE_COLUMNS = frozenset({"name", "description", "team_shared", "shared_with_users"})


def _as_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _select_documents(
    conditions: list[sql.Composable],
    params: list[Any],
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[Document]:
    """Run a document query, newest first, with an optional offset/limit window."""
    where_clause = (
        sql.SQL("WHERE ") + sql.SQL(" AND ").join(conditions)
        if conditions
        else sql.SQL("")
    )
    window = sql.SQL("")
    if limit is not None:
        window = sql.SQL("LIMIT %s OFFSET %s")
        params = [*params, limit, offset]

    query = sql.SQL("""
        SELECT {columns}
        FROM documents
        {where_clause}
        ORDER BY created_at DESC, id
        {window}
    """).format(columns=DOCUMENT_COLUMNS, where_clause=where_clause, window=window)

    with get_db_cursor() as cursor:
        cursor.execute(query, params)
        rows = cursor.fetchall()
        return [_row_to_document(row) for row in rows]


def create_document(
    *,
    name: str,
    description: Optional[str],
    file_name: str,
    file_type: str,
    file_size: int,
    content_type: str,
    owner_id: str,
    owner_name: str,
    blob_key: str,
    shareable_link: str,
    team_shared: bool = False,
    shared_with_users: Iterable[str] = (),
) -> Document:
    """Insert a document record.

    Raises:
        ConflictError: If the shareable link is already in use.
    """
    try:
        with get_db_cursor() as cursor:
            cursor.execute(
                sql.SQL("""
                    INSERT INTO documents (
                        name, description, file_name, file_type, file_size, content_type,
                        owner_id, owner_name, blob_key, shareable_link, team_shared, shared_with_users
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {columns}
                """).format(columns=DOCUMENT_COLUMNS),
                (
                    name,
                    description,
                    file_name,
                    file_type,
                    file_size,
                    content_type,
                    owner_id,
                    owner_name,
                    blob_key,
                    shareable_link,
                    team_shared,
                    sorted(shared_with_users),
                ),
            )
            row = cursor.fetchone()
    except errors.UniqueViolation as e:
        logger.error(f"Shareable link collision for owner={owner_id}")
        raise ConflictError("Shareable link already exists") from e
    document = _row_to_document(row)
    logger.info(f"Created document id={document.id} owner={owner_id}")
    return document


def get_document_by_id(document_id: str) -> Optional[Document]:
    """Get a document by primary key."""
    doc_id = _as_uuid(document_id)
    if doc_id is None:
        return None
    with get_db_cursor() as cursor:
        cursor.execute(
            sql.SQL("SELECT {columns} FROM documents WHERE id = %s").format(
                columns=DOCUMENT_COLUMNS
            ),
            (doc_id,),
        )
        row = cursor.fetchone()
        return _row_to_document(row) if row else None


def get_document_by_shareable_link(shareable_link: str) -> Optional[Document]:
    """Get the single document behind a shareable link, if any."""
    with get_db_cursor() as cursor:
        cursor.execute(
            sql.SQL("SELECT {columns} FROM documents WHERE shareable_link = %s").format(
                columns=DOCUMENT_COLUMNS
            ),
            (shareable_link,),
        )
        row = cursor.fetchone()
        return _row_to_document(row) if row else None


def get_documents_by_owner(
    owner_id: str, limit: Optional[int] = None, offset: int = 0
) -> list[Document]:
    return _select_documents([sql.SQL("owner_id = %s")], [owner_id], limit, offset)


def get_team_documents(limit: Optional[int] = None, offset: int = 0) -> list[Document]:
    return _select_documents([sql.SQL("team_shared")], [], limit, offset)


def get_documents_shared_with(
    user_id: str, limit: Optional[int] = None, offset: int = 0
) -> list[Document]:
    return _select_documents(
        [sql.SQL("%s = ANY(shared_with_users)")], [user_id], limit, offset
    )


def get_all_documents(limit: Optional[int] = None, offset: int = 0) -> list[Document]:
    return _select_documents([], [], limit, offset)


def search_documents(
    term: str,
    visible_to: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[Document]:
    """Case-insensitive substring match on name OR description.

    Args:
        term: Text to look for. Wildcard characters are matched literally.
        visible_to: If set, only documents this user id owns, is shared on, or
            that are team-shared are returned.
    """
    pattern = f"%{escape_like(term)}%"
    conditions: list[sql.Composable] = [
        sql.SQL("(name ILIKE %s OR description ILIKE %s)")
    ]
    params: list[Any] = [pattern, pattern]
    if visible_to is not None:
        conditions.append(
            sql.SQL("(owner_id = %s OR team_shared OR %s = ANY(shared_with_users))")
        )
        params.extend([visible_to, visible_to])
    return _select_documents(conditions, params, limit, offset)


def update_document(document_id: str, changes: dict[str, Any]) -> Optional[Document]:
    """Apply a partial update; keys absent from `changes` keep their stored value.

    Returns:
        The updated document, or None if no document has that id.
    """
    unknown = set(changes) - UPDATABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update document columns: {sorted(unknown)}")
    doc_id = _as_uuid(document_id)
    if doc_id is None:
        return None

    values = {
        key: sorted(value) if key == "shared_with_users" else value
        for key, value in changes.items()
    }
    assignments = [
        sql.SQL("{} = %s").format(sql.Identifier(key)) for key in values
    ] + [sql.SQL("updated_at = NOW()")]
    query = sql.SQL(
        "UPDATE documents SET {assignments} WHERE id = %s RETURNING {columns}"
    ).format(assignments=sql.SQL(", ").join(assignments), columns=DOCUMENT_COLUMNS)

    with get_db_cursor() as cursor:
        cursor.execute(query, (*values.values(), doc_id))
        row = cursor.fetchone()
    if row is None:
        return None
    logger.info(f"Updated document id={document_id} fields={sorted(changes)}")
    return _row_to_document(row)


def touch_last_accessed(
    document_id: str, accessed_at: Optional[datetime] = None
) -> None:
    """Record a successful content retrieval."""
    accessed_at = accessed_at or datetime.now(timezone.utc)
    with get_db_cursor() as cursor:
        cursor.execute(
            "UPDATE documents SET last_accessed_at = %s WHERE id = %s",
            (accessed_at, _as_uuid(document_id)),
        )


def delete_document(document_id: str) -> bool:
    """Delete a document record. Returns False if no document has that id."""
    doc_id = _as_uuid(document_id)
    if doc_id is None:
        return False
    with get_db_cursor() as cursor:
        cursor.execute("DELETE FROM documents WHERE id = %s", (doc_id,))
        return cursor.rowcount > 0


def _row_to_document(row) -> Document:
    """Convert a database row to a Document object."""
    (
        id,
        name,
        description,
        file_name,
        file_type,
        file_size,
        content_type,
        owner_id,
        owner_name,
        blob_key,
        shareable_link,
        team_shared,
        shared_with_users,
        created_at,
        updated_at,
        last_accessed_at,
    ) = row
    return Document(
        id=str(id),
        name=name,
        description=description,
        file_name=file_name,
        file_type=file_type,
        file_size=file_size,
        content_type=content_type,
        owner_id=owner_id,
        owner_name=owner_name,
        blob_key=blob_key,
        shareable_link=shareable_link,
        team_shared=team_shared,
        shared_with_users=frozenset(shared_with_users or []),
        created_at=created_at,
        updated_at=updated_at,
        last_accessed_at=last_accessed_at,
    )
