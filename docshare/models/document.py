from __future__ import annotations
from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel, Field


def format_file_size(size: int) -> str:
    """Human-readable size: bytes below 1 KiB, one decimal above."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    if size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    return f"{size / (1024 * 1024 * 1024):.1f} GB"


def clean_shared_users(user_ids: Iterable[str], owner_id: str) -> frozenset[str]:
    """Normalize a shared-user list: strip blanks and duplicates, drop the owner."""
    cleaned = {user_id.strip() for user_id in user_ids if user_id and user_id.strip()}
    cleaned.discard(owner_id)
    return frozenset(cleaned)


class Document(BaseModel):
    """A stored file and its sharing state.

    `owner_id` and `shareable_link` are fixed at upload. Owner access is implied,
    so `shared_with_users` never contains the owner.
    """

    id: str
    name: str
    description: Optional[str] = None
    file_name: str
    file_type: str  # Lower-cased extension including the dot, e.g. ".pdf"
    file_size: int
    content_type: str = "application/octet-stream"
    owner_id: str
    owner_name: str
    blob_key: str
    shareable_link: str
    team_shared: bool = False
    shared_with_users: frozenset[str] = frozenset()
    created_at: datetime
    updated_at: datetime
    last_accessed_at: Optional[datetime] = None

    @property
    def formatted_file_size(self) -> str:
        return format_file_size(self.file_size)

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def is_shared_with(self, user_id: str) -> bool:
        return user_id in self.shared_with_users


class DocumentResponse(BaseModel):
    """Document metadata as returned by the API."""

    id: str
    name: str
    description: Optional[str] = None
    file_name: str
    file_type: str
    file_size: int
    formatted_file_size: str
    owner_id: str
    owner_name: str
    shareable_link: str
    team_shared: bool
    shared_with_users: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    last_accessed_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: Document) -> DocumentResponse:
        return cls(
            id=document.id,
            name=document.name,
            description=document.description,
            file_name=document.file_name,
            file_type=document.file_type,
            file_size=document.file_size,
            formatted_file_size=document.formatted_file_size,
            owner_id=document.owner_id,
            owner_name=document.owner_name,
            shareable_link=document.shareable_link,
            team_shared=document.team_shared,
            shared_with_users=sorted(document.shared_with_users),
            created_at=document.created_at,
            updated_at=document.updated_at,
            last_accessed_at=document.last_accessed_at,
        )


class DocumentPage(BaseModel):
    """One window of a document listing."""

    documents: list[DocumentResponse]
    page: Optional[int] = None
    size: Optional[int] = None
    count: int  # Documents in this window
