"""Document visibility: which documents a caller can list.

Each view takes the caller's identity explicitly and delegates the query to the
record store. Pagination only windows a view's ordering, it never changes which
documents belong to it.
"""

from dataclasses import dataclass
from typing import Optional

from docshare.db.documents import (
    get_all_documents,
    get_document_by_shareable_link,
    get_documents_by_owner,
    get_documents_shared_with,
    get_team_documents,
    search_documents,
)
from docshare.errors import ValidationFailedError
from docshare.models.document import Document
from docshare.models.identity import Identity
from .roles import has_role, require_role

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page number and page size."""

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValidationFailedError("page must be >= 0")
        if not 1 <= self.size <= MAX_PAGE_SIZE:
            raise ValidationFailedError(f"size must be between 1 and {MAX_PAGE_SIZE}")

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def limit(self) -> int:
        return self.size


def _window(page: Optional[PageRequest]) -> dict[str, Optional[int]]:
    if page is None:
        return {"limit": None, "offset": 0}
    return {"limit": page.limit, "offset": page.offset}


def mine(identity: Identity, page: Optional[PageRequest] = None) -> list[Document]:
    """Documents the caller owns, newest first."""
    return get_documents_by_owner(identity.user_id, **_window(page))


def team(identity: Identity, page: Optional[PageRequest] = None) -> list[Document]:
    """Team-shared documents, newest first.

    Every authenticated user sees the same set; the identity is only required so
    anonymous callers cannot list it.
    """
    return get_team_documents(**_window(page))


def shared_with_me(
    identity: Identity, page: Optional[PageRequest] = None
) -> list[Document]:
    """Documents explicitly shared with the caller, newest first."""
    return get_documents_shared_with(identity.user_id, **_window(page))


def by_shareable_link(link: str) -> Optional[Document]:
    """The document behind a shareable link, if any.

    No identity is involved: holding the link is the capability.
    """
    return get_document_by_shareable_link(link)


def search(
    identity: Identity,
    term: str,
    page: Optional[PageRequest] = None,
    *,
    visible_only: bool = False,
) -> list[Document]:
    """Case-insensitive substring search over name or description.

    Every document is searched. With `visible_only`, non-admins only get back
    documents they could open.
    """
    visible_to = (
        identity.user_id if visible_only and not has_role(identity, "ADMIN") else None
    )
    return search_documents(term, visible_to=visible_to, **_window(page))


def all_documents(
    identity: Identity, page: Optional[PageRequest] = None
) -> list[Document]:
    """Every document in the store. Admin only."""
    require_role(identity, "ADMIN")
    return get_all_documents(**_window(page))
