"""Per-document access decisions.

Pure functions of the caller's identity and the document record; none of them
touch the database or the blob store.
"""

from typing import Optional

from docshare.models.document import Document
from docshare.models.identity import Identity
from .roles import has_role


def can_access(identity: Optional[Identity], document: Document) -> bool:
    """Whether the caller may read or download the document by id.

    Granted to the owner, to everyone for team-shared documents, and to users in
    the document's shared set. Anonymous callers only get in through the
    shareable link, never through this check.
    """
    if identity is None:
        return False
    return (
        document.is_owned_by(identity.user_id)
        or document.team_shared
        or document.is_shared_with(identity.user_id)
    )


def can_delete(identity: Optional[Identity], document: Document) -> bool:
    """General delete path: admins may delete anything, others only what they own."""
    if identity is None:
        return False
    if has_role(identity, "ADMIN"):
        return True
    return document.is_owned_by(identity.user_id)


def can_team_delete(identity: Optional[Identity], document: Document) -> bool:
    """Admin team-delete path.

    Only team-shared documents qualify, so an admin cannot use this path to
    remove another user's private document.
    """
    return has_role(identity, "ADMIN") and document.team_shared


def can_modify(
    identity: Optional[Identity], document: Document, owner_only: bool = False
) -> bool:
    """Whether the caller may change name, description or sharing state.

    By default any authenticated caller may modify. With `owner_only` the owner
    and admins are the only ones allowed.
    """
    if identity is None:
        return False
    if not owner_only:
        return True
    return document.is_owned_by(identity.user_id) or has_role(identity, "ADMIN")
