"""Document upload, listing, download, sharing and deletion routes."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from docshare.access import visibility
from docshare.access.policy import can_access, can_delete, can_modify, can_team_delete
from docshare.access.visibility import DEFAULT_PAGE_SIZE, PageRequest
from docshare.db.documents import (
    create_document,
    delete_document,
    get_document_by_id,
    touch_last_accessed,
    update_document,
)
from docshare.errors import ForbiddenError, NotFoundError
from docshare.integrations.blob import BlobStoreError, S3BlobStore
from docshare.models import (
    Document,
    DocumentPage,
    DocumentResponse,
    Identity,
    clean_shared_users,
)
from docshare.utils.files import (
    generate_blob_key,
    generate_shareable_link,
    parse_user_id_list,
    validate_upload,
)
from docshare.app.auth import require_operation
from docshare.app.dependencies import (
    blob_store,
    max_upload_bytes,
    restrict_document_edits,
    restrict_search,
)
from docshare.app.models import ShareDocumentRequest, UpdateDocumentRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


def page_request(
    page: Optional[int] = Query(None, ge=0, description="Zero-based page number"),
    size: Optional[int] = Query(None, description="Page size"),
) -> Optional[PageRequest]:
    """Optional pagination; without either parameter the full list is returned."""
    if page is None and size is None:
        return None
    return PageRequest(
        page=0 if page is None else page,
        size=DEFAULT_PAGE_SIZE if size is None else size,
    )


def _page_response(
    documents: list[Document], page: Optional[PageRequest]
) -> DocumentPage:
    return DocumentPage(
        documents=[DocumentResponse.from_document(doc) for doc in documents],
        page=page.page if page else None,
        size=page.size if page else None,
        count=len(documents),
    )


def _get_document_or_404(document_id: str) -> Document:
    document = get_document_by_id(document_id)
    if document is None:
        raise NotFoundError(f"Document with ID '{document_id}' not found")
    return document


def _content_response(document: Document, store: S3BlobStore) -> Response:
    data = store.get(document.blob_key)
    safe_name = document.file_name.replace('"', "'")
    return Response(
        content=data,
        media_type=document.content_type,
        headers={"Content-Disposition": f'attachment; filename="{safe_name}"'},
    )


def _remove_document(document: Document, store: S3BlobStore) -> None:
    """Delete the stored content, then the record."""
    store.delete(document.blob_key)
    if not delete_document(document.id):
        raise NotFoundError(f"Document with ID '{document.id}' not found")


@router.post(
    "/upload", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED
)
def upload_document(
    file: UploadFile = File(...),
    name: str = Form(..., min_length=1, max_length=255),
    description: Optional[str] = Form(None, max_length=1000),
    team_shared: bool = Form(False),
    shared_with_users: Optional[str] = Form(None),
    identity: Identity = Depends(require_operation("documents.upload")),
    store: S3BlobStore = Depends(blob_store),
    max_bytes: int = Depends(max_upload_bytes),
) -> DocumentResponse:
    """Upload a file and create its document record.

    `shared_with_users` is a comma-separated list of user IDs. The owner is
    dropped from it if present.
    """
    if file.size is not None:
        validate_upload(file.filename, file.size, max_bytes)
    # Never buffer more than one byte past the limit.
    data = file.file.read(max_bytes + 1)
    extension = validate_upload(file.filename, len(data), max_bytes)
    content_type = file.content_type or "application/octet-stream"
    blob_key = generate_blob_key(identity.user_id, extension)

    store.put(blob_key, data, content_type)
    try:
        document = create_document(
            name=name,
            description=description,
            file_name=file.filename or blob_key,
            file_type=extension,
            file_size=len(data),
            content_type=content_type,
            owner_id=identity.user_id,
            owner_name=identity.username,
            blob_key=blob_key,
            shareable_link=generate_shareable_link(),
            team_shared=team_shared,
            shared_with_users=clean_shared_users(
                parse_user_id_list(shared_with_users), identity.user_id
            ),
        )
    except Exception:
        logger.exception(f"Creating record for blob {blob_key} failed, removing blob")
        try:
            store.delete(blob_key)
        except BlobStoreError:
            logger.exception(f"Could not remove orphaned blob {blob_key}")
        raise
    return DocumentResponse.from_document(document)


@router.get("/my-files", response_model=DocumentPage)
def read_my_documents(
    page: Optional[PageRequest] = Depends(page_request),
    identity: Identity = Depends(require_operation("documents.list_mine")),
) -> DocumentPage:
    """Documents owned by the caller, newest first."""
    return _page_response(visibility.mine(identity, page), page)


@router.get("/team-files", response_model=DocumentPage)
def read_team_documents(
    page: Optional[PageRequest] = Depends(page_request),
    identity: Identity = Depends(require_operation("documents.list_team")),
) -> DocumentPage:
    """Team-shared documents, newest first."""
    return _page_response(visibility.team(identity, page), page)


@router.get("/shared-with-me", response_model=DocumentPage)
def read_shared_documents(
    page: Optional[PageRequest] = Depends(page_request),
    identity: Identity = Depends(require_operation("documents.list_shared")),
) -> DocumentPage:
    """Documents other users explicitly shared with the caller."""
    return _page_response(visibility.shared_with_me(identity, page), page)


@router.get("/search", response_model=DocumentPage)
def search_documents(
    q: str = Query(..., min_length=1, description="Text to find in name or description"),
    page: Optional[PageRequest] = Depends(page_request),
    identity: Identity = Depends(require_operation("documents.search")),
    visible_only: bool = Depends(restrict_search),
) -> DocumentPage:
    """Search every document unless RESTRICT_SEARCH limits it to visible ones."""
    documents = visibility.search(identity, q, page, visible_only=visible_only)
    return _page_response(documents, page)


@router.get("/share/{shareable_link}")
def download_by_link(
    shareable_link: str,
    store: S3BlobStore = Depends(blob_store),
) -> Response:
    """Download a document by its shareable link. No authentication needed."""
    document = visibility.by_shareable_link(shareable_link)
    if document is None:
        raise NotFoundError("Shared document not found")
    response = _content_response(document, store)
    touch_last_accessed(document.id)
    return response


@router.get("/admin/all", response_model=DocumentPage)
def admin_read_all_documents(
    page: Optional[PageRequest] = Depends(page_request),
    identity: Identity = Depends(require_operation("documents.admin_list_all")),
) -> DocumentPage:
    return _page_response(visibility.all_documents(identity, page), page)


@router.get("/admin/team", response_model=DocumentPage)
def admin_read_team_documents(
    page: Optional[PageRequest] = Depends(page_request),
    identity: Identity = Depends(require_operation("documents.admin_list_team")),
) -> DocumentPage:
    return _page_response(visibility.team(identity, page), page)


@router.delete("/admin/team/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_team_document(
    document_id: str,
    identity: Identity = Depends(require_operation("documents.admin_team_delete")),
    store: S3BlobStore = Depends(blob_store),
) -> None:
    """Delete a team-shared document. Private documents are refused."""
    document = _get_document_or_404(document_id)
    if not can_team_delete(identity, document):
        logger.warning(
            f"Team delete refused for private document id={document_id} by {identity.username}"
        )
        raise ForbiddenError("Only team-shared documents can be deleted here")
    _remove_document(document, store)
    logger.info(f"Team document id={document_id} deleted by admin {identity.username}")


@router.get("/{document_id}", response_model=DocumentResponse)
def read_document(
    document_id: str,
    identity: Identity = Depends(require_operation("documents.read")),
) -> DocumentResponse:
    """Document metadata. Reading metadata does not count as an access."""
    document = _get_document_or_404(document_id)
    if not can_access(identity, document):
        raise ForbiddenError("You do not have access to this document")
    return DocumentResponse.from_document(document)


@router.get("/{document_id}/download")
def download_document(
    document_id: str,
    identity: Identity = Depends(require_operation("documents.download")),
    store: S3BlobStore = Depends(blob_store),
) -> Response:
    """Download document content. Only successful downloads update last access."""
    document = _get_document_or_404(document_id)
    if not can_access(identity, document):
        logger.warning(
            f"Download denied: user={identity.username} document id={document_id}"
        )
        raise ForbiddenError("You do not have access to this document")
    response = _content_response(document, store)
    touch_last_accessed(document.id)
    return response


def _apply_changes(document: Document, changes: dict[str, Any]) -> Document:
    if "shared_with_users" in changes:
        changes["shared_with_users"] = clean_shared_users(
            changes["shared_with_users"], document.owner_id
        )
    if not changes:
        return document
    updated = update_document(document.id, changes)
    if updated is None:
        raise NotFoundError(f"Document with ID '{document.id}' not found")
    return updated


@router.post("/{document_id}/share", response_model=DocumentResponse)
def share_document(
    document_id: str,
    request: ShareDocumentRequest,
    identity: Identity = Depends(require_operation("documents.share")),
    owner_only: bool = Depends(restrict_document_edits),
) -> DocumentResponse:
    """Change team sharing and the set of users the document is shared with."""
    document = _get_document_or_404(document_id)
    if not can_modify(identity, document, owner_only=owner_only):
        raise ForbiddenError("Only the owner or an admin can share this document")
    changes = request.model_dump(exclude_none=True)
    return DocumentResponse.from_document(_apply_changes(document, changes))


@router.put("/{document_id}", response_model=DocumentResponse)
def update_document_metadata(
    document_id: str,
    request: UpdateDocumentRequest,
    identity: Identity = Depends(require_operation("documents.update")),
    owner_only: bool = Depends(restrict_document_edits),
) -> DocumentResponse:
    """Update name, description or sharing. Omitted fields are left unchanged."""
    document = _get_document_or_404(document_id)
    if not can_modify(identity, document, owner_only=owner_only):
        raise ForbiddenError("Only the owner or an admin can modify this document")
    changes = request.model_dump(exclude_none=True)
    return DocumentResponse.from_document(_apply_changes(document, changes))


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_document(
    document_id: str,
    identity: Identity = Depends(require_operation("documents.delete")),
    store: S3BlobStore = Depends(blob_store),
) -> None:
    """Delete a document. Owners may delete their own; admins any document."""
    document = _get_document_or_404(document_id)
    if not can_delete(identity, document):
        raise ForbiddenError("Only the owner or an admin can delete this document")
    _remove_document(document, store)
    logger.info(f"Document id={document_id} deleted by {identity.username}")
