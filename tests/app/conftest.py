from typing import Iterator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from docshare.app.app import app
from docshare.app.dependencies import blob_store, restrict_document_edits, restrict_search
from docshare.app.tokens import issue_token
from docshare.integrations.blob import S3BlobStore
from docshare.models import Identity

# Matches the owner of DocumentFactory's default document.
ALICE = Identity(
    user_id="00000000-0000-0000-0000-000000000001",
    username="alice",
    roles=frozenset({"USER"}),
)
BOB = Identity(
    user_id="00000000-0000-0000-0000-000000000002",
    username="bob",
    roles=frozenset({"USER"}),
)
ADMIN = Identity(
    user_id="00000000-0000-0000-0000-0000000000aa",
    username="root",
    roles=frozenset({"USER", "ADMIN"}),
)


def bearer(identity: Identity) -> dict[str, str]:
    """Authorization header carrying a freshly issued token for `identity`."""
    return {"Authorization": f"Bearer {issue_token(identity)}"}


@pytest.fixture(scope="session")
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def blob() -> Iterator[MagicMock]:
    """Replace the blob store dependency with a mock for one test."""
    store = MagicMock(spec=S3BlobStore)
    store.get.return_value = b"file-content"
    store.content_type.return_value = "application/pdf"
    store.delete.return_value = True
    app.dependency_overrides[blob_store] = lambda: store
    try:
        yield store
    finally:
        app.dependency_overrides.pop(blob_store, None)


@pytest.fixture
def restricted_edits() -> Iterator[None]:
    """Limit update/share to the owner and admins for one test."""
    app.dependency_overrides[restrict_document_edits] = lambda: True
    try:
        yield
    finally:
        app.dependency_overrides.pop(restrict_document_edits, None)


@pytest.fixture
def restricted_search() -> Iterator[None]:
    """Limit search results to documents the caller can open for one test."""
    app.dependency_overrides[restrict_search] = lambda: True
    try:
        yield
    finally:
        app.dependency_overrides.pop(restrict_search, None)
