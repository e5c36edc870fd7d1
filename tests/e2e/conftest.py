import os
from pathlib import Path
from typing import Iterator
from uuid import uuid4

import pytest
from testcontainers.postgres import PostgresContainer
from alembic.config import Config
from alembic import command
from fastapi.testclient import TestClient

# Ensure allowed environment for env_loader
os.environ.setdefault("ENV", "dev")


class InMemoryBlobStore:
    """Blob store double keeping objects in a dict, keyed like the S3 store."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}

    def put(self, key: str, data: bytes, content_type: str | None = None) -> None:
        self.objects[key] = (data, content_type or "application/octet-stream")

    def get(self, key: str) -> bytes:
        return self.objects[key][0]

    def content_type(self, key: str) -> str:
        return self.objects[key][1]

    def exists(self, key: str) -> bool:
        return key in self.objects

    def delete(self, key: str) -> bool:
        return self.objects.pop(key, None) is not None


@pytest.fixture(scope="session")
def db_url() -> Iterator[str]:
    """Start a Postgres container, run migrations, and return the DB URL."""
    with PostgresContainer("postgres:16") as pg:
        raw_url = pg.get_connection_url()
        # Normalize to psycopg3-compatible URL if needed
        url = raw_url.replace("postgresql+psycopg2://", "postgresql://")
        os.environ["DATABASE_URL"] = url

        # Run Alembic migrations against this database
        repo_dir = Path(__file__).resolve().parents[2]
        alembic_cfg = Config(str(repo_dir / "alembic.ini"))
        command.upgrade(alembic_cfg, "head")

        yield url


@pytest.fixture(scope="session")
def blob() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture(scope="session")
def client(db_url: str, blob: InMemoryBlobStore) -> Iterator[TestClient]:
    """Unauthenticated test client backed by the migrated database."""
    from docshare.app.app import app
    from docshare.app.dependencies import blob_store

    app.dependency_overrides[blob_store] = lambda: blob
    yield TestClient(app)
    app.dependency_overrides.pop(blob_store, None)


def unique_name(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:8]}"


def register_and_login(client: TestClient, prefix: str) -> tuple[dict, dict[str, str]]:
    """Register a fresh account and return (user json, auth headers)."""
    username = unique_name(prefix)
    registered = client.post(
        "/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "Secret12!",
            "first_name": prefix.title(),
            "last_name": "Tester",
        },
    )
    assert registered.status_code == 201, registered.text
    login = client.post(
        "/auth/login", json={"username_or_email": username, "password": "Secret12!"}
    )
    assert login.status_code == 200, login.text
    body = login.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def alice(client: TestClient) -> tuple[dict, dict[str, str]]:
    return register_and_login(client, "alice")


@pytest.fixture
def bob(client: TestClient) -> tuple[dict, dict[str, str]]:
    return register_and_login(client, "bob")


@pytest.fixture
def admin(client: TestClient) -> tuple[dict, dict[str, str]]:
    """An ADMIN account. Registration cannot grant ADMIN, so insert it directly."""
    from docshare.app.passwords import hash_password
    from docshare.app.tokens import issue_token
    from docshare.db.users import create_user
    from docshare.models import UserResponse

    username = unique_name("admin")
    user = create_user(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password("Secret12!"),
        roles={"ADMIN", "USER"},
    )
    headers = {"Authorization": f"Bearer {issue_token(user.identity())}"}
    return UserResponse.from_user(user).model_dump(mode="json"), headers


def upload(
    client: TestClient,
    headers: dict[str, str],
    name: str,
    description: str | None = None,
    team_shared: bool = False,
    file_name: str = "notes.txt",
    content: bytes = b"hello world",
) -> dict:
    data = {"name": name, "team_shared": str(team_shared).lower()}
    if description is not None:
        data["description"] = description
    response = client.post(
        "/documents/upload",
        files={"file": (file_name, content, "text/plain")},
        data=data,
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()
