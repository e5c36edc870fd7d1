"""create_documents_table

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 09:31:02.447915+00:00

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE IF NOT EXISTS documents (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            name VARCHAR(255) NOT NULL,
            description VARCHAR(1000),
            file_name TEXT NOT NULL,
            file_type VARCHAR(16) NOT NULL,
            file_size BIGINT NOT NULL CHECK (file_size > 0),
            content_type TEXT NOT NULL DEFAULT 'application/octet-stream',
            -- No foreign key: documents outlive the account that uploaded them.
            owner_id TEXT NOT NULL,
            owner_name TEXT NOT NULL,
            blob_key TEXT NOT NULL UNIQUE,
            shareable_link TEXT NOT NULL UNIQUE,
            team_shared BOOLEAN NOT NULL DEFAULT FALSE,
            shared_with_users TEXT[] NOT NULL DEFAULT '{}',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            last_accessed_at TIMESTAMPTZ,
            CHECK (NOT (owner_id = ANY(shared_with_users)))
        );

        CREATE INDEX IF NOT EXISTS idx_documents_owner_id ON documents(owner_id);
        CREATE INDEX IF NOT EXISTS idx_documents_team_shared ON documents(team_shared)
            WHERE team_shared;
        CREATE INDEX IF NOT EXISTS idx_documents_shared_with_users
            ON documents USING GIN (shared_with_users);
        CREATE INDEX IF NOT EXISTS idx_documents_created_at ON documents(created_at DESC);

        -- Create trigger to update updated_at timestamp
        -- Recording a download must not count as a modification.
        CREATE OR REPLACE FUNCTION update_documents_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            IF (NEW.name, NEW.description, NEW.team_shared, NEW.shared_with_users)
                IS DISTINCT FROM
               (OLD.name, OLD.description, OLD.team_shared, OLD.shared_with_users) THEN
                NEW.updated_at = NOW();
            END IF;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;

        DROP TRIGGER IF EXISTS documents_updated_at_trigger ON documents;
        CREATE TRIGGER documents_updated_at_trigger
            BEFORE UPDATE ON documents
            FOR EACH ROW
            EXECUTE FUNCTION update_documents_updated_at();
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("""
        DROP TRIGGER IF EXISTS documents_updated_at_trigger ON documents;
        DROP FUNCTION IF EXISTS update_documents_updated_at();
        DROP TABLE IF EXISTS documents CASCADE;
    """)
