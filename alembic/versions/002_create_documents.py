"""002: create documents table

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE documents (
            collection      VARCHAR(32)     NOT NULL,
            id              CHAR(24)        NOT NULL,
            body            JSONB           NOT NULL DEFAULT '{}'::jsonb,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT pk_documents PRIMARY KEY (collection, id),
            CONSTRAINT ck_documents_collection CHECK (collection IN (
                'team', 'player', 'fixture', 'standing',
                'news', 'transfer', 'award', 'player_stat'
            )),
            CONSTRAINT ck_documents_id_hex CHECK (id ~ '^[0-9a-f]{24}$')
        );
    """)
    # containment filters: body @> '{"team": "..."}'
    op.execute("CREATE INDEX idx_documents_body ON documents USING GIN (body jsonb_path_ops);")
    op.execute("CREATE INDEX idx_documents_created ON documents (collection, created_at DESC);")
    op.execute("""
        CREATE UNIQUE INDEX uq_documents_team_name ON documents ((body ->> 'name'))
            WHERE collection = 'team';
    """)
    op.execute("""
        CREATE UNIQUE INDEX uq_documents_team_code ON documents ((body ->> 'code'))
            WHERE collection = 'team';
    """)
    op.execute("""
        CREATE TRIGGER trg_documents_updated_at
            BEFORE UPDATE ON documents
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE documents IS 'League entities, one JSONB body per row';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS documents CASCADE;")
