"""003: seed league teams

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_TEAM_IDS = [f"{n:024x}" for n in range(1, 7)]


def upgrade() -> None:
    op.execute("""
        INSERT INTO documents (collection, id, body) VALUES
            ('team', '000000000000000000000001',
             '{"name": "Dragons", "code": "DRA", "crestUrl": "/assets/images/dragons-logo.png"}'),
            ('team', '000000000000000000000002',
             '{"name": "Vikings", "code": "VIK", "crestUrl": "/assets/images/vikings-logo.png"}'),
            ('team', '000000000000000000000003',
             '{"name": "Warriors", "code": "WAR", "crestUrl": "/assets/images/warriors-logo.png"}'),
            ('team', '000000000000000000000004',
             '{"name": "Lions", "code": "LIO", "crestUrl": "/assets/images/lions-logo.png"}'),
            ('team', '000000000000000000000005',
             '{"name": "Elites", "code": "ELI", "crestUrl": "/assets/images/elites-logo.png"}'),
            ('team', '000000000000000000000006',
             '{"name": "Falcons", "code": "FAL", "crestUrl": "/assets/images/falcons-logo.png"}');
    """)


def downgrade() -> None:
    ids = ", ".join(f"'{doc_id}'" for doc_id in _TEAM_IDS)
    op.execute(f"DELETE FROM documents WHERE collection = 'team' AND id IN ({ids});")
