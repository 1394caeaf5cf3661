"""create songs table

Revision ID: 0001_create_songs
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op

from infra.database.schema import get_db_schema_sql


# revision identifiers, used by Alembic.
revision: str = "0001_create_songs"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # init_raw_db と同じ DDL (IF NOT EXISTS なので再実行しても安全)
    for stmt in [s.strip() for s in get_db_schema_sql().split(';') if s.strip()]:
        op.execute(stmt)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS songs")
    op.execute("DROP SEQUENCE IF EXISTS seq_songs_id")
